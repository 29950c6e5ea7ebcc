# docnotes/models/user.py
"""
Database model for users.
Represents an account that authors entries, votes and joins teams.
"""
from tortoise import fields, models


class User(models.Model):
    """
    User database model.

    Relationships:
    - Has many Entries (via related_name="entries")
    - Has many Votes (via related_name="votes")
    - Has many TeamMemberships (via related_name="memberships")

    Security:
    - Password is stored as an Argon2 hash, never in plain text
    - remember_token is the opaque session handle; null when logged out
    - moderator is the global override flag for entry moderation
    """
    id = fields.IntField(pk=True)
    username = fields.CharField(max_length=255, unique=True, index=True)
    email = fields.CharField(max_length=255, unique=True, null=True)
    password_hash = fields.CharField(max_length=255)
    remember_token = fields.CharField(max_length=100, null=True, index=True)
    moderator = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"
