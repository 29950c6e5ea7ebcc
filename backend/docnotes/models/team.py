# docnotes/models/team.py
"""
Database models for teams and their memberships.
"""
from tortoise import fields, models


class Team(models.Model):
    """
    A named group of users.

    access_key holds the Argon2 hash of the join key; an empty string means
    no key is required to join. The owner is the creating user and also holds
    the "owner" role in team_user.
    """
    id = fields.IntField(pk=True)
    name = fields.CharField(max_length=255, unique=True, index=True)
    access_key = fields.CharField(max_length=255, default="")
    owner = fields.ForeignKeyField("models.User", related_name="owned_teams", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "teams"


class TeamMembership(models.Model):
    """(team, user, role) with role one of owner / moderator / member."""
    id = fields.IntField(pk=True)
    team = fields.ForeignKeyField("models.Team", related_name="memberships", on_delete=fields.CASCADE)
    user = fields.ForeignKeyField("models.User", related_name="memberships", on_delete=fields.CASCADE)
    role = fields.CharField(max_length=16, default="member")

    class Meta:
        table = "team_user"
        unique_together = (("team", "user"),)
