# docnotes/models/entry.py
"""
Database models for entries (annotations) and their team shares.
"""
from tortoise import fields, models


class Entry(models.Model):
    """
    An annotation attached to an identifier.

    Relationships:
    - Belongs to a User (author) and an Identifier
    - Has many EntryTeamShares (related_name="shares") and Votes (related_name="votes")

    score is a cached value: the sum of the entry's vote types, recomputed
    after every vote mutation.
    """
    id = fields.IntField(pk=True)
    title = fields.CharField(max_length=255)
    body = fields.TextField()
    body_rendered = fields.TextField(default="")  # Cached markdown rendering of body
    type = fields.CharField(max_length=32, default="")
    anchor = fields.TextField()
    public = fields.BooleanField(default=False)
    removed_from_public = fields.BooleanField(default=False)
    score = fields.IntField(default=0)
    user = fields.ForeignKeyField("models.User", related_name="entries", on_delete=fields.CASCADE)
    identifier = fields.ForeignKeyField("models.Identifier", related_name="entries", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "entries"


class EntryTeamShare(models.Model):
    """Links an entry to a team; removed_from_team hides it from that team only."""
    id = fields.IntField(pk=True)
    entry = fields.ForeignKeyField("models.Entry", related_name="shares", on_delete=fields.CASCADE)
    team = fields.ForeignKeyField("models.Team", related_name="shares", on_delete=fields.CASCADE)
    removed_from_team = fields.BooleanField(default=False)

    class Meta:
        table = "entry_team"
        unique_together = (("entry", "team"),)
