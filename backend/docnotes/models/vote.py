# docnotes/models/vote.py
from tortoise import fields, models

VOTE_UP = 1
VOTE_DOWN = -1


class Vote(models.Model):
    """One user's up (+1) or down (-1) vote on an entry; unique per (entry, user)."""
    id = fields.IntField(pk=True)
    type = fields.SmallIntField()
    entry = fields.ForeignKeyField("models.Entry", related_name="votes", on_delete=fields.CASCADE)
    user = fields.ForeignKeyField("models.User", related_name="votes", on_delete=fields.CASCADE)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "votes"
        unique_together = (("entry", "user"),)
