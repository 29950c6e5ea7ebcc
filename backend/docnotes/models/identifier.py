# docnotes/models/identifier.py
"""
Database model for identifiers.
An identifier points at a page (or httrack source) inside a docset; entries
hang off identifiers. Rows are upserted by natural key and never duplicated.
"""
from tortoise import fields, models


class Identifier(models.Model):
    id = fields.IntField(pk=True)
    docset_name = fields.CharField(max_length=255, default="")
    docset_filename = fields.CharField(max_length=255, index=True)
    docset_platform = fields.CharField(max_length=255, default="")
    docset_bundle = fields.CharField(max_length=255, default="")
    docset_version = fields.CharField(max_length=255, default="")
    page_path = fields.TextField(default="")
    page_title = fields.TextField(default="")
    httrack_source = fields.TextField(default="")
    # sha256 of the natural key; the unique index keeps concurrent upserts to one row
    lookup_key = fields.CharField(max_length=64, unique=True)
    banned_from_public = fields.BooleanField(default=False)  # Managed by administrators
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "identifiers"
