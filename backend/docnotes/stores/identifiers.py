# docnotes/stores/identifiers.py
"""Tortoise ORM implementation of the identifier store."""
from dataclasses import asdict

from tortoise.exceptions import IntegrityError

from docnotes.models.identifier import Identifier
from docnotes.services import identifiers as identifier_rules
from docnotes.services.records import IdentifierRecord
from docnotes.stores.base import IdentifierStore

_PAYLOAD_FIELDS = (
    "docset_name",
    "docset_filename",
    "docset_platform",
    "docset_bundle",
    "docset_version",
    "page_path",
    "page_title",
    "httrack_source",
)


def to_identifier_record(row: Identifier) -> IdentifierRecord:
    return IdentifierRecord(
        id=row.id,
        banned_from_public=row.banned_from_public,
        **{name: getattr(row, name) or "" for name in _PAYLOAD_FIELDS},
    )


class TortoiseIdentifierStore(IdentifierStore):

    async def upsert(self, identifier: IdentifierRecord, using_db=None) -> IdentifierRecord:
        """
        Resolve an identifier payload to its stored row, creating it if absent.

        Lookups go by natural key only, so a repeated payload (or one that
        normalizes to the same key) always resolves to the same row.
        """
        identifier = identifier_rules.normalize(identifier)
        key = identifier_rules.lookup_key(identifier)
        values = {name: value for name, value in asdict(identifier).items() if name in _PAYLOAD_FIELDS}
        try:
            row, _ = await Identifier.get_or_create(lookup_key=key, defaults=values, using_db=using_db)
        except IntegrityError:
            # A concurrent upsert inserted the same key first
            row = await Identifier.get(lookup_key=key, using_db=using_db)
        return to_identifier_record(row)
