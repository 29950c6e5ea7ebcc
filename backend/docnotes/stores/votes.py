# docnotes/stores/votes.py
"""Tortoise ORM implementation of the vote store."""
from contextlib import asynccontextmanager
from typing import List, Optional

from tortoise.exceptions import IntegrityError, OperationalError
from tortoise.transactions import in_transaction

from docnotes.core.db import translate_db_error
from docnotes.models.entry import Entry
from docnotes.models.vote import Vote
from docnotes.services.records import VoteRecord
from docnotes.stores.base import VoteStore


def _to_record(row: Vote) -> VoteRecord:
    return VoteRecord(id=row.id, entry_id=row.entry_id, user_id=row.user_id, type=row.type)


class TortoiseVoteStore(VoteStore):

    @asynccontextmanager
    async def locked_entry(self, entry_id: int):
        try:
            async with in_transaction() as conn:
                # FOR UPDATE is skipped on backends without row locks (sqlite)
                await Entry.filter(id=entry_id).using_db(conn).select_for_update().first()
                yield conn
        except OperationalError as exc:
            raise translate_db_error(exc) from exc

    async def upsert(self, vote: VoteRecord, using_db=None) -> VoteRecord:
        row = await Vote.get_or_none(entry_id=vote.entry_id, user_id=vote.user_id, using_db=using_db)
        if row is None:
            try:
                row = await Vote.create(entry_id=vote.entry_id, user_id=vote.user_id, type=vote.type, using_db=using_db)
                return _to_record(row)
            except IntegrityError:
                # Lost a race against a concurrent vote by the same user
                row = await Vote.get(entry_id=vote.entry_id, user_id=vote.user_id, using_db=using_db)
        if row.type != vote.type:
            row.type = vote.type
            await row.save(update_fields=["type", "updated_at"], using_db=using_db)
        return _to_record(row)

    async def find_by_entry_and_user(self, entry_id: int, user_id: int) -> Optional[VoteRecord]:
        row = await Vote.get_or_none(entry_id=entry_id, user_id=user_id)
        return _to_record(row) if row else None

    async def types_for_entry(self, entry_id: int, using_db=None) -> List[int]:
        return list(await Vote.filter(entry_id=entry_id).using_db(using_db).values_list("type", flat=True))
