"""
In-memory store fakes for unit tests of the core services.
"""
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Tuple

from docnotes.core.errors import NotFoundError
from docnotes.services.records import EntryRecord, VoteRecord
from docnotes.stores.base import EntryStore, VoteStore


class FakeVoteStore(VoteStore):
    def __init__(self):
        self.votes: Dict[Tuple[int, int], VoteRecord] = {}
        self.locked: List[int] = []

    @asynccontextmanager
    async def locked_entry(self, entry_id: int):
        self.locked.append(entry_id)
        yield None

    async def upsert(self, vote: VoteRecord, using_db=None) -> VoteRecord:
        key = (vote.entry_id, vote.user_id)
        existing = self.votes.get(key)
        if existing is None:
            vote.id = len(self.votes) + 1
            self.votes[key] = vote
            return vote
        existing.type = vote.type
        return existing

    async def find_by_entry_and_user(self, entry_id: int, user_id: int) -> Optional[VoteRecord]:
        return self.votes.get((entry_id, user_id))

    async def types_for_entry(self, entry_id: int, using_db=None) -> List[int]:
        return [v.type for (e, _), v in self.votes.items() if e == entry_id]


class FakeEntryStore(EntryStore):
    """Only the operations the vote aggregator needs are implemented."""

    def __init__(self, *entries: EntryRecord):
        self.entries = {entry.id: entry for entry in entries}
        self.score_writes: List[Tuple[int, int]] = []

    async def find_by_id(self, entry_id: int) -> EntryRecord:
        if entry_id not in self.entries:
            raise NotFoundError("Unknown entry", code="ENTRY_NOT_FOUND")
        return self.entries[entry_id]

    async def update_score(self, entry_id: int, score: int, using_db=None) -> None:
        self.score_writes.append((entry_id, score))
        self.entries[entry_id].score = score

    async def store(self, draft, actor):
        raise NotImplementedError

    async def delete(self, entry_id):
        raise NotImplementedError

    async def list_for_identifier(self, identifier, actor):
        raise NotImplementedError

    async def find_public_by_identifier(self, identifier, actor):
        raise NotImplementedError

    async def find_own_by_identifier(self, identifier, actor):
        raise NotImplementedError

    async def find_by_team_and_identifier(self, identifier, actor):
        raise NotImplementedError

    async def remove_from_public(self, entry_id):
        raise NotImplementedError

    async def remove_from_teams(self, entry, actor):
        raise NotImplementedError
