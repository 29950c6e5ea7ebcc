# docnotes/services/votes.py
"""
Vote Aggregator

Keeps Entry.score equal to the sum of the entry's vote types. The score is a
cache: it is recomputed from the votes after every vote mutation and never
adjusted incrementally. A vote write and its recompute share one transaction
that holds the entry row lock.
"""
from docnotes.core.errors import ValidationError
from docnotes.models.vote import VOTE_DOWN, VOTE_UP
from docnotes.services.records import VoteRecord
from docnotes.stores.base import EntryStore, VoteStore

VOTE_TYPES = (VOTE_UP, VOTE_DOWN)


class VoteAggregator:
    def __init__(self, votes: VoteStore, entries: EntryStore):
        self.votes = votes
        self.entries = entries

    async def upsert(self, entry_id: int, user_id: int, vote_type: int) -> int:
        """
        Record a user's vote on an entry and return the entry's new score.

        Voting again overwrites the previous vote, so repeating the same vote
        leaves both the vote set and the score unchanged.
        """
        if vote_type not in VOTE_TYPES:
            raise ValidationError("vote_type must be 1 or -1", code="INVALID_VOTE_TYPE")
        async with self.votes.locked_entry(entry_id) as conn:
            await self.votes.upsert(VoteRecord(entry_id=entry_id, user_id=user_id, type=vote_type), using_db=conn)
            return await self._recompute(entry_id, conn)

    async def recompute_score(self, entry_id: int) -> int:
        async with self.votes.locked_entry(entry_id) as conn:
            return await self._recompute(entry_id, conn)

    async def _recompute(self, entry_id: int, conn) -> int:
        score = sum(await self.votes.types_for_entry(entry_id, using_db=conn))
        await self.entries.update_score(entry_id, score, using_db=conn)
        return score
