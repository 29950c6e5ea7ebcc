"""
Unit tests for services.votes.VoteAggregator using in-memory stores.
"""
import pytest

from docnotes.core.errors import ValidationError
from docnotes.services.records import EntryRecord
from docnotes.services.votes import VoteAggregator
from fakes import FakeEntryStore, FakeVoteStore


pytestmark = pytest.mark.asyncio


@pytest.fixture
def stores():
    votes = FakeVoteStore()
    entries = FakeEntryStore(EntryRecord(id=1, author_id=1, score=0))
    return votes, entries, VoteAggregator(votes, entries)


async def test_score_is_sum_of_votes(stores):
    votes, entries, aggregator = stores
    assert await aggregator.upsert(1, user_id=1, vote_type=1) == 1
    assert await aggregator.upsert(1, user_id=2, vote_type=1) == 2
    assert await aggregator.upsert(1, user_id=3, vote_type=-1) == 1
    assert entries.entries[1].score == sum(await votes.types_for_entry(1))


async def test_repeated_vote_is_idempotent(stores):
    votes, entries, aggregator = stores
    await aggregator.upsert(1, user_id=2, vote_type=1)
    await aggregator.upsert(1, user_id=2, vote_type=1)
    assert await votes.types_for_entry(1) == [1]
    assert entries.entries[1].score == 1


async def test_vote_can_be_flipped(stores):
    votes, entries, aggregator = stores
    await aggregator.upsert(1, user_id=2, vote_type=1)
    assert await aggregator.upsert(1, user_id=2, vote_type=-1) == -1
    assert (await votes.find_by_entry_and_user(1, 2)).type == -1


async def test_invalid_vote_type(stores):
    votes, entries, aggregator = stores
    with pytest.raises(ValidationError) as exc:
        await aggregator.upsert(1, user_id=2, vote_type=2)
    assert exc.value.code == "INVALID_VOTE_TYPE"
    assert votes.votes == {}
    assert entries.score_writes == []


async def test_recompute_without_votes_is_zero(stores):
    _, entries, aggregator = stores
    entries.entries[1].score = 7
    assert await aggregator.recompute_score(1) == 0
    assert await aggregator.recompute_score(1) == 0
    assert entries.entries[1].score == 0


async def test_vote_and_recompute_run_under_entry_lock(stores):
    votes, entries, aggregator = stores
    await aggregator.upsert(1, user_id=2, vote_type=1)
    await aggregator.recompute_score(1)
    assert votes.locked == [1, 1]
