# docnotes/stores/entries.py
"""
Tortoise ORM implementation of the entry store.

Queries narrow candidates by identifier; the visibility resolver decides
which partition (if any) each candidate belongs to.
"""
import logging
from typing import Dict, List, Optional

from tortoise.exceptions import OperationalError
from tortoise.transactions import in_transaction

from docnotes.core.db import translate_db_error
from docnotes.core.errors import AuthorizationError, NotFoundError, require
from docnotes.models.entry import Entry, EntryTeamShare
from docnotes.models.team import Team
from docnotes.models.user import User
from docnotes.models.vote import VOTE_UP, Vote
from docnotes.services import visibility
from docnotes.services.records import (
    Actor,
    EntryDraft,
    EntryPartitions,
    EntryRecord,
    IdentifierRecord,
    ShareRecord,
)
from docnotes.services.rendering import render_markdown
from docnotes.stores.base import EntryStore, IdentifierStore
from docnotes.stores.identifiers import TortoiseIdentifierStore

logger = logging.getLogger("uvicorn.error")

# New entries start with the author's own up-vote
INITIAL_SCORE = VOTE_UP


async def _shares_by_entry(entry_ids: List[int], using_db=None) -> Dict[int, List[ShareRecord]]:
    shares: Dict[int, List[ShareRecord]] = {entry_id: [] for entry_id in entry_ids}
    if not entry_ids:
        return shares
    rows = await (
        EntryTeamShare.filter(entry_id__in=entry_ids)
        .using_db(using_db)
        .order_by("id")
        .values("entry_id", "team_id", "team__name", "removed_from_team")
    )
    for r in rows:
        shares[r["entry_id"]].append(ShareRecord(
            team_id=r["team_id"],
            team_name=r["team__name"],
            removed_from_team=r["removed_from_team"],
        ))
    return shares


def _to_record(row: Entry, shares: List[ShareRecord], author_username: str = "") -> EntryRecord:
    return EntryRecord(
        id=row.id,
        author_id=row.user_id,
        public=row.public,
        removed_from_public=row.removed_from_public,
        score=row.score,
        shares=shares,
        title=row.title,
        body=row.body,
        body_rendered=row.body_rendered,
        type=row.type,
        anchor=row.anchor,
        author_username=author_username,
        identifier_id=row.identifier_id,
    )


class TortoiseEntryStore(EntryStore):

    def __init__(self, identifiers: Optional[IdentifierStore] = None):
        self.identifiers = identifiers or TortoiseIdentifierStore()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    async def _load(self, rows: List[Entry], using_db=None) -> List[EntryRecord]:
        shares = await _shares_by_entry([row.id for row in rows], using_db)
        return [_to_record(row, shares[row.id], row.user.username) for row in rows]

    async def _candidates(self, identifier_id: int) -> List[EntryRecord]:
        rows = await Entry.filter(identifier_id=identifier_id).select_related("user").order_by("id")
        return await self._load(rows)

    async def find_by_id(self, entry_id: int) -> EntryRecord:
        row = await Entry.filter(id=entry_id).select_related("user").first()
        if row is None:
            raise NotFoundError("Unknown entry", code="ENTRY_NOT_FOUND")
        return (await self._load([row]))[0]

    async def list_for_identifier(self, identifier: IdentifierRecord, actor: Optional[Actor]) -> EntryPartitions:
        """
        Compute all three partitions with a single identifier upsert.

        The upsert is a write on a read path: clients reference pages before
        any entry exists for them.
        """
        resolved = await self.identifiers.upsert(identifier)
        return visibility.partition(actor, await self._candidates(resolved.id))

    async def find_public_by_identifier(self, identifier: IdentifierRecord, actor: Optional[Actor]) -> List[EntryRecord]:
        return (await self.list_for_identifier(identifier, actor)).public

    async def find_own_by_identifier(self, identifier: IdentifierRecord, actor: Optional[Actor]) -> List[EntryRecord]:
        return (await self.list_for_identifier(identifier, actor)).own

    async def find_by_team_and_identifier(self, identifier: IdentifierRecord, actor: Actor) -> List[EntryRecord]:
        return (await self.list_for_identifier(identifier, actor)).team

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    async def store(self, draft: EntryDraft, actor: Actor) -> EntryRecord:
        require(draft.title, "title")
        require(draft.body, "body")
        require(draft.anchor, "anchor")
        team_names = list(dict.fromkeys(name.strip() for name in draft.teams if name and name.strip()))

        try:
            async with in_transaction() as conn:
                identifier = await self.identifiers.upsert(draft.identifier, using_db=conn)
                visibility.authorize_publish(identifier, draft.public)

                teams = await self._resolve_teams(team_names, conn)

                if draft.entry_id:
                    row = await Entry.get_or_none(id=draft.entry_id, using_db=conn)
                    if row is None:
                        raise NotFoundError("Unknown entry", code="ENTRY_NOT_FOUND")
                    current_shares = (await _shares_by_entry([row.id], conn))[row.id]
                    visibility.authorize_update(_to_record(row, current_shares), actor)
                else:
                    row = Entry(user_id=actor.user_id, score=INITIAL_SCORE)
                    current_shares = []

                # Only teams the actor belongs to can receive a new share
                existing_team_ids = {share.team_id for share in current_shares}
                for team in teams:
                    if team.id not in existing_team_ids and team.id not in actor.team_ids:
                        raise AuthorizationError(
                            f"You are not a member of team {team.name}", code="NOT_TEAM_MEMBER"
                        )

                row.title = draft.title.strip()
                row.body = draft.body
                row.body_rendered = render_markdown(draft.body)
                row.type = draft.type or ""
                row.anchor = draft.anchor
                row.public = draft.public
                row.identifier_id = identifier.id
                created = row.id is None
                await row.save(using_db=conn)

                if created:
                    await Vote.create(entry_id=row.id, user_id=actor.user_id, type=VOTE_UP, using_db=conn)

                await self._sync_shares(row.id, teams, existing_team_ids, conn)
                author = actor.username if created else (await User.get(id=row.user_id, using_db=conn)).username
                record = _to_record(row, (await _shares_by_entry([row.id], conn))[row.id], author)
        except OperationalError as exc:
            raise translate_db_error(exc) from exc

        logger.info("[entries] %s entry=%s by user=%s", "created" if created else "updated", record.id, actor.user_id)
        return record

    async def _resolve_teams(self, team_names: List[str], conn) -> List[Team]:
        teams = []
        for name in team_names:
            team = await Team.get_or_none(name=name, using_db=conn)
            if team is None:
                raise NotFoundError(f"Team does not exist: {name}", code="TEAM_NOT_FOUND")
            teams.append(team)
        return teams

    async def _sync_shares(self, entry_id: int, teams: List[Team], existing_team_ids: set, conn) -> None:
        # Existing shares keep their removed_from_team flag
        wanted = {team.id for team in teams}
        stale = existing_team_ids - wanted
        if stale:
            await EntryTeamShare.filter(entry_id=entry_id, team_id__in=list(stale)).using_db(conn).delete()
        for team_id in wanted - existing_team_ids:
            await EntryTeamShare.create(entry_id=entry_id, team_id=team_id, using_db=conn)

    async def delete(self, entry_id: int) -> None:
        try:
            async with in_transaction() as conn:
                await Vote.filter(entry_id=entry_id).using_db(conn).delete()
                await EntryTeamShare.filter(entry_id=entry_id).using_db(conn).delete()
                deleted = await Entry.filter(id=entry_id).using_db(conn).delete()
                if not deleted:
                    raise NotFoundError("Unknown entry", code="ENTRY_NOT_FOUND")
        except OperationalError as exc:
            raise translate_db_error(exc) from exc

    async def update_score(self, entry_id: int, score: int, using_db=None) -> None:
        await Entry.filter(id=entry_id).using_db(using_db).update(score=score)

    async def remove_from_public(self, entry_id: int) -> None:
        updated = await Entry.filter(id=entry_id).update(removed_from_public=True)
        if not updated:
            raise NotFoundError("Unknown entry", code="ENTRY_NOT_FOUND")

    async def remove_from_teams(self, entry: EntryRecord, actor: Actor) -> List[int]:
        team_ids = visibility.moderated_share_team_ids(entry, actor)
        await EntryTeamShare.filter(entry_id=entry.id, team_id__in=team_ids).update(removed_from_team=True)
        return team_ids
