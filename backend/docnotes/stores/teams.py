# docnotes/stores/teams.py
"""Tortoise ORM implementation of the team store."""
import logging
from typing import List, Optional

from tortoise.exceptions import IntegrityError, OperationalError
from tortoise.transactions import in_transaction

from docnotes.core.db import translate_db_error
from docnotes.core.errors import ConflictError, NotFoundError, ValidationError
from docnotes.models.entry import Entry, EntryTeamShare
from docnotes.models.team import Team, TeamMembership
from docnotes.models.vote import Vote
from docnotes.services.records import CascadeResult, MemberRecord, MembershipRecord
from docnotes.services.team_policy import OWNER
from docnotes.stores.base import TeamStore

logger = logging.getLogger("uvicorn.error")


class TortoiseTeamStore(TeamStore):

    async def find_team_by_name(self, name: str) -> Team:
        if not name:
            raise ValidationError("Missing parameter: name", code="MISSING_NAME")
        team = await Team.get_or_none(name=name)
        if not team:
            raise NotFoundError("Team does not exist", code="TEAM_NOT_FOUND")
        return team

    async def store(self, name: str, owner_id: int) -> Team:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Missing parameter: name", code="MISSING_NAME")
        if await Team.filter(name=name).exists():
            raise ConflictError("Team name already taken", code="TEAM_NAME_EXISTS")
        try:
            async with in_transaction() as conn:
                team = await Team.create(name=name, owner_id=owner_id, using_db=conn)
                await TeamMembership.create(team_id=team.id, user_id=owner_id, role=OWNER, using_db=conn)
        except OperationalError as exc:
            raise translate_db_error(exc, "Team name already taken") from exc
        return team

    async def update_access_key(self, team: Team, access_key_hash: str) -> None:
        team.access_key = access_key_hash
        await team.save()

    async def add_membership(self, team_id: int, user_id: int, role: str) -> None:
        if await TeamMembership.filter(team_id=team_id, user_id=user_id).exists():
            raise ConflictError("You are already a member of this team", code="ALREADY_MEMBER")
        try:
            await TeamMembership.create(team_id=team_id, user_id=user_id, role=role)
        except IntegrityError as exc:
            raise ConflictError("You are already a member of this team", code="ALREADY_MEMBER") from exc

    async def remove_membership(self, team_id: int, user_id: int) -> CascadeResult:
        result = CascadeResult(team_id=team_id, user_id=user_id)
        try:
            async with in_transaction() as conn:
                deleted = await TeamMembership.filter(team_id=team_id, user_id=user_id).using_db(conn).delete()
                if not deleted:
                    raise NotFoundError("User is not a member of this team", code="NOT_A_MEMBER")

                # Every entry of the user shared with this team goes, even when
                # it is also shared with other teams
                authored = await Entry.filter(user_id=user_id).using_db(conn).values_list("id", flat=True)
                entry_ids = []
                if authored:
                    entry_ids = await (
                        EntryTeamShare.filter(team_id=team_id, entry_id__in=list(authored))
                        .using_db(conn)
                        .values_list("entry_id", flat=True)
                    )
                entry_ids = sorted(set(entry_ids))
                if entry_ids:
                    await Vote.filter(entry_id__in=entry_ids).using_db(conn).delete()
                    await EntryTeamShare.filter(entry_id__in=entry_ids).using_db(conn).delete()
                    await Entry.filter(id__in=entry_ids).using_db(conn).delete()
                result.deleted_entry_ids = entry_ids

                remaining = await TeamMembership.filter(team_id=team_id).using_db(conn).count()
                if remaining == 0:
                    await EntryTeamShare.filter(team_id=team_id).using_db(conn).delete()
                    await Team.filter(id=team_id).using_db(conn).delete()
                    result.team_deleted = True
        except OperationalError as exc:
            raise translate_db_error(exc) from exc

        logger.info(
            "[teams] removed user=%s from team=%s (entries deleted=%d, team deleted=%s)",
            user_id, team_id, len(result.deleted_entry_ids), result.team_deleted,
        )
        return result

    async def update_membership(self, team_id: int, user_id: int, role: str) -> None:
        updated = await TeamMembership.filter(team_id=team_id, user_id=user_id).update(role=role)
        if not updated:
            raise NotFoundError("User is not a member of this team", code="NOT_A_MEMBER")

    async def find_membership(self, team_id: int, user_id: int) -> Optional[str]:
        membership = await TeamMembership.get_or_none(team_id=team_id, user_id=user_id)
        return membership.role if membership else None

    async def find_memberships_for_user(self, user_id: int) -> List[MembershipRecord]:
        rows = await TeamMembership.filter(user_id=user_id).order_by("id").values("team_id", "team__name", "role")
        return [MembershipRecord(team_id=r["team_id"], team_name=r["team__name"], role=r["role"]) for r in rows]

    async def find_memberships_for_team(self, team_id: int) -> List[MemberRecord]:
        rows = await TeamMembership.filter(team_id=team_id).order_by("id").values("user__username", "role")
        return [MemberRecord(username=r["user__username"], role=r["role"]) for r in rows]
