# docnotes/api/v1/routers/teams.py
import logging

from fastapi import APIRouter, Depends

from docnotes.api.v1.deps import get_auth_context
from docnotes.core.context import RequestContext
from docnotes.core.errors import AuthorizationError, NotFoundError, PolicyError, require
from docnotes.schemas.teams import AccessKeyIn, JoinIn, MemberIn, SetRoleIn, TeamNameIn
from docnotes.services import team_policy

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/teams", tags=["teams"])


async def _member_by_username(ctx: RequestContext, team, username: str):
    """Resolve `username` to a user that belongs to `team`."""
    require(username, "username")
    user = await ctx.users.find_by_username(username.strip())
    if await ctx.teams.find_membership(team.id, user.id) is None:
        raise NotFoundError("User is not a member of this team", code="NOT_A_MEMBER")
    return user


# ==============================================================================
# I. Membership of the current user
# ==============================================================================
@router.post("/list")
async def list_teams(ctx: RequestContext = Depends(get_auth_context)):
    """
    List the teams the current user belongs to.

    Returns:
        dict: Response containing:
            - success: bool
            - data: dict with teams: list of {name, role}
    """
    teams = [{"name": m.team_name, "role": m.role} for m in ctx.actor.memberships]
    return {"success": True, "data": {"teams": teams}}


@router.post("/create")
async def create_team(body: TeamNameIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Create a team owned by the current user.

    The creator becomes the team's owner and first member in one
    transaction.

    Error codes:
        - MISSING_NAME (400)
        - TEAM_NAME_EXISTS (409)
    """
    team = await ctx.teams.store(body.name, ctx.actor.user_id)
    logger.info("[teams] created team=%s owner=%s", team.id, ctx.actor.user_id)
    return {"success": True, "data": {"name": team.name, "role": team_policy.OWNER}}


@router.post("/join")
async def join_team(body: JoinIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Join a team as a plain member.

    A team without an access key accepts anyone; otherwise the given key
    must match the stored hash.

    Error codes:
        - TEAM_NOT_FOUND (404)
        - INVALID_ACCESS_KEY (403)
        - ALREADY_MEMBER (409)
    """
    team = await ctx.teams.find_team_by_name(body.name)
    if not team_policy.access_keys_match(team.access_key, body.access_key):
        raise AuthorizationError("Invalid access key", code="INVALID_ACCESS_KEY")
    await ctx.teams.add_membership(team.id, ctx.actor.user_id, team_policy.MEMBER)
    return {"success": True, "data": {"name": team.name, "role": team_policy.MEMBER}}


@router.post("/leave")
async def leave_team(body: TeamNameIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Leave a team.

    The caller's entries shared with the team are deleted along with their
    votes and shares. The team itself is deleted once its last member
    leaves.

    Error codes:
        - TEAM_NOT_FOUND (404)
        - NOT_A_MEMBER (404)
        - OWNER_CANNOT_LEAVE (403): the owner must be the last member to leave
    """
    team = await ctx.teams.find_team_by_name(body.name)
    if team_policy.is_owner(team.owner_id, ctx.actor):
        members = await ctx.teams.find_memberships_for_team(team.id)
        if len(members) > 1:
            raise PolicyError("The owner cannot leave a team with other members", code="OWNER_CANNOT_LEAVE")
    result = await ctx.teams.remove_membership(team.id, ctx.actor.user_id)
    return {
        "success": True,
        "data": {"deletedEntries": len(result.deleted_entry_ids), "teamDeleted": result.team_deleted},
    }


# ==============================================================================
# II. Owner operations
# ==============================================================================
@router.post("/set_role")
async def set_role(body: SetRoleIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Change a member's role.

    Only the owner may do this, only "member" and "moderator" can be
    assigned, and the owner's own role never changes.

    Error codes:
        - NOT_TEAM_OWNER (403)
        - MISSING_ROLE / INVALID_ROLE / MISSING_USERNAME (400)
        - OWNER_ROLE_FIXED (403)
        - USER_NOT_FOUND / NOT_A_MEMBER (404)
    """
    team = await ctx.teams.find_team_by_name(body.name)
    team_policy.require_owner(team.owner_id, ctx.actor)
    role = team_policy.require_assignable_role(body.role)
    target = await _member_by_username(ctx, team, body.username)
    if target.id == team.owner_id:
        raise PolicyError("The owner role cannot be reassigned", code="OWNER_ROLE_FIXED")
    await ctx.teams.update_membership(team.id, target.id, role)
    return {"success": True, "data": {"username": target.username, "role": role}}


@router.post("/remove_member")
async def remove_member(body: MemberIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Remove a member from the team.

    Runs the same cascade as leaving: the member's entries shared with the
    team are deleted together with their votes and shares.

    Error codes:
        - NOT_TEAM_OWNER (403)
        - CANNOT_REMOVE_OWNER (403)
        - USER_NOT_FOUND / NOT_A_MEMBER (404)
    """
    team = await ctx.teams.find_team_by_name(body.name)
    team_policy.require_owner(team.owner_id, ctx.actor)
    target = await _member_by_username(ctx, team, body.username)
    if target.id == team.owner_id:
        raise PolicyError("The owner cannot be removed from the team", code="CANNOT_REMOVE_OWNER")
    result = await ctx.teams.remove_membership(team.id, target.id)
    return {
        "success": True,
        "data": {"deletedEntries": len(result.deleted_entry_ids), "teamDeleted": result.team_deleted},
    }


@router.post("/set_access_key")
async def set_access_key(body: AccessKeyIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Set or clear the team's access key (owner only).

    The key is stored hashed; an empty key lets anyone join.
    """
    team = await ctx.teams.find_team_by_name(body.name)
    team_policy.require_owner(team.owner_id, ctx.actor)
    await ctx.teams.update_access_key(team, team_policy.change_access_key(body.access_key))
    return {"success": True, "data": {"has_access_key": bool(body.access_key)}}


@router.post("/list_members")
async def list_members(body: TeamNameIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    List the members of a team (owner only).

    Returns:
        dict: Response containing:
            - success: bool
            - data: dict with:
                - members: list of {username, role}
                - has_access_key: bool
    """
    team = await ctx.teams.find_team_by_name(body.name)
    team_policy.require_owner(team.owner_id, ctx.actor)
    members = await ctx.teams.find_memberships_for_team(team.id)
    return {
        "success": True,
        "data": {
            "members": [{"username": m.username, "role": m.role} for m in members],
            "has_access_key": bool(team.access_key),
        },
    }
