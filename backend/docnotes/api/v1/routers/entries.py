# docnotes/api/v1/routers/entries.py
import logging

from fastapi import APIRouter, Depends

from docnotes.api.v1.deps import get_auth_context, get_request_context
from docnotes.core.context import RequestContext
from docnotes.core.errors import NotFoundError
from docnotes.schemas.entries import EntryIdIn, EntryListIn, EntrySaveIn, VoteIn
from docnotes.services import team_policy, visibility
from docnotes.services.records import EntryDraft, EntryRecord
from docnotes.services.votes import VoteAggregator

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/entries", tags=["entries"])


async def _viewable_entry(ctx: RequestContext, entry_id: int) -> EntryRecord:
    """
    Load an entry the caller may see.

    Entries hidden from the caller are reported exactly like missing ones so
    their existence does not leak.
    """
    entry = await ctx.entries.find_by_id(entry_id)
    if not visibility.can_view(entry, ctx.actor):
        raise NotFoundError("Unknown entry", code="ENTRY_NOT_FOUND")
    return entry


@router.post("/list")
async def list_entries(body: EntryListIn, ctx: RequestContext = Depends(get_request_context)):
    """
    List the entries of a documentation page, split by visibility.

    Anonymous callers only get public entries. Signed-in callers also get
    their own entries and entries shared with their teams; an entry appears
    in at most one of the three lists.

    Args:
        body: Request body containing:
            - identifier: docset and page the client is showing

    Returns:
        dict: Response containing:
            - success: bool
            - data: dict with public_entries, own_entries, team_entries
              (each a list of {id, title, type, anchor, public, score, teams, author})

    Error codes:
        - MISSING_IDENTIFIER (400)
    """
    partitions = await ctx.entries.list_for_identifier(body.identifier.to_record(), ctx.actor)
    return {
        "success": True,
        "data": {
            "public_entries": [e.to_dict() for e in partitions.public],
            "own_entries": [e.to_dict() for e in partitions.own],
            "team_entries": [e.to_dict() for e in partitions.team],
        },
    }


@router.post("/save")
@router.post("/create")
async def save_entry(body: EntrySaveIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Create or update an entry.

    Without entry_id a new entry is created, authored by the caller and
    starting with the caller's own up-vote. With entry_id the existing
    entry is updated by its author or a global moderator.

    Args:
        body: Request body containing title, body, anchor, identifier,
            type, public, teams (team names) and optional entry_id

    Returns:
        dict: Response containing:
            - success: bool
            - data: dict with entry: the saved entry

    Error codes:
        - MISSING_TITLE / MISSING_BODY / MISSING_ANCHOR / MISSING_IDENTIFIER (400)
        - PUBLIC_ANNOTATION_FORBIDDEN (403): page is banned from public entries
        - UPDATE_FORBIDDEN (403): caller is neither author nor moderator
        - NOT_TEAM_MEMBER (403): sharing with a team the caller is not in
        - ENTRY_NOT_FOUND / TEAM_NOT_FOUND (404)
    """
    draft = EntryDraft(
        title=body.title,
        body=body.body,
        anchor=body.anchor,
        identifier=body.identifier.to_record(),
        type=body.type,
        public=body.public,
        teams=body.teams,
        entry_id=body.entry_id or None,
    )
    entry = await ctx.entries.store(draft, ctx.actor)
    return {"success": True, "data": {"entry": entry.to_dict()}}


@router.post("/get")
async def get_entry(body: EntryIdIn, ctx: RequestContext = Depends(get_request_context)):
    """
    Get a single entry with its body and the caller's relation to it.

    Returns:
        dict: Response containing:
            - success: bool
            - data: dict with:
                - entry: entry summary
                - body / body_rendered: markdown source and HTML
                - vote: the caller's vote type (1, -1) or 0
                - global_moderator: caller may remove it from public
                - moderated_teams: shared teams the caller may remove it from

    Error codes:
        - ENTRY_NOT_FOUND (404): missing, or not visible to the caller
    """
    entry = await _viewable_entry(ctx, body.entry_id)
    vote = None
    if ctx.actor is not None:
        vote = await ctx.votes.find_by_entry_and_user(entry.id, ctx.actor.user_id)
    return {
        "success": True,
        "data": {
            "entry": entry.to_dict(),
            "body": entry.body,
            "body_rendered": entry.body_rendered,
            "vote": vote.type if vote else 0,
            "global_moderator": bool(ctx.actor and ctx.actor.moderator),
            "moderated_teams": team_policy.teams_moderated_by(ctx.actor, entry.team_names),
        },
    }


@router.post("/vote")
async def vote_entry(body: VoteIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Vote an entry up (1) or down (-1).

    Voting again replaces the caller's previous vote. The entry's score is
    recomputed from all of its votes.

    Error codes:
        - INVALID_VOTE_TYPE (400)
        - ENTRY_NOT_FOUND (404)
    """
    entry = await _viewable_entry(ctx, body.entry_id)
    score = await VoteAggregator(ctx.votes, ctx.entries).upsert(entry.id, ctx.actor.user_id, body.vote_type)
    return {"success": True, "data": {"score": score}}


@router.post("/delete")
async def delete_entry(body: EntryIdIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Delete an entry with its votes and team shares (author only).

    Error codes:
        - DELETE_FORBIDDEN (403)
        - ENTRY_NOT_FOUND (404)
    """
    entry = await ctx.entries.find_by_id(body.entry_id)
    visibility.authorize_delete(entry, ctx.actor)
    await ctx.entries.delete(entry.id)
    logger.info("[entries] deleted entry=%s by user=%s", entry.id, ctx.actor.user_id)
    return {"success": True}


@router.post("/remove_from_public")
async def remove_from_public(body: EntryIdIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Hide an entry from the public list (global moderators only).

    Error codes:
        - NOT_MODERATOR (403)
        - ENTRY_NOT_FOUND (404)
    """
    visibility.authorize_remove_from_public(ctx.actor)
    entry = await ctx.entries.find_by_id(body.entry_id)
    await ctx.entries.remove_from_public(entry.id)
    logger.info("[entries] entry=%s removed from public by user=%s", entry.id, ctx.actor.user_id)
    return {"success": True}


@router.post("/remove_from_teams")
async def remove_from_teams(body: EntryIdIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Hide an entry from the shared teams the caller owns or moderates.

    Other teams the entry is shared with keep seeing it.

    Error codes:
        - NOT_TEAM_MODERATOR (403)
        - ENTRY_NOT_FOUND (404)
    """
    entry = await ctx.entries.find_by_id(body.entry_id)
    team_ids = await ctx.entries.remove_from_teams(entry, ctx.actor)
    removed = [share.team_name for share in entry.shares if share.team_id in team_ids]
    return {"success": True, "data": {"teams": removed}}
