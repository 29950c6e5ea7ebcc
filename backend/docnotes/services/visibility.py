# docnotes/services/visibility.py
"""
Entry Visibility Resolver

Decides, for a caller (anonymous, member or global moderator), which
entries of an identifier are visible and in which partition:

- own:    entries the caller authored
- public: public entries of other authors that are not hidden from public,
          not voted below the threshold and not already shown to the caller
          through one of their teams
- team:   entries of other authors shared with one of the caller's teams
          and not hidden from that team

It also holds the authorization rules for entry mutations. Everything here
is a pure function of entry flags and the caller's memberships; nothing is
cached between requests.
"""
from typing import Iterable, List, Optional

from docnotes.core.errors import AuthorizationError, PolicyError
from docnotes.services.records import Actor, EntryPartitions, EntryRecord, IdentifierRecord
from docnotes.services.team_policy import can_moderate

# Entries at or below this score are hidden from the public partition
PUBLIC_SCORE_THRESHOLD = -5


def is_own(entry: EntryRecord, actor: Optional[Actor]) -> bool:
    return actor is not None and entry.author_id == actor.user_id


def visible_team_ids(entry: EntryRecord) -> set:
    """Teams the entry is shared with and not hidden from."""
    return {share.team_id for share in entry.shares if not share.removed_from_team}


def is_team_visible(entry: EntryRecord, actor: Optional[Actor]) -> bool:
    if actor is None or is_own(entry, actor):
        return False
    return bool(visible_team_ids(entry) & actor.team_ids)


def is_public_visible(entry: EntryRecord, actor: Optional[Actor]) -> bool:
    if not entry.public or entry.removed_from_public:
        return False
    if entry.score <= PUBLIC_SCORE_THRESHOLD:
        return False
    if actor is None:
        return True
    if is_own(entry, actor):
        return False
    # Shown in the team partition instead
    return not (visible_team_ids(entry) & actor.team_ids)


def partition(actor: Optional[Actor], entries: Iterable[EntryRecord]) -> EntryPartitions:
    """
    Split the entries of one identifier into the three partitions.

    The partitions are disjoint: an entry is own, team or public, in that
    order of precedence, or not visible at all.
    """
    result = EntryPartitions()
    for entry in entries:
        if is_own(entry, actor):
            result.own.append(entry)
        elif is_team_visible(entry, actor):
            result.team.append(entry)
        elif is_public_visible(entry, actor):
            result.public.append(entry)
    return result


def can_view(entry: EntryRecord, actor: Optional[Actor]) -> bool:
    """
    Whether the caller may open a single entry.

    Unlike the public partition this ignores the score threshold: a heavily
    downvoted public entry is no longer listed but can still be opened.
    """
    if is_own(entry, actor) or is_team_visible(entry, actor):
        return True
    if actor is not None and actor.moderator:
        return True
    return entry.public and not entry.removed_from_public


# ---------------------------------------------------------------------------
# Mutation authorization
# ---------------------------------------------------------------------------
def authorize_publish(identifier: IdentifierRecord, public: bool) -> None:
    if public and identifier.banned_from_public:
        raise PolicyError("Public annotations forbidden", code="PUBLIC_ANNOTATION_FORBIDDEN")


def authorize_update(entry: EntryRecord, actor: Actor) -> None:
    """Only the author or a global moderator may update an existing entry."""
    if is_own(entry, actor) or actor.moderator:
        return
    raise AuthorizationError("You need to be the author", code="UPDATE_FORBIDDEN")


def authorize_delete(entry: EntryRecord, actor: Actor) -> None:
    """Only the author may delete; moderators hide entries instead."""
    if not is_own(entry, actor):
        raise AuthorizationError("Only the author can delete an entry", code="DELETE_FORBIDDEN")


def authorize_remove_from_public(actor: Actor) -> None:
    if not actor.moderator:
        raise AuthorizationError("You need to be a moderator for this", code="NOT_MODERATOR")


def moderated_share_team_ids(entry: EntryRecord, actor: Actor) -> List[int]:
    """
    Teams of the entry's shares in which the actor is owner or moderator.

    Raises AuthorizationError when there are none, since the caller then has
    no team from which to hide the entry.
    """
    shared = {share.team_id for share in entry.shares}
    team_ids = [
        m.team_id for m in actor.memberships
        if m.team_id in shared and can_moderate(m.role)
    ]
    if not team_ids:
        raise AuthorizationError(
            "You need to be the teams moderator for this", code="NOT_TEAM_MODERATOR"
        )
    return team_ids
