# docnotes/services/team_policy.py
"""
Team Policy

Pure authorization logic for team-scoped operations:
1. Access key gating for joining a team
2. Role checks (owner / moderator / member)
3. Which roles may be assigned through the set-role operation
"""
from typing import Iterable, List

from docnotes.core.errors import AuthorizationError, PolicyError, ValidationError
from docnotes.core.security import hash_password, verify_password
from docnotes.services.records import Actor

OWNER = "owner"
MODERATOR = "moderator"
MEMBER = "member"

ROLES = (OWNER, MODERATOR, MEMBER)
# The owner role is fixed at team creation and never assigned afterwards
ASSIGNABLE_ROLES = (MEMBER, MODERATOR)
MODERATING_ROLES = (OWNER, MODERATOR)


def access_keys_match(stored_key: str, candidate: str) -> bool:
    """
    Check a join request's access key against the team's stored key.

    An empty stored key means the team requires no key, so any candidate
    (including an empty one) is accepted. Otherwise the candidate must verify
    against the stored Argon2 hash; plaintext keys are never compared.
    """
    if not stored_key:
        return True
    return verify_password(candidate or "", stored_key)


def change_access_key(new_key: str) -> str:
    """Return the value to store for a new access key ("" disables gating)."""
    if not new_key:
        return ""
    return hash_password(new_key)


def can_moderate(role: str | None) -> bool:
    return role in MODERATING_ROLES


def is_owner(owner_id: int, actor: Actor) -> bool:
    return actor is not None and owner_id == actor.user_id


def require_owner(owner_id: int, actor: Actor) -> None:
    if not is_owner(owner_id, actor):
        raise AuthorizationError("You need to be the team owner for this", code="NOT_TEAM_OWNER")


def require_assignable_role(role: str) -> str:
    """Validate the target role of a set-role request."""
    if not role:
        raise ValidationError("Missing parameter: role", code="MISSING_ROLE")
    role = role.strip().lower()
    if role == OWNER:
        raise PolicyError("The owner role cannot be reassigned", code="OWNER_ROLE_FIXED")
    if role not in ASSIGNABLE_ROLES:
        raise ValidationError(f"Unknown role: {role}", code="INVALID_ROLE")
    return role


def teams_moderated_by(actor: Actor, team_names: Iterable[str]) -> List[str]:
    """Names among `team_names` in which the actor holds owner or moderator role."""
    if actor is None:
        return []
    names = set(team_names)
    return [
        m.team_name for m in actor.memberships
        if m.team_name in names and can_moderate(m.role)
    ]
