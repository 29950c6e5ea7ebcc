# docnotes/api/v1/deps.py
from typing import Optional

import jwt
from fastapi import Depends, Header, Request

from docnotes.config import settings
from docnotes.core.context import RequestContext
from docnotes.core.errors import AuthenticationError, NotFoundError
from docnotes.core.security import decode_session_token
from docnotes.models.user import User
from docnotes.services.records import Actor
from docnotes.stores import Stores


def get_stores() -> Stores:
    """
    FastAPI dependency providing the store implementations.

    Tests override it through `app.dependency_overrides[get_stores]` to swap
    in other implementations.
    """
    return Stores()


def _session_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    # 1) Prioritize the session cookie sent by the documentation browser
    token = request.cookies.get(settings.session_cookie_name)
    # 2) Secondly Authorization: Bearer xxx
    if not token and authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    return token or None


async def get_optional_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    stores: Stores = Depends(get_stores),
) -> Optional[User]:
    """
    FastAPI dependency resolving the session to a user, if any.

    A missing session yields None. A session that is present but invalid,
    expired or revoked by logout is rejected rather than downgraded to
    anonymous access.

    Raises:
        AuthenticationError (401): AUTH_INVALID_SESSION if the token cannot be
            decoded or no user holds its remember token
    """
    token = _session_token(request, authorization)
    if not token:
        return None
    try:
        remember_token = decode_session_token(token)
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid or expired session", code="AUTH_INVALID_SESSION") from exc
    try:
        return await stores.users.find_by_remember_token(remember_token)
    except NotFoundError as exc:
        raise AuthenticationError("Invalid or expired session", code="AUTH_INVALID_SESSION") from exc


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    Returns:
        User: The authenticated user object from database

    Raises:
        AuthenticationError (401): AUTH_REQUIRED if no session was sent

    Usage:
        @router.post("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"success": True}
    """
    if user is None:
        raise AuthenticationError("You need to be logged in", code="AUTH_REQUIRED")
    return user


async def build_actor(user: Optional[User], stores: Stores) -> Optional[Actor]:
    if user is None:
        return None
    return Actor(
        user_id=user.id,
        username=user.username,
        moderator=user.moderator,
        memberships=await stores.teams.find_memberships_for_user(user.id),
    )


async def get_request_context(
    user: Optional[User] = Depends(get_optional_user),
    stores: Stores = Depends(get_stores),
) -> RequestContext:
    """FastAPI dependency building the per-request context for optional-auth routes."""
    return RequestContext(stores=stores, actor=await build_actor(user, stores), user=user)


async def get_auth_context(
    user: User = Depends(get_current_user),
    stores: Stores = Depends(get_stores),
) -> RequestContext:
    """Same as get_request_context, but requires an authenticated caller."""
    return RequestContext(stores=stores, actor=await build_actor(user, stores), user=user)
