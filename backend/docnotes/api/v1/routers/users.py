# docnotes/api/v1/routers/users.py
import logging

from fastapi import APIRouter, Depends, Response

from docnotes.api.v1.deps import get_auth_context, get_stores
from docnotes.config import settings
from docnotes.core.context import RequestContext
from docnotes.core.errors import AuthenticationError, NotFoundError, require
from docnotes.core.security import (
    create_session_token,
    generate_remember_token,
    hash_password,
    verify_password,
)
from docnotes.schemas.users import EmailIn, LoginIn, PasswordIn, RegisterIn
from docnotes.stores import Stores

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/users", tags=["users"])


def _user_out(user) -> dict:
    return {"id": user.id, "username": user.username, "email": user.email, "moderator": user.moderator}


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.session_expire_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )


@router.post("/register")
async def register(body: RegisterIn, stores: Stores = Depends(get_stores)):
    """
    Register a new user account.

    Creates a new user account with the provided username, email (optional),
    and password. The password is hashed before storage. Username and email
    must be unique across all users.

    Args:
        body: Request body containing:
            - username: str (must be unique)
            - email: str | None (optional, must be unique if provided)
            - password: str (will be hashed before storage)

    Returns:
        dict: Success response with the new user's id, username, email

    Error codes:
        - MISSING_USERNAME / MISSING_PASSWORD (400)
        - USERNAME_EXISTS / EMAIL_EXISTS (409)
    """
    require(body.username, "username")
    require(body.password, "password")
    user = await stores.users.store(
        body.username.strip(),
        hash_password(body.password),
        (body.email or "").strip() or None,
    )
    logger.info("[users] registered user=%s", user.id)
    return {"success": True, "data": _user_out(user)}


@router.post("/login")
async def login(payload: LoginIn, response: Response, stores: Stores = Depends(get_stores)):
    """
    Authenticate user and open a session.

    Validates the credentials, mints a fresh remember token stored on the
    user, and sets the signed session token as an HttpOnly cookie (the
    cookie name documentation browsers already send). The token is also
    returned in the body for clients that prefer a Bearer header.

    Args:
        payload: Request body containing username and password
        response: FastAPI Response object (for setting cookies)

    Returns:
        dict: Response containing:
            - success: bool (always True on success)
            - data: dict with:
                - user: User information (id, username, email, moderator)
                - sessionToken: signed session token string

    Raises:
        AuthenticationError (401): AUTH_INVALID_CREDENTIALS
    """
    require(payload.username, "username")
    require(payload.password, "password")
    try:
        user = await stores.users.find_by_username(payload.username.strip())
    except NotFoundError:
        user = None
    if user is None or not verify_password(payload.password, user.password_hash):
        raise AuthenticationError("Incorrect username or password", code="AUTH_INVALID_CREDENTIALS")

    user.remember_token = generate_remember_token()
    await stores.users.update(user)
    token = create_session_token(user.remember_token)
    _set_session_cookie(response, token)
    return {"success": True, "data": {"user": _user_out(user), "sessionToken": token}}


@router.post("/logout")
async def logout(response: Response, ctx: RequestContext = Depends(get_auth_context)):
    """
    Log out the current user.

    Clears the remember token, which revokes every session token minted for
    it, and removes the session cookie from the client.

    Returns:
        dict: Response containing:
            - success: bool (always True)
    """
    ctx.user.remember_token = None
    await ctx.users.update(ctx.user)
    response.delete_cookie(settings.session_cookie_name)
    return {"success": True}


@router.post("/password")
async def change_password(body: PasswordIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Change the current user's password.

    Existing sessions stay valid; only the stored hash changes.

    Error codes:
        - MISSING_PASSWORD (400)
    """
    require(body.password, "password")
    ctx.user.password_hash = hash_password(body.password)
    await ctx.users.update(ctx.user)
    return {"success": True}


@router.post("/email")
async def change_email(body: EmailIn, ctx: RequestContext = Depends(get_auth_context)):
    """
    Change the current user's email.

    Error codes:
        - MISSING_EMAIL (400)
        - EMAIL_EXISTS (409): email already used by another account
    """
    require(body.email, "email")
    ctx.user.email = body.email.strip()
    await ctx.users.update(ctx.user)
    return {"success": True, "data": _user_out(ctx.user)}


@router.get("/me")
async def me(ctx: RequestContext = Depends(get_auth_context)):
    """
    Get current authenticated user information.

    Returns:
        dict: Response containing:
            - success: bool (always True)
            - data: user information plus team memberships
              (each with team name and role)
    """
    data = _user_out(ctx.user)
    data["teams"] = [{"name": m.team_name, "role": m.role} for m in ctx.actor.memberships]
    return {"success": True, "data": data}
