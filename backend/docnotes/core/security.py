# docnotes/core/security.py
"""
Security module for authentication.
Handles password and access key hashing, remember token minting and the
signed session token carried in the session cookie.
"""
import datetime as dt
import secrets

import jwt  # PyJWT
from passlib.context import CryptContext

from docnotes.config import settings

# Password hashing context
# Argon2 is used for both user passwords and team access keys
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

SESSION_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)
REMEMBER_TOKEN_BYTES = 24


def hash_password(plain: str) -> str:
    """
    Hash a plain text secret (password or team access key) using Argon2.

    Args:
        plain: Plain text secret to hash

    Returns:
        Hashed string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """
    Verify a plain text secret against a stored hash.

    Args:
        plain: Plain text secret to verify
        hashed: Hash from database

    Returns:
        True if the secret matches, False otherwise (including a malformed hash)
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False


def generate_remember_token() -> str:
    """Mint a new opaque remember token stored on the user at login."""
    return secrets.token_urlsafe(REMEMBER_TOKEN_BYTES)


def create_session_token(remember_token: str) -> str:
    """
    Wrap a remember token into a signed session token for the session cookie.

    The remember token stays the source of truth: logging out clears it on the
    user, which invalidates every session token minted for it even before
    the token expires.

    Token payload includes:
        - sub: Subject (remember token)
        - iat: Issued at timestamp
        - exp: Expiration timestamp
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": remember_token,
        "iat": now,
        "exp": now + dt.timedelta(minutes=settings.session_expire_minutes),
    }
    return jwt.encode(payload, settings.session_secret, algorithm=SESSION_ALG)


def decode_session_token(token: str) -> str:
    """
    Validate a session token and return the remember token it carries.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid, malformed or has no subject
    """
    payload = jwt.decode(token, settings.session_secret, algorithms=[SESSION_ALG])
    remember_token = payload.get("sub")
    if not remember_token:
        raise jwt.InvalidTokenError("session token carries no subject")
    return remember_token
