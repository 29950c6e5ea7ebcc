# docnotes/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating the default global moderator on first startup.
"""
import logging

from docnotes.config import settings
from docnotes.core.security import hash_password
from docnotes.models.user import User

logger = logging.getLogger("uvicorn.error")


async def ensure_default_moderator() -> None:
    """
    If no global moderator exists in the database, create one based on settings.
    Only takes effect under the following conditions:
      - Currently no user with moderator=True
      - And MODERATOR_PASSWORD is set (to avoid using a default weak password)
    Environment variables:
      MODERATOR_USERNAME (default: "moderator")
      MODERATOR_EMAIL    (default: "moderator@example.com")
      MODERATOR_PASSWORD (required, otherwise won't create)
    """
    if await User.filter(moderator=True).exists():
        return

    if not settings.moderator_password:
        logger.warning("[bootstrap] No moderator present, but MODERATOR_PASSWORD not set -> skip creating default moderator.")
        return

    # If the username is already taken by a regular account, pick a non-conflicting one
    username = base_username = settings.moderator_username
    suffix = 1
    while await User.filter(username=username).exists():
        suffix += 1
        username = f"{base_username}{suffix}"

    email = settings.moderator_email
    if email and await User.filter(email=email).exists():
        email = None

    u = await User.create(
        username=username,
        email=email,
        password_hash=hash_password(settings.moderator_password),
        moderator=True,
    )
    logger.warning("[bootstrap] Created default moderator -> username=%s email=%s id=%s",
                   u.username, u.email, u.id)
