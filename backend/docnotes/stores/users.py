# docnotes/stores/users.py
"""Tortoise ORM implementation of the identity store."""
from typing import Optional

from tortoise.exceptions import IntegrityError, OperationalError

from docnotes.core.db import translate_db_error
from docnotes.core.errors import ConflictError, NotFoundError
from docnotes.models.user import User
from docnotes.stores.base import UserStore


class TortoiseUserStore(UserStore):

    async def _get(self, **filters) -> User:
        user = await User.get_or_none(**filters)
        if not user:
            raise NotFoundError("Unknown user", code="USER_NOT_FOUND")
        return user

    async def find_by_id(self, user_id: int) -> User:
        return await self._get(id=user_id)

    async def find_by_username(self, username: str) -> User:
        return await self._get(username=username)

    async def find_by_email(self, email: str) -> User:
        return await self._get(email=email)

    async def find_by_remember_token(self, token: str) -> User:
        if not token:
            raise NotFoundError("Unknown session", code="USER_NOT_FOUND")
        return await self._get(remember_token=token)

    async def store(self, username: str, password_hash: str, email: Optional[str] = None) -> User:
        # Check duplicates first for a precise error code; the unique indexes
        # still catch concurrent registrations
        if await User.filter(username=username).exists():
            raise ConflictError("A user with this username already exists", code="USERNAME_EXISTS")
        if email and await User.filter(email=email).exists():
            raise ConflictError("A user with this email already exists", code="EMAIL_EXISTS")
        try:
            return await User.create(username=username, email=email or None, password_hash=password_hash)
        except IntegrityError as exc:
            raise ConflictError("A user with this username already exists", code="USERNAME_EXISTS") from exc

    async def update(self, user: User) -> User:
        if user.email and await User.filter(email=user.email).exclude(id=user.id).exists():
            raise ConflictError("A user with this email already exists", code="EMAIL_EXISTS")
        try:
            await user.save()
        except OperationalError as exc:
            raise translate_db_error(exc, "A user with this email already exists") from exc
        return user
