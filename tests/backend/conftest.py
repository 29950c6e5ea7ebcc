import os
import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from docnotes.core import db as db_module
from docnotes.core.security import hash_password
from docnotes.main import app
from docnotes.models.user import User


TEST_DB_URL = "sqlite://:memory:?cache=shared"
os.environ["DATABASE_URL"] = TEST_DB_URL
db_module.DB_URL = TEST_DB_URL
db_module.TORTOISE_ORM["connections"]["default"] = TEST_DB_URL


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await db_module.init_db(generate_schemas=True)


@pytest_asyncio.fixture
async def db():
    """Fresh database for store-level tests that don't go through HTTP."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client():
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    await _init_test_db()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    app.dependency_overrides.clear()
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create regular users directly via ORM.
    """

    async def _create_user(username: str | None = None, password: str = "UserPass!23") -> tuple[User, str]:
        user = await User.create(
            username=username or f"user_{uuid.uuid4().hex[:6]}",
            email=f"{uuid.uuid4().hex[:6]}@example.com",
            password_hash=hash_password(password),
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def create_moderator():
    """
    Factory fixture to create global moderators for moderation endpoints.
    """

    async def _create_moderator(password: str = "ModPass!23") -> tuple[User, str]:
        user = await User.create(
            username=f"mod_{uuid.uuid4().hex[:6]}",
            email=f"mod_{uuid.uuid4().hex[:6]}@example.com",
            password_hash=hash_password(password),
            moderator=True,
        )
        return user, password

    return _create_moderator


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(username: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/users/login",
            json={"username": username, "password": password},
        )
        assert resp.status_code == 200, resp.text
        # Drop the session cookie so each request authenticates by its own header
        client.cookies.clear()
        token = resp.json()["data"]["sessionToken"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def signed_in(create_user, auth_header_factory):
    """Create a user and return (user, headers) for it."""

    async def _signed_in(username: str | None = None) -> tuple[User, dict[str, str]]:
        user, password = await create_user(username)
        return user, await auth_header_factory(user.username, password)

    return _signed_in
