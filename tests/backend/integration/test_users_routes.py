import uuid

import pytest

from docnotes.config import settings
from docnotes.models.user import User


pytestmark = pytest.mark.asyncio


async def register_user(client, username: str, email: str | None, password: str):
    return await client.post(
        "/api/v1/users/register",
        json={"username": username, "email": email, "password": password},
    )


async def login_user(client, username: str, password: str):
    return await client.post(
        "/api/v1/users/login",
        json={"username": username, "password": password},
    )


async def test_register_and_login_flow(client):
    username = f"user_{uuid.uuid4().hex[:6]}"
    email = f"{username}@example.com"
    password = "StrongPass!23"

    resp = await register_user(client, username, email, password)
    body = resp.json()
    assert resp.status_code == 200
    assert body["success"] is True
    assert body["data"]["username"] == username
    assert body["data"]["moderator"] is False

    # Duplicate username should fail
    dup_resp = await register_user(client, username, "other@example.com", password)
    assert dup_resp.status_code == 409
    assert dup_resp.json()["error"]["code"] == "USERNAME_EXISTS"

    # Duplicate email should fail
    dup_email = await register_user(client, "someone_else", email, password)
    assert dup_email.status_code == 409
    assert dup_email.json()["error"]["code"] == "EMAIL_EXISTS"

    # Successful login sets the session cookie
    login_resp = await login_user(client, username, password)
    login_body = login_resp.json()
    assert login_resp.status_code == 200
    assert login_body["success"] is True
    assert "sessionToken" in login_body["data"]
    assert settings.session_cookie_name in login_resp.cookies

    # Invalid password
    bad_login = await login_user(client, username, "wrong")
    assert bad_login.status_code == 401
    assert bad_login.json()["error"]["code"] == "AUTH_INVALID_CREDENTIALS"


async def test_register_requires_username_and_password(client):
    resp = await register_user(client, "", None, "x")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MISSING_USERNAME"

    resp = await register_user(client, "someone", None, "")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "MISSING_PASSWORD"


async def test_session_cookie_authenticates(client):
    await register_user(client, "cookie_user", None, "Cookie#123")
    await login_user(client, "cookie_user", "Cookie#123")

    me = await client.get("/api/v1/users/me")
    assert me.status_code == 200
    assert me.json()["data"]["username"] == "cookie_user"
    assert me.json()["data"]["teams"] == []


async def test_me_requires_session(client):
    resp = await client.get("/api/v1/users/me")
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "AUTH_REQUIRED"


async def test_invalid_session_is_rejected(client):
    resp = await client.get("/api/v1/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "AUTH_INVALID_SESSION"


async def test_change_password_and_logout(client, signed_in):
    user, headers = await signed_in()

    change = await client.post("/api/v1/users/password", headers=headers, json={"password": "NewPass#456"})
    assert change.status_code == 200

    relogin = await login_user(client, user.username, "NewPass#456")
    assert relogin.status_code == 200
    client.cookies.clear()
    headers = {"Authorization": f"Bearer {relogin.json()['data']['sessionToken']}"}

    logout = await client.post("/api/v1/users/logout", headers=headers)
    assert logout.status_code == 200
    assert (await User.get(id=user.id)).remember_token is None

    # The token is revoked together with the remember token
    after = await client.get("/api/v1/users/me", headers=headers)
    assert after.status_code == 401


async def test_change_email(client, signed_in, create_user):
    other, _ = await create_user()
    user, headers = await signed_in()

    taken = await client.post("/api/v1/users/email", headers=headers, json={"email": other.email})
    assert taken.status_code == 409
    assert taken.json()["error"]["code"] == "EMAIL_EXISTS"

    resp = await client.post("/api/v1/users/email", headers=headers, json={"email": "fresh@example.com"})
    assert resp.status_code == 200
    assert (await User.get(id=user.id)).email == "fresh@example.com"

    missing = await client.post("/api/v1/users/email", headers=headers, json={"email": ""})
    assert missing.status_code == 400


async def test_healthz(client):
    resp = await client.get("/healthz")
    assert resp.json() == {"ok": True}
