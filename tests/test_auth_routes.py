"""
Tests for registration, login, logout and the current-user endpoint.
"""
import pytest

from app.core import config
from app.core.limiter import limiter
from helpers import register


def role_names(user: dict) -> list[str]:
    return [role["name"] for role in user["roles"]]


async def test_first_user_of_company_is_admin_second_is_user(client_factory):
    alice = await register(client_factory(), "alice", "x", "Acme")
    bob = await register(client_factory(), "bob", "y", "Acme")

    assert role_names(alice) == ["admin"]
    assert role_names(bob) == ["user"]
    assert alice["company_id"] == bob["company_id"]


async def test_new_company_name_gets_its_own_admin(client_factory):
    alice = await register(client_factory(), "alice", "x", "Acme")
    carol = await register(client_factory(), "carol", "z", "Globex")

    assert role_names(carol) == ["admin"]
    assert carol["company_id"] != alice["company_id"]


async def test_register_never_returns_password(client):
    response = await client.post(
        "/api/auth/register",
        json={"username": "alice", "password": "secret-pw", "companyName": "Acme"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Registration successful"
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]
    assert "secret-pw" not in response.text


async def test_register_logs_the_user_in(client):
    await register(client, "alice", "x", "Acme")

    response = await client.get("/api/user")

    assert response.status_code == 200
    assert response.json()["username"] == "alice"


async def test_duplicate_username_is_rejected(client_factory):
    await register(client_factory(), "alice", "x", "Acme")

    response = await client_factory().post(
        "/api/auth/register",
        json={"username": "alice", "password": "other", "companyName": "Globex"},
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Username already exists"}


async def test_register_validation_error_has_message(client):
    response = await client.post("/api/auth/register", json={"username": "alice"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid request"
    assert "password" in body["errors"]
    assert "companyName" in body["errors"]


async def test_login_with_wrong_password_is_401_without_session(client_factory):
    await register(client_factory(), "alice", "right", "Acme")
    client = client_factory()

    response = await client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid username or password"}
    assert config.SESSION_COOKIE_NAME not in response.cookies
    assert (await client.get("/api/user")).status_code == 401


async def test_login_with_unknown_user_is_401(client):
    response = await client.post("/api/auth/login", json={"username": "nobody", "password": "x"})

    assert response.status_code == 401


async def test_login_opens_session(client_factory):
    await register(client_factory(), "alice", "right", "Acme")
    client = client_factory()

    response = await client.post("/api/auth/login", json={"username": "alice", "password": "right"})

    assert response.status_code == 200
    assert response.json()["message"] == "Login successful"
    assert role_names(response.json()["user"]) == ["admin"]
    assert config.SESSION_COOKIE_NAME in response.cookies
    set_cookie = response.headers["set-cookie"].lower()
    assert "httponly" in set_cookie

    me = await client.get("/api/user")
    assert me.status_code == 200
    assert me.json()["username"] == "alice"
    assert "password_hash" not in me.json()


async def test_current_user_requires_session(client):
    response = await client.get("/api/user")

    assert response.status_code == 401
    assert response.json() == {"message": "Unauthorized"}


async def test_forged_session_cookie_is_rejected(client_factory):
    client = client_factory()
    client.cookies.set(config.SESSION_COOKIE_NAME, "forged-token")

    response = await client.get("/api/user")

    assert response.status_code == 401


async def test_logout_destroys_session(client_factory):
    client = client_factory()
    await register(client, "alice", "x", "Acme")
    token = client.cookies.get(config.SESSION_COOKIE_NAME)

    response = await client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully"}
    assert (await client.get("/api/user")).status_code == 401

    replay = client_factory()
    replay.cookies.set(config.SESSION_COOKIE_NAME, token)
    assert (await replay.get("/api/user")).status_code == 401


async def test_logout_requires_session(client):
    response = await client.post("/api/auth/logout")

    assert response.status_code == 401


@pytest.fixture
def rate_limited():
    limiter.reset()
    limiter.enabled = True
    yield limiter
    limiter.enabled = False
    limiter.reset()


async def test_login_limit_ignores_rotating_cookies(rate_limited, client_factory):
    await register(client_factory(), "alice", "right", "Acme")
    client = client_factory()

    statuses = []
    for attempt in range(25):
        client.cookies.set(config.SESSION_COOKIE_NAME, f"random-{attempt}")
        response = await client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})
        statuses.append(response.status_code)

    assert statuses.count(401) == 20
    assert statuses.count(429) == 5
    assert response.json() == {"message": "You are going too fast"}
