import pytest
from httpx import AsyncClient

from stockroom.models.user import User


@pytest.mark.asyncio
async def test_register_defaults_to_viewer(client: AsyncClient):
    r = await client.post(
        "/api/v1/auth/register",
        json={"email": "New.User@example.com", "name": "New User", "password": "Secret123", "role": "admin"},
    )
    assert r.status_code == 201, r.text
    user = r.json()["user"]
    assert user["email"] == "new.user@example.com"
    # Self-registration cannot pick a role.
    assert user["role"] == "viewer"
    assert "hashed_password" not in user


@pytest.mark.asyncio
async def test_admin_can_register_with_role(client: AsyncClient, admin_token: str):
    r = await client.post(
        "/api/v1/auth/register",
        json={"email": "ops@example.com", "name": "Ops", "password": "Secret123", "role": "operator"},
        headers={"Authorization": f"Bearer {admin_token}"},
    )
    assert r.status_code == 201, r.text
    assert r.json()["user"]["role"] == "operator"


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, viewer_user: User):
    r = await client.post(
        "/api/v1/auth/register",
        json={"email": viewer_user.email.upper(), "name": "Dup", "password": "Secret123"},
    )
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Bad Request"
    assert body["message"] == "Email already registered."


@pytest.mark.asyncio
async def test_register_validation_error_shape(client: AsyncClient):
    r = await client.post("/api/v1/auth/register", json={"email": "bad", "name": "", "password": "x"})
    assert r.status_code == 400
    body = r.json()
    assert body["code"] == "validation_error"
    assert isinstance(body["details"], list) and body["details"]


@pytest.mark.asyncio
async def test_login_returns_tokens_and_user(client: AsyncClient, manager_user: User):
    r = await client.post(
        "/api/v1/auth/login",
        data={"username": manager_user.email, "password": "Manager1234"},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["access_token"] and body["refresh_token"]
    assert body["user"]["role"] == "manager"
    assert body["user"]["last_login"] is not None


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, manager_user: User):
    r = await client.post(
        "/api/v1/auth/login",
        data={"username": manager_user.email, "password": "nope-nope"},
    )
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid credentials"
    assert r.headers.get("www-authenticate") == "Bearer"


@pytest.mark.asyncio
async def test_login_inactive_user(client: AsyncClient, db_session, viewer_user: User):
    viewer_user.is_active = False
    db_session.add(viewer_user)
    db_session.commit()

    r = await client.post(
        "/api/v1/auth/login",
        data={"username": viewer_user.email, "password": "Viewer1234"},
    )
    assert r.status_code == 401
    assert r.json()["message"] == "User is inactive"


@pytest.mark.asyncio
async def test_me_requires_token(client: AsyncClient):
    r = await client.get("/api/v1/auth/me")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_me_with_garbage_token(client: AsyncClient):
    r = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["error"] == "Unauthorized"


@pytest.mark.asyncio
async def test_me_returns_current_user(client: AsyncClient, operator_token: str, operator_user: User):
    r = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {operator_token}"})
    assert r.status_code == 200, r.text
    assert r.json()["user"]["id"] == str(operator_user.id)


@pytest.mark.asyncio
async def test_logout_revokes_access_token(client: AsyncClient, viewer_token: str):
    headers = {"Authorization": f"Bearer {viewer_token}"}
    r = await client.post("/api/v1/auth/logout", headers=headers)
    assert r.status_code == 200, r.text

    again = await client.get("/api/v1/auth/me", headers=headers)
    assert again.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rotates_tokens(client: AsyncClient, manager_user: User):
    login = await client.post(
        "/api/v1/auth/login",
        data={"username": manager_user.email, "password": "Manager1234"},
    )
    refresh = login.json()["refresh_token"]

    r = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
    assert r.status_code == 200, r.text
    new_access = r.json()["access_token"]
    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {new_access}"})
    assert me.status_code == 200

    # The old refresh token was spent.
    reused = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
    assert reused.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient, viewer_token: str):
    r = await client.post("/api/v1/auth/refresh", json={"refresh_token": viewer_token})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_update_profile(client: AsyncClient, viewer_token: str):
    headers = {"Authorization": f"Bearer {viewer_token}"}
    r = await client.put("/api/v1/auth/profile", json={"name": "Renamed"}, headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["user"]["name"] == "Renamed"

    empty = await client.put("/api/v1/auth/profile", json={}, headers=headers)
    assert empty.status_code == 400
