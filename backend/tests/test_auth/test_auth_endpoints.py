"""Tests for the auth endpoints and the get_current_user dependency."""

import uuid
from datetime import timedelta

from httpx import AsyncClient

from rentora.auth.jwt import create_access_token, create_token_pair
from rentora.models.enums import UserRole
from rentora.models.user import User

# Matches the password set by the make_user fixture.
PASSWORD = "testpass123"


def _register_payload(**overrides) -> dict:
    payload = {
        "email": f"new-{uuid.uuid4().hex[:8]}@test.com",
        "password": "longenough1",
        "firstName": "Nina",
        "lastName": "New",
    }
    payload.update(overrides)
    return payload


class TestRegister:
    async def test_register_success(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json=_register_payload(phone="+351900000000"))
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        user = body["data"]["user"]
        assert user["firstName"] == "Nina"
        assert user["role"] == "USER"
        assert user["isActive"] is True
        assert "hashedPassword" not in user
        tokens = body["data"]["tokens"]
        assert tokens["tokenType"] == "bearer"
        assert tokens["accessToken"]
        assert tokens["refreshToken"]

    async def test_register_as_host(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json=_register_payload(role="HOST"))
        assert response.status_code == 201
        assert response.json()["data"]["user"]["role"] == "HOST"

    async def test_cannot_self_register_as_admin(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json=_register_payload(role="ADMIN"))
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_email_is_lowercased(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json=_register_payload(email="MiXeD@Test.com"))
        assert response.json()["data"]["user"]["email"] == "mixed@test.com"

    async def test_duplicate_email(self, client: AsyncClient):
        payload = _register_payload()
        assert (await client.post("/api/v1/auth/register", json=payload)).status_code == 201
        response = await client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_ENTRY"

    async def test_short_password(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/register", json=_register_payload(password="short"))
        assert response.status_code == 400

    async def test_snake_case_keys_accepted(self, client: AsyncClient):
        payload = _register_payload()
        payload["first_name"] = payload.pop("firstName")
        payload["last_name"] = payload.pop("lastName")
        response = await client.post("/api/v1/auth/register", json=payload)
        assert response.status_code == 201


class TestLogin:
    async def test_login_success(self, client: AsyncClient, guest_user: User):
        response = await client.post("/api/v1/auth/login", json={"email": guest_user.email, "password": PASSWORD})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["id"] == str(guest_user.id)
        assert data["tokens"]["accessToken"]

    async def test_login_is_case_insensitive_on_email(self, client: AsyncClient, guest_user: User):
        response = await client.post(
            "/api/v1/auth/login", json={"email": guest_user.email.upper(), "password": PASSWORD}
        )
        assert response.status_code == 200

    async def test_wrong_password(self, client: AsyncClient, guest_user: User):
        response = await client.post("/api/v1/auth/login", json={"email": guest_user.email, "password": "nope-nope"})
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_unknown_email(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/login", json={"email": "ghost@test.com", "password": PASSWORD})
        assert response.status_code == 401

    async def test_inactive_account(self, client: AsyncClient, make_user):
        user = await make_user(UserRole.USER, is_active=False)
        response = await client.post("/api/v1/auth/login", json={"email": user.email, "password": PASSWORD})
        assert response.status_code == 403


class TestRefresh:
    async def test_refresh_success(self, client: AsyncClient, guest_user: User):
        tokens = create_token_pair(str(guest_user.id))
        response = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["refresh_token"]})
        assert response.status_code == 200
        assert response.json()["data"]["accessToken"]

    async def test_access_token_rejected(self, client: AsyncClient, guest_user: User):
        tokens = create_token_pair(str(guest_user.id))
        response = await client.post("/api/v1/auth/refresh", json={"refreshToken": tokens["access_token"]})
        assert response.status_code == 401

    async def test_garbage_token_rejected(self, client: AsyncClient):
        response = await client.post("/api/v1/auth/refresh", json={"refreshToken": "garbage"})
        assert response.status_code == 401


class TestMe:
    async def test_get_me(self, client: AsyncClient, guest_user: User, guest_headers: dict):
        response = await client.get("/api/v1/auth/me", headers=guest_headers)
        assert response.status_code == 200
        assert response.json()["data"]["email"] == guest_user.email

    async def test_update_me(self, client: AsyncClient, guest_headers: dict):
        response = await client.patch(
            "/api/v1/auth/me",
            json={"firstName": "Renamed", "avatarUrl": "https://cdn.test/a.png"},
            headers=guest_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["firstName"] == "Renamed"
        assert data["avatarUrl"] == "https://cdn.test/a.png"
        assert data["lastName"] == "Guest"

    async def test_role_cannot_be_changed_via_profile(self, client: AsyncClient, guest_headers: dict):
        response = await client.patch("/api/v1/auth/me", json={"role": "ADMIN"}, headers=guest_headers)
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "USER"


class TestGetCurrentUser:
    async def test_expired_token_rejected(self, client: AsyncClient, guest_user: User):
        token = create_access_token({"sub": str(guest_user.id)}, expires_delta=timedelta(seconds=-1))
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_refresh_token_type_rejected(self, client: AsyncClient, guest_user: User):
        tokens = create_token_pair(str(guest_user.id))
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
        assert response.status_code == 401

    async def test_nonexistent_user_rejected(self, client: AsyncClient):
        token = create_access_token({"sub": str(uuid.uuid4())})
        response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    async def test_inactive_user_rejected(self, client: AsyncClient, make_user, headers_for):
        user = await make_user(UserRole.HOST, is_active=False)
        response = await client.get("/api/v1/auth/me", headers=headers_for(user))
        assert response.status_code == 401
