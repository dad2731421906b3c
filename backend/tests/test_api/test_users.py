"""Tests for password change, a host's own listings and saved properties."""

import uuid

from httpx import AsyncClient

from rentora.models.enums import PropertyStatus

# Matches the password set by the make_user fixture.
PASSWORD = "testpass123"


class TestChangePassword:
    async def test_change_then_login(self, client: AsyncClient, guest_headers, guest_user):
        response = await client.post(
            "/api/v1/users/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "Brand9New"},
            headers=guest_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Password changed successfully"

        old = await client.post("/api/v1/auth/login", json={"email": guest_user.email, "password": PASSWORD})
        assert old.status_code == 401

        new = await client.post("/api/v1/auth/login", json={"email": guest_user.email, "password": "Brand9New"})
        assert new.status_code == 200

    async def test_wrong_current_password(self, client: AsyncClient, guest_headers):
        response = await client.post(
            "/api/v1/users/change-password",
            json={"currentPassword": "not-my-password", "newPassword": "Brand9New"},
            headers=guest_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PASSWORD"

    async def test_weak_new_password(self, client: AsyncClient, guest_headers):
        response = await client.post(
            "/api/v1/users/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "alllowercase1"},
            headers=guest_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/users/change-password",
            json={"currentPassword": PASSWORD, "newPassword": "Brand9New"},
        )
        assert response.status_code == 401


class TestMyProperties:
    async def test_includes_pending_listings(self, client: AsyncClient, host_headers, make_property, make_user):
        live = await make_property(title="Live apartment listing")
        pending = await make_property(
            title="Pending apartment listing", status=PropertyStatus.PENDING_VERIFICATION.value
        )
        stranger = await make_user()
        await make_property(title="Someone else's flat", owner_id=stranger.id)

        response = await client.get("/api/v1/users/properties", headers=host_headers)
        assert response.status_code == 200
        assert {p["id"] for p in response.json()["data"]} == {str(live.id), str(pending.id)}
        assert response.json()["meta"]["total"] == 2

        public = await client.get("/api/v1/properties")
        public_ids = {p["id"] for p in public.json()["data"]}
        assert str(live.id) in public_ids
        assert str(pending.id) not in public_ids

    async def test_status_filter(self, client: AsyncClient, host_headers, make_property):
        await make_property()
        pending = await make_property(status=PropertyStatus.PENDING_VERIFICATION.value)

        response = await client.get(
            "/api/v1/users/properties", params={"status": "PENDING_VERIFICATION"}, headers=host_headers
        )
        assert [p["id"] for p in response.json()["data"]] == [str(pending.id)]


class TestFavorites:
    async def test_add_list_remove(self, client: AsyncClient, guest_headers, test_property):
        added = await client.post(f"/api/v1/users/favorites/{test_property.id}", headers=guest_headers)
        assert added.status_code == 201
        assert added.json()["data"]["message"] == "Added to favorites"

        listing = await client.get("/api/v1/users/favorites", headers=guest_headers)
        assert [p["id"] for p in listing.json()["data"]] == [str(test_property.id)]

        removed = await client.delete(f"/api/v1/users/favorites/{test_property.id}", headers=guest_headers)
        assert removed.status_code == 200

        empty = await client.get("/api/v1/users/favorites", headers=guest_headers)
        assert empty.json()["data"] == []

    async def test_duplicate(self, client: AsyncClient, guest_headers, test_property):
        await client.post(f"/api/v1/users/favorites/{test_property.id}", headers=guest_headers)
        again = await client.post(f"/api/v1/users/favorites/{test_property.id}", headers=guest_headers)
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "ALREADY_EXISTS"

    async def test_unknown_property(self, client: AsyncClient, guest_headers):
        response = await client.post(f"/api/v1/users/favorites/{uuid.uuid4()}", headers=guest_headers)
        assert response.status_code == 404

    async def test_favorites_are_per_user(self, client: AsyncClient, guest_headers, other_headers, test_property):
        await client.post(f"/api/v1/users/favorites/{test_property.id}", headers=guest_headers)

        other = await client.get("/api/v1/users/favorites", headers=other_headers)
        assert other.json()["data"] == []

    async def test_remove_missing_is_noop(self, client: AsyncClient, guest_headers, test_property):
        response = await client.delete(f"/api/v1/users/favorites/{test_property.id}", headers=guest_headers)
        assert response.status_code == 200
