"""Tests for the admin back office."""

import uuid
from datetime import timezone
from decimal import Decimal

import pytest
from httpx import AsyncClient

from rentora.models.enums import BookingStatus, PropertyStatus


class TestAccess:
    @pytest.mark.parametrize(
        "path",
        ["/api/v1/admin/stats", "/api/v1/admin/activity", "/api/v1/admin/users", "/api/v1/admin/bookings"],
    )
    async def test_non_admin_forbidden(self, client: AsyncClient, host_headers, path):
        response = await client.get(path, headers=host_headers)
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"


class TestOverview:
    async def test_stats(self, client: AsyncClient, admin_headers, test_property, make_property, make_booking, day):
        await make_property(status=PropertyStatus.PENDING_VERIFICATION.value)
        await make_booking(test_property, day(-40), day(-38), status=BookingStatus.CHECKED_OUT)
        await make_booking(test_property, day(1), day(2), status=BookingStatus.PENDING)

        response = await client.get("/api/v1/admin/stats", headers=admin_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        # admin, host and guest
        assert data["totalUsers"] == 3
        assert data["totalProperties"] == 2
        assert data["activeProperties"] == 1
        assert data["pendingVerifications"] == 1
        assert data["totalBookings"] == 2
        assert data["pendingBookings"] == 1
        assert Decimal(str(data["totalRevenue"])) == Decimal("2000.00")

    async def test_activity(self, client: AsyncClient, admin_headers, test_property, make_booking, day):
        await make_booking(test_property, day(1), day(2))
        response = await client.get("/api/v1/admin/activity", params={"limit": 20}, headers=admin_headers)
        assert response.status_code == 200
        items = response.json()["data"]
        assert {item["type"] for item in items} == {"booking", "user", "listing"}
        booking = next(item for item in items if item["type"] == "booking")
        assert booking["user"] == "Gina Guest"
        assert booking["description"] == "New booking for Test Apartment in Town"


class TestVerification:
    async def test_pending_list(self, client: AsyncClient, admin_headers, make_property):
        await make_property(title="Awaiting Review Flat", status=PropertyStatus.PENDING_VERIFICATION.value)
        await make_property(title="Already Listed Flat")
        response = await client.get("/api/v1/admin/properties/pending", headers=admin_headers)
        assert [p["title"] for p in response.json()["data"]] == ["Awaiting Review Flat"]
        assert response.json()["meta"]["total"] == 1

    async def test_approve_notifies_owner(self, client: AsyncClient, admin_headers, host_headers, make_property):
        prop = await make_property(status=PropertyStatus.PENDING_VERIFICATION.value)
        response = await client.patch(
            f"/api/v1/admin/properties/{prop.id}/verify", json={"approved": True}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "AVAILABLE"

        inbox = await client.get("/api/v1/notifications", headers=host_headers)
        assert [n["type"] for n in inbox.json()["data"]] == ["property_verified"]

    async def test_reject(self, client: AsyncClient, admin_headers, host_headers, make_property):
        prop = await make_property(status=PropertyStatus.PENDING_VERIFICATION.value)
        response = await client.patch(
            f"/api/v1/admin/properties/{prop.id}/verify", json={"approved": False}, headers=admin_headers
        )
        assert response.json()["data"]["status"] == "REJECTED"

        inbox = await client.get("/api/v1/notifications", headers=host_headers)
        assert [n["type"] for n in inbox.json()["data"]] == ["property_rejected"]

    async def test_only_pending_can_be_verified(self, client: AsyncClient, admin_headers, test_property):
        response = await client.patch(
            f"/api/v1/admin/properties/{test_property.id}/verify", json={"approved": True}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS"

    async def test_unknown_property(self, client: AsyncClient, admin_headers):
        response = await client.patch(
            f"/api/v1/admin/properties/{uuid.uuid4()}/verify", json={"approved": True}, headers=admin_headers
        )
        assert response.status_code == 404


class TestUsers:
    async def test_list_filtered_by_role(self, client: AsyncClient, admin_headers, host_user, guest_user):
        response = await client.get("/api/v1/admin/users", params={"role": "HOST"}, headers=admin_headers)
        assert [u["id"] for u in response.json()["data"]] == [str(host_user.id)]

    async def test_promote_user(self, client: AsyncClient, admin_headers, guest_user):
        response = await client.patch(
            f"/api/v1/admin/users/{guest_user.id}", json={"role": "HOST"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "HOST"
        assert response.json()["data"]["isActive"] is True

    async def test_deactivate_user(self, client: AsyncClient, admin_headers, guest_user, guest_headers):
        response = await client.patch(
            f"/api/v1/admin/users/{guest_user.id}", json={"isActive": False}, headers=admin_headers
        )
        assert response.json()["data"]["isActive"] is False

        me = await client.get("/api/v1/auth/me", headers=guest_headers)
        assert me.status_code == 401

    async def test_cannot_modify_self(self, client: AsyncClient, admin_headers, admin_user):
        response = await client.patch(
            f"/api/v1/admin/users/{admin_user.id}", json={"role": "USER"}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestBookings:
    async def test_list_all_with_status_filter(
        self, client: AsyncClient, admin_headers, test_property, make_booking, day
    ):
        await make_booking(test_property, day(1), day(2), status=BookingStatus.PENDING)
        confirmed = await make_booking(test_property, day(3), day(4), status=BookingStatus.CONFIRMED)

        everything = await client.get("/api/v1/admin/bookings", headers=admin_headers)
        assert everything.json()["meta"]["total"] == 2

        only_confirmed = await client.get(
            "/api/v1/admin/bookings", params={"status": "CONFIRMED"}, headers=admin_headers
        )
        assert [b["id"] for b in only_confirmed.json()["data"]] == [str(confirmed.id)]

    async def test_refund_confirmed(
        self, client: AsyncClient, admin_headers, guest_headers, test_property, make_booking, day
    ):
        booking = await make_booking(test_property, day(1), day(2), status=BookingStatus.CONFIRMED)
        response = await client.patch(f"/api/v1/admin/bookings/{booking.id}/refund", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "REFUNDED"

        inbox = await client.get("/api/v1/notifications", headers=guest_headers)
        assert "booking_refunded" in [n["type"] for n in inbox.json()["data"]]

    async def test_refund_pending_rejected(self, client: AsyncClient, admin_headers, test_property, make_booking, day):
        booking = await make_booking(test_property, day(1), day(2), status=BookingStatus.PENDING)
        response = await client.patch(f"/api/v1/admin/bookings/{booking.id}/refund", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS"

    async def test_refund_frees_dates(
        self, client: AsyncClient, admin_headers, other_headers, test_property, make_booking, day
    ):
        booking = await make_booking(test_property, day(1), day(3), status=BookingStatus.CONFIRMED)
        await client.patch(f"/api/v1/admin/bookings/{booking.id}/refund", headers=admin_headers)

        rebook = await client.post(
            "/api/v1/bookings",
            json={
                "propertyId": str(test_property.id),
                "checkIn": day(1).replace(tzinfo=timezone.utc).isoformat(),
                "checkOut": day(3).replace(tzinfo=timezone.utc).isoformat(),
                "guestsCount": 1,
            },
            headers=other_headers,
        )
        assert rebook.status_code == 201
