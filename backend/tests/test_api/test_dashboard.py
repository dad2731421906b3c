"""Tests for the per-user guest and host dashboards."""

from decimal import Decimal

from httpx import AsyncClient

from rentora.models.enums import BookingStatus, PropertyStatus


class TestUserDashboard:
    async def test_counts_and_upcoming(self, client: AsyncClient, guest_headers, test_property, make_booking, day):
        upcoming = await make_booking(test_property, day(1), day(3), status=BookingStatus.PENDING)
        await make_booking(test_property, day(5), day(6), status=BookingStatus.CANCELLED)
        await make_booking(test_property, day(-40), day(-38), status=BookingStatus.CHECKED_OUT)

        response = await client.get("/api/v1/dashboard/user", headers=guest_headers)
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["stats"]["bookingCount"] == 3
        assert data["stats"]["propertyCount"] == 0
        assert data["stats"]["reviewCount"] == 0
        assert [b["id"] for b in data["upcomingBookings"]] == [str(upcoming.id)]

    async def test_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/v1/dashboard/user")
        assert response.status_code == 401


class TestHostDashboard:
    async def test_host_stats(
        self, client: AsyncClient, host_headers, test_property, make_property, make_booking, day
    ):
        await make_property(status=PropertyStatus.PENDING_VERIFICATION.value)
        await make_booking(test_property, day(-40), day(-37), status=BookingStatus.CHECKED_OUT)
        await make_booking(test_property, day(-31), day(-29), status=BookingStatus.CONFIRMED)
        await make_booking(test_property, day(10), day(12), status=BookingStatus.PENDING)

        response = await client.get("/api/v1/dashboard/host", headers=host_headers)
        assert response.status_code == 200
        stats = response.json()["data"]["stats"]
        assert stats["totalProperties"] == 2
        assert stats["activeProperties"] == 1
        assert stats["totalBookings"] == 3
        assert stats["pendingBookings"] == 1
        assert stats["currentStays"] == 1
        assert Decimal(str(stats["totalEarnings"])) == Decimal("3000.00")
        assert len(response.json()["data"]["recentBookings"]) == 3

    async def test_plain_user_forbidden(self, client: AsyncClient, guest_headers):
        response = await client.get("/api/v1/dashboard/host", headers=guest_headers)
        assert response.status_code == 403
