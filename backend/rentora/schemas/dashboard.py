"""Pydantic v2 schemas for dashboard statistics and the admin back office."""

import uuid
from datetime import datetime
from decimal import Decimal

from rentora.models.enums import UserRole
from rentora.schemas.booking import BookingResponse
from rentora.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Dashboards
# ---------------------------------------------------------------------------


class UserStats(CamelModel):
    property_count: int
    booking_count: int
    review_count: int
    unread_notifications: int


class UserDashboard(CamelModel):
    stats: UserStats
    upcoming_bookings: list[BookingResponse]


class HostStats(CamelModel):
    total_properties: int
    active_properties: int
    total_bookings: int
    pending_bookings: int
    total_earnings: Decimal
    current_stays: int


class HostDashboard(CamelModel):
    stats: HostStats
    recent_bookings: list[BookingResponse]


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


class AdminStats(CamelModel):
    total_users: int
    new_users_this_month: int
    total_properties: int
    active_properties: int
    pending_verifications: int
    total_bookings: int
    pending_bookings: int
    total_revenue: Decimal


class ActivityItem(CamelModel):
    id: uuid.UUID
    type: str
    description: str
    user: str
    timestamp: datetime


class AdminUserUpdate(CamelModel):
    """Fields an admin may change on any account."""

    role: UserRole | None = None
    is_active: bool | None = None
