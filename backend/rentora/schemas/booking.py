"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field

from rentora.schemas.auth import UserSummary
from rentora.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(CamelModel):
    """Schema for requesting a booking.

    Date ordering is checked by the booking service so that it is reported
    as ``INVALID_DATES`` rather than a generic validation failure.
    """

    property_id: uuid.UUID
    check_in: datetime
    check_out: datetime
    guests_count: int = Field(..., ge=1)
    special_requests: str | None = Field(None, max_length=2000)


class BookingCancel(CamelModel):
    """Optional cancellation reason."""

    reason: str | None = Field(None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingPropertySummary(CamelModel):
    id: uuid.UUID
    title: str
    city: str
    price: Decimal
    price_unit: str


class BookingResponse(CamelModel):
    """Booking record returned from lifecycle operations."""

    id: uuid.UUID
    property_id: uuid.UUID
    guest_id: uuid.UUID
    host_id: uuid.UUID
    check_in: datetime
    check_out: datetime
    guests_count: int
    special_requests: str | None = None
    total_price: Decimal
    status: str
    cancellation_reason: str | None = None
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class BookingDetailResponse(BookingResponse):
    """Booking with a property summary and both parties' cards."""

    property: BookingPropertySummary | None = None
    guest: UserSummary | None = None
    host: UserSummary | None = None
