"""Date-range overlap checks for property bookings.

Intervals are half-open: ``[check_in, check_out)``. A booking ending on the
day another begins does not conflict with it.
"""

import uuid
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.models.booking import Booking
from rentora.models.enums import BookingStatus

# Bookings in these states never block a date range.
NON_BLOCKING_STATUSES: frozenset[str] = frozenset({BookingStatus.CANCELLED.value, BookingStatus.REFUNDED.value})


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    """Return True if ``[start_a, end_a)`` and ``[start_b, end_b)`` intersect."""
    return start_a < end_b and start_b < end_a


def is_blocking(status: str) -> bool:
    return status not in NON_BLOCKING_STATUSES


async def find_conflicting_booking(
    db: AsyncSession,
    property_id: uuid.UUID,
    start: datetime,
    end: datetime,
    exclude_statuses: Iterable[str] = NON_BLOCKING_STATUSES,
    exclude_booking_id: uuid.UUID | None = None,
) -> Booking | None:
    """Return one existing booking overlapping ``[start, end)``, if any."""
    query = select(Booking).where(
        Booking.property_id == property_id,
        Booking.status.notin_(list(exclude_statuses)),
        Booking.check_in < end,
        Booking.check_out > start,
    )
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)

    result = await db.execute(query.limit(1))
    return result.scalars().first()


async def has_conflict(
    db: AsyncSession,
    property_id: uuid.UUID,
    start: datetime,
    end: datetime,
    exclude_statuses: Iterable[str] = NON_BLOCKING_STATUSES,
) -> bool:
    """Whether any blocking booking on the property intersects ``[start, end)``.

    Read-only. The caller is responsible for rejecting ``start >= end`` first
    and for holding the property row lock if it intends to insert afterwards.
    """
    return await find_conflicting_booking(db, property_id, start, end, exclude_statuses) is not None
