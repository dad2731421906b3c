"""Tests for the half-open date-range overlap checks."""

from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.models.enums import BookingStatus
from rentora.services.availability import (
    find_conflicting_booking,
    has_conflict,
    intervals_overlap,
    is_blocking,
)


def d(n: int) -> datetime:
    return datetime(2026, 6, n)


class TestIntervalsOverlap:
    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            ((5, 10), (8, 12), True),
            ((5, 10), (10, 12), False),
            ((5, 10), (1, 5), False),
            ((5, 10), (6, 7), True),
            ((5, 10), (1, 20), True),
            ((5, 10), (5, 10), True),
        ],
    )
    def test_half_open(self, a, b, expected):
        assert intervals_overlap(d(a[0]), d(a[1]), d(b[0]), d(b[1])) is expected

    def test_symmetric(self):
        assert intervals_overlap(d(1), d(4), d(3), d(6)) == intervals_overlap(d(3), d(6), d(1), d(4))


class TestIsBlocking:
    @pytest.mark.parametrize(
        "status",
        [BookingStatus.PENDING, BookingStatus.CONFIRMED, BookingStatus.CHECKED_IN, BookingStatus.CHECKED_OUT],
    )
    def test_active_statuses_block(self, status):
        assert is_blocking(status.value)

    @pytest.mark.parametrize("status", [BookingStatus.CANCELLED, BookingStatus.REFUNDED])
    def test_released_statuses_do_not_block(self, status):
        assert not is_blocking(status.value)


class TestHasConflict:
    async def test_overlapping_confirmed_booking_conflicts(
        self, db_session: AsyncSession, test_property, make_booking, day
    ):
        await make_booking(test_property, day(5), day(10))
        assert await has_conflict(db_session, test_property.id, day(8), day(12))

    async def test_back_to_back_is_free(self, db_session: AsyncSession, test_property, make_booking, day):
        await make_booking(test_property, day(5), day(10))
        assert not await has_conflict(db_session, test_property.id, day(10), day(12))
        assert not await has_conflict(db_session, test_property.id, day(1), day(5))

    async def test_cancelled_booking_does_not_block(self, db_session: AsyncSession, test_property, make_booking, day):
        await make_booking(test_property, day(5), day(10), status=BookingStatus.CANCELLED)
        await make_booking(test_property, day(5), day(10), status=BookingStatus.REFUNDED)
        assert not await has_conflict(db_session, test_property.id, day(6), day(8))

    async def test_other_property_does_not_block(
        self, db_session: AsyncSession, test_property, make_property, make_booking, day
    ):
        other = await make_property(title="Another Test Listing")
        await make_booking(other, day(5), day(10))
        assert not await has_conflict(db_session, test_property.id, day(5), day(10))

    async def test_find_returns_the_conflicting_booking(
        self, db_session: AsyncSession, test_property, make_booking, day
    ):
        existing = await make_booking(test_property, day(5), day(10), status=BookingStatus.PENDING)
        found = await find_conflicting_booking(db_session, test_property.id, day(9), day(11))
        assert found is not None
        assert found.id == existing.id

    async def test_find_can_exclude_a_booking(self, db_session: AsyncSession, test_property, make_booking, day):
        existing = await make_booking(test_property, day(5), day(10))
        found = await find_conflicting_booking(
            db_session, test_property.id, day(5), day(10), exclude_booking_id=existing.id
        )
        assert found is None
