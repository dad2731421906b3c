"""Booking lifecycle: creation with availability/pricing, and status transitions.

Every status change goes through :data:`TRANSITIONS`, which names the states
a booking may leave from and the capability the actor needs. All functions
run inside the caller's transaction; property rows are locked with
``SELECT ... FOR UPDATE`` before the conflict check so two concurrent
requests cannot both insert overlapping bookings.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.auth.permissions import Action, authorize
from rentora.database import as_naive_utc, utcnow
from rentora.errors import (
    InvalidBookingError,
    InvalidDatesError,
    InvalidStatusError,
    MaxStayError,
    MinStayError,
    NotAvailableError,
    NotFoundError,
)
from rentora.models.booking import Booking
from rentora.models.enums import BookingStatus
from rentora.models.property import Property
from rentora.models.user import User
from rentora.schemas.booking import BookingCreate
from rentora.services import notification_service
from rentora.services.availability import has_conflict
from rentora.services.pricing import compute_total_price, stay_length_days

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transition:
    """A permitted status change and who may perform it."""

    target: BookingStatus
    allowed_from: frozenset[BookingStatus]
    action: Action
    error_message: str
    notification: str


TRANSITIONS: dict[BookingStatus, Transition] = {
    BookingStatus.CONFIRMED: Transition(
        target=BookingStatus.CONFIRMED,
        allowed_from=frozenset({BookingStatus.PENDING}),
        action=Action.BOOKING_CONFIRM,
        error_message="Can only confirm pending bookings",
        notification="booking_confirmed",
    ),
    BookingStatus.CANCELLED: Transition(
        target=BookingStatus.CANCELLED,
        allowed_from=frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED}),
        action=Action.BOOKING_CANCEL,
        error_message="Cannot cancel this booking",
        notification="booking_cancelled",
    ),
    BookingStatus.CHECKED_IN: Transition(
        target=BookingStatus.CHECKED_IN,
        allowed_from=frozenset({BookingStatus.CONFIRMED}),
        action=Action.BOOKING_CHECK_IN,
        error_message="Can only check in confirmed bookings",
        notification="booking_checked_in",
    ),
    BookingStatus.CHECKED_OUT: Transition(
        target=BookingStatus.CHECKED_OUT,
        allowed_from=frozenset({BookingStatus.CHECKED_IN}),
        action=Action.BOOKING_CHECK_OUT,
        error_message="Can only check out checked-in bookings",
        notification="booking_checked_out",
    ),
    BookingStatus.REFUNDED: Transition(
        target=BookingStatus.REFUNDED,
        allowed_from=frozenset({BookingStatus.CONFIRMED}),
        action=Action.BOOKING_REFUND,
        error_message="Can only refund confirmed bookings",
        notification="booking_refunded",
    ),
}


def can_transition(current: BookingStatus | str, target: BookingStatus | str) -> bool:
    """Whether the state machine allows ``current -> target`` (ignoring who asks)."""
    rule = TRANSITIONS.get(BookingStatus(target))
    return rule is not None and BookingStatus(current) in rule.allowed_from


def _booking_context(booking: Booking, property_title: str) -> dict[str, str]:
    return {
        "property_title": property_title,
        "check_in": booking.check_in.date().isoformat(),
        "check_out": booking.check_out.date().isoformat(),
        "total_price": str(booking.total_price),
    }


async def _lock_property(db: AsyncSession, property_id: uuid.UUID) -> Property | None:
    result = await db.execute(
        select(Property)
        .where(Property.id == property_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _lock_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking | None:
    result = await db.execute(
        select(Booking)
        .where(Booking.id == booking_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


async def create_booking(db: AsyncSession, guest: User, data: BookingCreate) -> Booking:
    """Validate and insert a PENDING booking with its total price.

    Raises, in order of evaluation:
        InvalidDatesError: check-in is not strictly before check-out.
        NotFoundError: the property does not exist.
        InvalidBookingError: the guest owns the property.
        NotAvailableError: a blocking booking overlaps the requested interval.
        MinStayError / MaxStayError: stay length is outside the property's bounds.
    """
    check_in = as_naive_utc(data.check_in)
    check_out = as_naive_utc(data.check_out)
    if check_in >= check_out:
        raise InvalidDatesError()

    prop = await _lock_property(db, data.property_id)
    if prop is None:
        raise NotFoundError("Property not found")

    if prop.owner_id == guest.id:
        raise InvalidBookingError("Cannot book your own property")

    if await has_conflict(db, prop.id, check_in, check_out):
        raise NotAvailableError()

    days = stay_length_days(check_in, check_out)
    if days < prop.min_stay_days:
        raise MinStayError(prop.min_stay_days)
    if prop.max_stay_days is not None and days > prop.max_stay_days:
        raise MaxStayError(prop.max_stay_days)

    booking = Booking(
        property_id=prop.id,
        guest_id=guest.id,
        host_id=prop.owner_id,
        check_in=check_in,
        check_out=check_out,
        guests_count=data.guests_count,
        special_requests=data.special_requests,
        total_price=compute_total_price(prop.price, prop.price_unit, days),
        status=BookingStatus.PENDING.value,
    )
    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    logger.info(
        "Booking %s created for property %s by guest %s (%d days, total %s)",
        booking.id,
        prop.id,
        guest.id,
        days,
        booking.total_price,
    )

    await notification_service.notify(
        db,
        booking.host_id,
        "booking_requested",
        data={"bookingId": str(booking.id)},
        guest_name=guest.full_name,
        **_booking_context(booking, prop.title),
    )
    return booking


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


async def transition_booking(
    db: AsyncSession,
    actor: User,
    booking_id: uuid.UUID,
    target: BookingStatus,
    reason: str | None = None,
) -> Booking:
    """Move a booking to ``target`` if the actor may and the current state allows it.

    Raises:
        NotFoundError: no such booking.
        ForbiddenError: the actor lacks the capability for this booking.
        InvalidStatusError: the current status does not permit the move.
    """
    booking = await _lock_booking(db, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")

    rule = TRANSITIONS[target]
    authorize(actor, rule.action, booking)

    previous = booking.status
    if BookingStatus(previous) not in rule.allowed_from:
        raise InvalidStatusError(rule.error_message)

    property_title = booking.property.title
    now = utcnow()
    booking.status = target.value
    if target is BookingStatus.CONFIRMED:
        booking.confirmed_at = now
    elif target is BookingStatus.CANCELLED:
        booking.cancelled_at = now
        booking.cancellation_reason = reason

    await db.flush()
    await db.refresh(booking)

    logger.info("Booking %s moved %s -> %s by user %s", booking.id, previous, target.value, actor.id)

    context = _booking_context(booking, property_title)
    context["reason_suffix"] = f" Reason: {reason}" if reason else ""
    for recipient in _recipients(booking, actor, target):
        await notification_service.notify(
            db,
            recipient,
            rule.notification,
            data={"bookingId": str(booking.id), "status": target.value},
            **context,
        )
    return booking


def _recipients(booking: Booking, actor: User, target: BookingStatus) -> list[uuid.UUID]:
    """Counterparties to notify about a transition performed by ``actor``."""
    if target is BookingStatus.CANCELLED:
        parties = [booking.guest_id, booking.host_id]
        return [party for party in parties if party != actor.id]
    return [booking.guest_id] if booking.guest_id != actor.id else []


async def confirm_booking(db: AsyncSession, actor: User, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, actor, booking_id, BookingStatus.CONFIRMED)


async def cancel_booking(db: AsyncSession, actor: User, booking_id: uuid.UUID, reason: str | None = None) -> Booking:
    return await transition_booking(db, actor, booking_id, BookingStatus.CANCELLED, reason=reason)


async def check_in_booking(db: AsyncSession, actor: User, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, actor, booking_id, BookingStatus.CHECKED_IN)


async def check_out_booking(db: AsyncSession, actor: User, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, actor, booking_id, BookingStatus.CHECKED_OUT)


async def refund_booking(db: AsyncSession, actor: User, booking_id: uuid.UUID) -> Booking:
    return await transition_booking(db, actor, booking_id, BookingStatus.REFUNDED)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def get_booking(db: AsyncSession, actor: User, booking_id: uuid.UUID) -> Booking:
    """Fetch a booking visible to the actor (guest, host, or admin)."""
    result = await db.execute(
        select(Booking).where(Booking.id == booking_id).execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFoundError("Booking not found")
    authorize(actor, Action.BOOKING_VIEW, booking)
    return booking


async def list_bookings(
    db: AsyncSession,
    *,
    guest_id: uuid.UUID | None = None,
    host_id: uuid.UUID | None = None,
    status: str | None = None,
    offset: int = 0,
    limit: int = 10,
) -> tuple[list[Booking], int]:
    """Return a page of bookings, newest first, and the total matching count."""
    filters = []
    if guest_id is not None:
        filters.append(Booking.guest_id == guest_id)
    if host_id is not None:
        filters.append(Booking.host_id == host_id)
    if status is not None:
        filters.append(Booking.status == status)

    total = (await db.execute(select(func.count()).select_from(Booking).where(*filters))).scalar_one()
    result = await db.execute(
        select(Booking).where(*filters).order_by(Booking.created_at.desc()).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total
