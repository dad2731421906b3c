"""Home-service catalog queries and the service booking lifecycle."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.auth.permissions import Action, authorize
from rentora.database import as_naive_utc, utcnow
from rentora.errors import InvalidStatusError, NotFoundError, ValidationError
from rentora.models.enums import ServiceBookingStatus
from rentora.models.service import Service, ServiceBooking, ServiceCategory, ServiceProvider
from rentora.models.user import User
from rentora.schemas.service import (
    ServiceBookingCreate,
    ServiceCategoryCreate,
    ServiceCreate,
    ServiceProviderCreate,
)
from rentora.services import notification_service

logger = logging.getLogger(__name__)

# target -> (states it may be entered from, capability, notification template)
SERVICE_TRANSITIONS: dict[ServiceBookingStatus, tuple[frozenset[ServiceBookingStatus], Action, str]] = {
    ServiceBookingStatus.CONFIRMED: (
        frozenset({ServiceBookingStatus.PENDING}),
        Action.SERVICE_BOOKING_FULFIL,
        "service_booking_confirmed",
    ),
    ServiceBookingStatus.COMPLETED: (
        frozenset({ServiceBookingStatus.CONFIRMED}),
        Action.SERVICE_BOOKING_FULFIL,
        "service_booking_completed",
    ),
    ServiceBookingStatus.CANCELLED: (
        frozenset({ServiceBookingStatus.PENDING, ServiceBookingStatus.CONFIRMED}),
        Action.SERVICE_BOOKING_CANCEL,
        "service_booking_cancelled",
    ),
}


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


async def list_categories(db: AsyncSession) -> list[ServiceCategory]:
    result = await db.execute(
        select(ServiceCategory).where(ServiceCategory.is_active.is_(True)).order_by(ServiceCategory.order)
    )
    return list(result.scalars().all())


async def list_services(db: AsyncSession, category_id: uuid.UUID | None = None) -> list[Service]:
    query = select(Service).where(Service.is_active.is_(True))
    if category_id is not None:
        query = query.where(Service.category_id == category_id)
    result = await db.execute(query.order_by(Service.name))
    return list(result.scalars().all())


async def list_providers(
    db: AsyncSession,
    service_id: uuid.UUID | None = None,
    city: str | None = None,
) -> list[ServiceProvider]:
    query = select(ServiceProvider).where(ServiceProvider.is_active.is_(True))
    if service_id is not None:
        query = query.where(ServiceProvider.service_id == service_id)
    if city:
        query = query.where(ServiceProvider.city == city)
    result = await db.execute(query.order_by(ServiceProvider.years_experience.desc()))
    return list(result.scalars().all())


async def get_service(db: AsyncSession, service_id: uuid.UUID) -> tuple[Service, list[ServiceProvider]]:
    """Return a service together with its active providers."""
    result = await db.execute(
        select(Service).where(Service.id == service_id).execution_options(populate_existing=True)
    )
    service = result.scalar_one_or_none()
    if service is None:
        raise NotFoundError("Service not found")
    return service, await list_providers(db, service_id=service.id)


async def create_category(db: AsyncSession, data: ServiceCategoryCreate) -> ServiceCategory:
    category = ServiceCategory(**data.model_dump())
    db.add(category)
    await db.flush()
    await db.refresh(category)
    return category


async def create_service(db: AsyncSession, data: ServiceCreate) -> Service:
    category = await db.get(ServiceCategory, data.category_id)
    if category is None:
        raise NotFoundError("Service category not found")

    service = Service(**data.model_dump())
    db.add(service)
    await db.flush()
    await db.refresh(service)
    return service


async def create_provider(db: AsyncSession, data: ServiceProviderCreate) -> ServiceProvider:
    if await db.get(Service, data.service_id) is None:
        raise NotFoundError("Service not found")
    if await db.get(User, data.user_id) is None:
        raise NotFoundError("User not found")

    provider = ServiceProvider(**data.model_dump())
    db.add(provider)
    await db.flush()
    await db.refresh(provider)
    return provider


# ---------------------------------------------------------------------------
# Service bookings
# ---------------------------------------------------------------------------


def _schedule_context(booking: ServiceBooking) -> dict[str, str]:
    return {
        "scheduled_date": booking.scheduled_date.date().isoformat(),
        "scheduled_time": booking.scheduled_time,
    }


async def create_service_booking(db: AsyncSession, customer: User, data: ServiceBookingCreate) -> ServiceBooking:
    """Book an active provider for a service. The booking starts PENDING."""
    result = await db.execute(
        select(ServiceProvider).where(
            ServiceProvider.id == data.provider_id,
            ServiceProvider.is_active.is_(True),
        )
    )
    provider = result.scalar_one_or_none()
    if provider is None:
        raise NotFoundError("Service provider not found")
    if provider.service_id != data.service_id:
        raise ValidationError("Provider does not offer this service")

    values = data.model_dump()
    values["scheduled_date"] = as_naive_utc(data.scheduled_date)
    booking = ServiceBooking(
        **values,
        user_id=customer.id,
        status=ServiceBookingStatus.PENDING.value,
    )
    db.add(booking)
    await db.flush()
    await db.refresh(booking)

    await notification_service.notify(
        db,
        provider.user_id,
        "service_booking_requested",
        data={"serviceBookingId": str(booking.id)},
        **_schedule_context(booking),
    )
    logger.info("Service booking %s created by user %s with provider %s", booking.id, customer.id, provider.id)
    return booking


async def transition_service_booking(
    db: AsyncSession,
    actor: User,
    booking_id: uuid.UUID,
    target: ServiceBookingStatus,
    reason: str | None = None,
) -> ServiceBooking:
    result = await db.execute(
        select(ServiceBooking)
        .where(ServiceBooking.id == booking_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if booking is None:
        raise NotFoundError("Booking not found")

    allowed_from, action, template = SERVICE_TRANSITIONS[target]
    authorize(actor, action, booking)
    if ServiceBookingStatus(booking.status) not in allowed_from:
        raise InvalidStatusError(f"Cannot move booking from {booking.status} to {target.value}")

    previous = booking.status
    booking.status = target.value
    if target is ServiceBookingStatus.CANCELLED:
        booking.cancelled_at = utcnow()
        booking.cancellation_reason = reason
    elif target is ServiceBookingStatus.COMPLETED:
        booking.completed_at = utcnow()

    provider_user_id = booking.provider.user_id
    await db.flush()
    await db.refresh(booking)

    recipient = provider_user_id if actor.id == booking.user_id else booking.user_id
    await notification_service.notify(
        db,
        recipient,
        template,
        data={"serviceBookingId": str(booking.id), "status": target.value},
        **_schedule_context(booking),
    )
    logger.info("Service booking %s moved %s -> %s by user %s", booking.id, previous, target.value, actor.id)
    return booking


async def list_user_service_bookings(
    db: AsyncSession,
    user_id: uuid.UUID,
    status: str | None,
    offset: int,
    limit: int,
) -> list[ServiceBooking]:
    query = select(ServiceBooking).where(ServiceBooking.user_id == user_id)
    if status is not None:
        query = query.where(ServiceBooking.status == status)
    result = await db.execute(query.order_by(ServiceBooking.created_at.desc()).offset(offset).limit(limit))
    return list(result.scalars().all())
