"""Notification service: render templated notifications and manage read state."""

import logging
import uuid
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.database import utcnow
from rentora.errors import NotFoundError
from rentora.models.notification import Notification

logger = logging.getLogger(__name__)

TEMPLATES: dict[str, dict[str, str]] = {
    "booking_requested": {
        "title": "New booking request",
        "message": "{guest_name} requested {property_title} from {check_in} to {check_out}.",
    },
    "booking_confirmed": {
        "title": "Booking confirmed",
        "message": "Your stay at {property_title} from {check_in} to {check_out} is confirmed.",
    },
    "booking_cancelled": {
        "title": "Booking cancelled",
        "message": "The booking for {property_title} ({check_in} to {check_out}) was cancelled.{reason_suffix}",
    },
    "booking_checked_in": {
        "title": "Checked in",
        "message": "Welcome to {property_title}! Enjoy your stay.",
    },
    "booking_checked_out": {
        "title": "Checked out",
        "message": "Thanks for staying at {property_title}. You can now leave a review.",
    },
    "booking_refunded": {
        "title": "Booking refunded",
        "message": "Your booking for {property_title} has been refunded ({total_price}).",
    },
    "review_received": {
        "title": "New review",
        "message": "You received a {rating}-star review.",
    },
    "service_booking_requested": {
        "title": "New service request",
        "message": "A customer booked your service for {scheduled_date} at {scheduled_time}.",
    },
    "service_booking_confirmed": {
        "title": "Service booking confirmed",
        "message": "Your service appointment on {scheduled_date} at {scheduled_time} is confirmed.",
    },
    "service_booking_completed": {
        "title": "Service completed",
        "message": "Your service appointment on {scheduled_date} is complete. You can now leave a review.",
    },
    "service_booking_cancelled": {
        "title": "Service booking cancelled",
        "message": "The service appointment on {scheduled_date} at {scheduled_time} was cancelled.",
    },
    "property_verified": {
        "title": "Property approved",
        "message": "{property_title} has been verified and is now listed.",
    },
    "property_rejected": {
        "title": "Property rejected",
        "message": "{property_title} did not pass verification.",
    },
}


def render(template: str, **context: Any) -> tuple[str, str]:
    """Return ``(title, message)`` for a template filled with ``context``."""
    tmpl = TEMPLATES[template]
    return tmpl["title"].format(**context), tmpl["message"].format(**context)


async def notify(
    db: AsyncSession,
    user_id: uuid.UUID,
    template: str,
    data: dict[str, Any] | None = None,
    **context: Any,
) -> Notification:
    """Create a notification for ``user_id`` in the current transaction."""
    title, message = render(template, **context)
    notification = Notification(
        user_id=user_id,
        type=template,
        title=title,
        message=message,
        data=data,
    )
    db.add(notification)
    await db.flush()
    logger.info("Notification %s queued for user %s", template, user_id)
    return notification


async def list_notifications(
    db: AsyncSession,
    user_id: uuid.UUID,
    is_read: bool | None,
    offset: int,
    limit: int,
) -> tuple[list[Notification], int, int]:
    """Return ``(page, total, unread_count)`` for a user's notifications."""
    filters = [Notification.user_id == user_id]
    if is_read is not None:
        filters.append(Notification.is_read == is_read)

    result = await db.execute(
        select(Notification).where(*filters).order_by(Notification.created_at.desc()).offset(offset).limit(limit)
    )
    items = list(result.scalars().all())

    total = (
        await db.execute(select(func.count()).select_from(Notification).where(Notification.user_id == user_id))
    ).scalar_one()
    unread = (
        await db.execute(
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        )
    ).scalar_one()
    return items, total, unread


async def mark_read(db: AsyncSession, user_id: uuid.UUID, notification_id: uuid.UUID) -> Notification:
    result = await db.execute(
        select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification not found")

    if not notification.is_read:
        notification.is_read = True
        notification.read_at = utcnow()
        await db.flush()
    return notification


async def mark_all_read(db: AsyncSession, user_id: uuid.UUID) -> int:
    """Mark every unread notification of the user as read. Returns the count updated."""
    result = await db.execute(
        update(Notification)
        .where(Notification.user_id == user_id, Notification.is_read.is_(False))
        .values(is_read=True, read_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    await db.flush()
    return result.rowcount or 0


async def delete_notification(db: AsyncSession, user_id: uuid.UUID, notification_id: uuid.UUID) -> None:
    result = await db.execute(
        select(Notification).where(Notification.id == notification_id, Notification.user_id == user_id)
    )
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification not found")
    await db.delete(notification)
    await db.flush()
