"""Review creation, editing, and deletion with rating recomputation."""

import logging
import uuid

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.auth.permissions import Action, authorize, can
from rentora.errors import (
    AlreadyReviewedError,
    NotCompletedError,
    NotEligibleError,
    NotFoundError,
    ValidationError,
)
from rentora.models.booking import Booking
from rentora.models.enums import BookingStatus, ServiceBookingStatus
from rentora.models.property import Property
from rentora.models.review import Review
from rentora.models.service import ServiceBooking
from rentora.models.user import User
from rentora.schemas.review import ReviewCreate, ReviewUpdate
from rentora.services import notification_service
from rentora.services.rating_service import refresh_property_rating

logger = logging.getLogger(__name__)


async def _has_completed_stay(db: AsyncSession, guest_id: uuid.UUID, property_id: uuid.UUID) -> bool:
    result = await db.execute(
        select(Booking.id)
        .where(
            Booking.property_id == property_id,
            Booking.guest_id == guest_id,
            Booking.status == BookingStatus.CHECKED_OUT.value,
        )
        .limit(1)
    )
    return result.scalar_one_or_none() is not None


async def _existing_review(db: AsyncSession, reviewer_id: uuid.UUID, **target: uuid.UUID) -> Review | None:
    query = select(Review).where(Review.reviewer_id == reviewer_id)
    for column, value in target.items():
        query = query.where(getattr(Review, column) == value)
    return (await db.execute(query.limit(1))).scalar_one_or_none()


async def _insert(db: AsyncSession, review: Review, message: str | None = None) -> None:
    """Add ``review``; a concurrent duplicate caught by the unique constraint is ALREADY_REVIEWED."""
    db.add(review)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise AlreadyReviewedError(message) from exc


async def create_review(db: AsyncSession, reviewer: User, data: ReviewCreate) -> Review:
    """Create a review for a property or a completed service booking.

    Property reviews require a checked-out stay (admins are exempt) and
    trigger a rating recomputation for the property.
    """
    if (data.property_id is None) == (data.service_booking_id is None):
        raise ValidationError("Must specify exactly one of property or service booking")

    if data.property_id is not None:
        review = await _create_property_review(db, reviewer, data)
    else:
        review = await _create_service_review(db, reviewer, data)

    await notification_service.notify(
        db,
        review.reviewee_id,
        "review_received",
        data={"reviewId": str(review.id)},
        rating=review.rating,
    )
    logger.info("Review %s created by user %s (rating %d)", review.id, reviewer.id, review.rating)
    return review


async def _create_property_review(db: AsyncSession, reviewer: User, data: ReviewCreate) -> Review:
    property_id = data.property_id
    if not can(reviewer, Action.REVIEW_BYPASS_ELIGIBILITY) and not await _has_completed_stay(
        db, reviewer.id, property_id
    ):
        raise NotEligibleError()

    if await _existing_review(db, reviewer.id, property_id=property_id) is not None:
        raise AlreadyReviewedError()

    owner_id = (await db.execute(select(Property.owner_id).where(Property.id == property_id))).scalar_one_or_none()
    if owner_id is None:
        raise NotFoundError("Property not found")

    review = Review(
        reviewer_id=reviewer.id,
        reviewee_id=owner_id,
        property_id=property_id,
        rating=data.rating,
        comment=data.comment,
    )
    await _insert(db, review)
    await refresh_property_rating(db, property_id)
    await db.refresh(review)
    return review


async def _create_service_review(db: AsyncSession, reviewer: User, data: ReviewCreate) -> Review:
    result = await db.execute(
        select(ServiceBooking)
        .where(ServiceBooking.id == data.service_booking_id)
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()
    if booking is None or booking.user_id != reviewer.id:
        raise NotFoundError("Booking not found")

    if booking.status != ServiceBookingStatus.COMPLETED.value:
        raise NotCompletedError()

    if await _existing_review(db, reviewer.id, service_booking_id=booking.id) is not None:
        raise AlreadyReviewedError("You have already reviewed this service booking")

    review = Review(
        reviewer_id=reviewer.id,
        reviewee_id=booking.provider.user_id,
        service_booking_id=booking.id,
        rating=data.rating,
        comment=data.comment,
    )
    await _insert(db, review, "You have already reviewed this service booking")
    await db.refresh(review)
    return review


async def _get_review(db: AsyncSession, review_id: uuid.UUID) -> Review:
    review = (await db.execute(select(Review).where(Review.id == review_id))).scalar_one_or_none()
    if review is None:
        raise NotFoundError("Review not found")
    return review


async def update_review(db: AsyncSession, actor: User, review_id: uuid.UUID, data: ReviewUpdate) -> Review:
    review = await _get_review(db, review_id)
    authorize(actor, Action.REVIEW_UPDATE, review)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(review, field, value)
    await db.flush()

    if review.property_id is not None:
        await refresh_property_rating(db, review.property_id)
    await db.refresh(review)
    return review


async def delete_review(db: AsyncSession, actor: User, review_id: uuid.UUID) -> None:
    review = await _get_review(db, review_id)
    authorize(actor, Action.REVIEW_DELETE, review)

    property_id = review.property_id
    await db.delete(review)
    await db.flush()

    if property_id is not None:
        await refresh_property_rating(db, property_id)
    logger.info("Review %s deleted by user %s", review_id, actor.id)


async def list_property_reviews(
    db: AsyncSession,
    property_id: uuid.UUID,
    offset: int,
    limit: int,
) -> tuple[list[Review], float, int]:
    """Return a page of a property's reviews with the average rating and total count."""
    result = await db.execute(
        select(Review)
        .where(Review.property_id == property_id)
        .order_by(Review.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    average, total = (
        await db.execute(
            select(func.avg(Review.rating), func.count(Review.id)).where(Review.property_id == property_id)
        )
    ).one()
    return list(result.scalars().all()), float(average or 0), total


async def list_user_reviews(db: AsyncSession, reviewer_id: uuid.UUID) -> list[Review]:
    result = await db.execute(
        select(Review).where(Review.reviewer_id == reviewer_id).order_by(Review.created_at.desc())
    )
    return list(result.scalars().all())
