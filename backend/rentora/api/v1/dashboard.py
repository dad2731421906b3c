"""Dashboard API router: per-user guest and host statistics."""

from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_current_user, get_db
from rentora.auth.permissions import Action, authorize
from rentora.database import utcnow
from rentora.models.booking import Booking
from rentora.models.enums import BookingStatus, PropertyStatus
from rentora.models.notification import Notification
from rentora.models.property import Property
from rentora.models.review import Review
from rentora.models.user import User
from rentora.schemas.booking import BookingResponse
from rentora.schemas.common import ApiResponse, ok
from rentora.schemas.dashboard import HostDashboard, HostStats, UserDashboard, UserStats

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])

RECENT_LIMIT = 5


async def _count(db: AsyncSession, model: type, *filters) -> int:
    return (await db.execute(select(func.count()).select_from(model).where(*filters))).scalar_one()


@router.get("/user", response_model=ApiResponse[UserDashboard])
async def user_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Counts for the current user plus their next few upcoming stays."""
    stats = UserStats(
        property_count=await _count(db, Property, Property.owner_id == current_user.id),
        booking_count=await _count(db, Booking, Booking.guest_id == current_user.id),
        review_count=await _count(db, Review, Review.reviewer_id == current_user.id),
        unread_notifications=await _count(
            db, Notification, Notification.user_id == current_user.id, Notification.is_read.is_(False)
        ),
    )
    result = await db.execute(
        select(Booking)
        .where(
            Booking.guest_id == current_user.id,
            Booking.check_in >= utcnow(),
            Booking.status.in_([BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value]),
        )
        .order_by(Booking.check_in.asc())
        .limit(RECENT_LIMIT)
    )
    upcoming = [BookingResponse.model_validate(b) for b in result.scalars().all()]
    return ok(UserDashboard(stats=stats, upcoming_bookings=upcoming))


@router.get("/host", response_model=ApiResponse[HostDashboard])
async def host_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Listing and booking counts, earnings from completed stays, and recent requests."""
    authorize(current_user, Action.BOOKING_LIST_HOSTED)
    now = utcnow()

    earnings = (
        await db.execute(
            select(func.coalesce(func.sum(Booking.total_price), 0)).where(
                Booking.host_id == current_user.id,
                Booking.status == BookingStatus.CHECKED_OUT.value,
            )
        )
    ).scalar_one()

    stats = HostStats(
        total_properties=await _count(db, Property, Property.owner_id == current_user.id),
        active_properties=await _count(
            db,
            Property,
            Property.owner_id == current_user.id,
            Property.status == PropertyStatus.AVAILABLE.value,
        ),
        total_bookings=await _count(db, Booking, Booking.host_id == current_user.id),
        pending_bookings=await _count(
            db, Booking, Booking.host_id == current_user.id, Booking.status == BookingStatus.PENDING.value
        ),
        total_earnings=Decimal(str(earnings)),
        current_stays=await _count(
            db,
            Booking,
            Booking.host_id == current_user.id,
            Booking.status.in_([BookingStatus.CONFIRMED.value, BookingStatus.CHECKED_IN.value]),
            Booking.check_in <= now,
            Booking.check_out > now,
        ),
    )
    result = await db.execute(
        select(Booking)
        .where(Booking.host_id == current_user.id)
        .order_by(Booking.created_at.desc())
        .limit(RECENT_LIMIT)
    )
    recent = [BookingResponse.model_validate(b) for b in result.scalars().all()]
    return ok(HostDashboard(stats=stats, recent_bookings=recent))
