"""Admin back-office API router.

Every route depends on ``require(Action.ADMIN_ACCESS)``; the capability check
lives in :mod:`rentora.auth.permissions`, not here.
"""

import logging
import uuid
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_db, page_params, require
from rentora.auth.permissions import Action
from rentora.database import utcnow
from rentora.errors import InvalidStatusError, NotFoundError, ValidationError
from rentora.models.booking import Booking
from rentora.models.enums import BookingStatus, PropertyStatus
from rentora.models.property import Property
from rentora.models.user import User
from rentora.schemas.auth import UserResponse
from rentora.schemas.booking import BookingResponse
from rentora.schemas.common import ApiResponse, PageParams, PaginationMeta, ok
from rentora.schemas.dashboard import ActivityItem, AdminStats, AdminUserUpdate
from rentora.schemas.property import PropertyResponse, PropertyVerification
from rentora.services import booking_service, notification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

_admin = require(Action.ADMIN_ACCESS)
_fresh = {"populate_existing": True}


async def _count(db: AsyncSession, model: type, *filters) -> int:
    return (await db.execute(select(func.count()).select_from(model).where(*filters))).scalar_one()


def _month_start(now: datetime) -> datetime:
    return now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------


@router.get("/stats", response_model=ApiResponse[AdminStats])
async def stats(db: AsyncSession = Depends(get_db), _user: User = Depends(_admin)) -> dict:
    """Platform totals. Revenue is the sum of completed (checked-out) stays."""
    revenue = (
        await db.execute(
            select(func.coalesce(func.sum(Booking.total_price), 0)).where(
                Booking.status == BookingStatus.CHECKED_OUT.value
            )
        )
    ).scalar_one()

    return ok(
        AdminStats(
            total_users=await _count(db, User),
            new_users_this_month=await _count(db, User, User.created_at >= _month_start(utcnow())),
            total_properties=await _count(db, Property),
            active_properties=await _count(db, Property, Property.status == PropertyStatus.AVAILABLE.value),
            pending_verifications=await _count(
                db, Property, Property.status == PropertyStatus.PENDING_VERIFICATION.value
            ),
            total_bookings=await _count(db, Booking),
            pending_bookings=await _count(db, Booking, Booking.status == BookingStatus.PENDING.value),
            total_revenue=Decimal(str(revenue)),
        )
    )


@router.get("/activity", response_model=ApiResponse[list[ActivityItem]])
async def activity(
    limit: int = Query(10, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_admin),
) -> dict:
    """Most recent bookings, sign-ups and listings merged into one timeline."""
    bookings = await db.scalars(
        select(Booking).order_by(Booking.created_at.desc()).limit(limit),
        execution_options=_fresh,
    )
    users = await db.scalars(select(User).order_by(User.created_at.desc()).limit(limit))
    properties = await db.scalars(
        select(Property).order_by(Property.created_at.desc()).limit(limit),
        execution_options=_fresh,
    )

    items = [
        ActivityItem(
            id=b.id,
            type="booking",
            description=f"New booking for {b.property.title}",
            user=b.guest.full_name,
            timestamp=b.created_at,
        )
        for b in bookings
    ]
    items += [
        ActivityItem(
            id=u.id,
            type="user",
            description="New user registered",
            user=u.full_name,
            timestamp=u.created_at,
        )
        for u in users
    ]
    items += [
        ActivityItem(
            id=p.id,
            type="listing",
            description=f"New property listed: {p.title}",
            user=p.owner.full_name,
            timestamp=p.created_at,
        )
        for p in properties
    ]
    items.sort(key=lambda item: item.timestamp, reverse=True)
    return ok(items[:limit])


# ---------------------------------------------------------------------------
# Property verification
# ---------------------------------------------------------------------------


@router.get("/properties/pending", response_model=ApiResponse[list[PropertyResponse]])
async def pending_properties(
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_admin),
) -> dict:
    pending = Property.status == PropertyStatus.PENDING_VERIFICATION.value
    total = await _count(db, Property, pending)
    result = await db.execute(
        select(Property).where(pending).order_by(Property.created_at.desc()).offset(paging.offset).limit(paging.limit)
    )
    return ok(
        [PropertyResponse.model_validate(p) for p in result.scalars().all()],
        PaginationMeta.build(paging.page, paging.limit, total),
    )


@router.patch("/properties/{property_id}/verify", response_model=ApiResponse[PropertyResponse])
async def verify_property(
    property_id: uuid.UUID,
    body: PropertyVerification,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(_admin),
) -> dict:
    """Approve (AVAILABLE) or reject (REJECTED) a property awaiting verification."""
    prop = (await db.execute(select(Property).where(Property.id == property_id))).scalar_one_or_none()
    if prop is None:
        raise NotFoundError("Property not found")
    if prop.status != PropertyStatus.PENDING_VERIFICATION.value:
        raise InvalidStatusError("Property is not awaiting verification")

    prop.status = (PropertyStatus.AVAILABLE if body.approved else PropertyStatus.REJECTED).value
    title = prop.title
    await db.flush()
    await db.refresh(prop)

    await notification_service.notify(
        db,
        prop.owner_id,
        "property_verified" if body.approved else "property_rejected",
        data={"propertyId": str(prop.id)},
        property_title=title,
    )
    logger.info("Property %s %s by admin %s", prop.id, prop.status, admin.id)
    return ok(PropertyResponse.model_validate(prop))


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


@router.get("/users", response_model=ApiResponse[list[UserResponse]])
async def list_users(
    role: str | None = Query(None),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_admin),
) -> dict:
    filters = [User.role == role] if role else []
    total = await _count(db, User, *filters)
    result = await db.execute(
        select(User).where(*filters).order_by(User.created_at.desc()).offset(paging.offset).limit(paging.limit)
    )
    return ok(
        [UserResponse.model_validate(u) for u in result.scalars().all()],
        PaginationMeta.build(paging.page, paging.limit, total),
    )


@router.patch("/users/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    user_id: uuid.UUID,
    body: AdminUserUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(_admin),
) -> dict:
    """Change another account's role or active flag."""
    if user_id == admin.id:
        raise ValidationError("Admins cannot change their own role or status")

    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")

    if body.role is not None:
        user.role = body.role.value
    if body.is_active is not None:
        user.is_active = body.is_active
    await db.flush()
    await db.refresh(user)

    logger.info("User %s updated by admin %s: role=%s active=%s", user.id, admin.id, user.role, user.is_active)
    return ok(UserResponse.model_validate(user))


# ---------------------------------------------------------------------------
# Bookings
# ---------------------------------------------------------------------------


@router.get("/bookings", response_model=ApiResponse[list[BookingResponse]])
async def list_all_bookings(
    status_filter: BookingStatus | None = Query(None, alias="status"),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(_admin),
) -> dict:
    items, total = await booking_service.list_bookings(
        db,
        status=status_filter.value if status_filter else None,
        offset=paging.offset,
        limit=paging.limit,
    )
    return ok(
        [BookingResponse.model_validate(b) for b in items],
        PaginationMeta.build(paging.page, paging.limit, total),
    )


@router.patch("/bookings/{booking_id}/refund", response_model=ApiResponse[BookingResponse])
async def refund_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(_admin),
) -> dict:
    booking = await booking_service.refund_booking(db, admin, booking_id)
    return ok(BookingResponse.model_validate(booking))
