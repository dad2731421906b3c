"""Property booking API router.

Guests create bookings; hosts confirm, check guests in and out; either
party may cancel. Every status change is delegated to
:mod:`rentora.services.booking_service`, which owns the transition table.
"""

import uuid

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_current_user, get_db, page_params
from rentora.auth.permissions import Action, authorize
from rentora.models.enums import BookingStatus
from rentora.models.user import User
from rentora.schemas.booking import BookingCancel, BookingCreate, BookingDetailResponse, BookingResponse
from rentora.schemas.common import ApiResponse, PageParams, PaginationMeta, ok
from rentora.services import booking_service

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


# ---------------------------------------------------------------------------
# Creation and queries
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ApiResponse[BookingResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Request a booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Create a PENDING booking after date, ownership, availability and stay-length checks."""
    booking = await booking_service.create_booking(db, current_user, body)
    return ok(BookingResponse.model_validate(booking))


@router.get("/my", response_model=ApiResponse[list[BookingResponse]], summary="Bookings I made as a guest")
async def my_bookings(
    status_filter: BookingStatus | None = Query(None, alias="status"),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    items, total = await booking_service.list_bookings(
        db,
        guest_id=current_user.id,
        status=status_filter.value if status_filter else None,
        offset=paging.offset,
        limit=paging.limit,
    )
    return ok(
        [BookingResponse.model_validate(b) for b in items],
        PaginationMeta.build(paging.page, paging.limit, total),
    )


@router.get("/host", response_model=ApiResponse[list[BookingResponse]], summary="Bookings on my properties")
async def host_bookings(
    status_filter: BookingStatus | None = Query(None, alias="status"),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    authorize(current_user, Action.BOOKING_LIST_HOSTED)
    items, total = await booking_service.list_bookings(
        db,
        host_id=current_user.id,
        status=status_filter.value if status_filter else None,
        offset=paging.offset,
        limit=paging.limit,
    )
    return ok(
        [BookingResponse.model_validate(b) for b in items],
        PaginationMeta.build(paging.page, paging.limit, total),
    )


@router.get("/{booking_id}", response_model=ApiResponse[BookingDetailResponse], summary="Get a booking")
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Return a booking with its property and both parties. Guest, host or admin only."""
    booking = await booking_service.get_booking(db, current_user, booking_id)
    return ok(BookingDetailResponse.model_validate(booking))


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


@router.patch("/{booking_id}/confirm", response_model=ApiResponse[BookingResponse], summary="Confirm a booking")
async def confirm_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    booking = await booking_service.confirm_booking(db, current_user, booking_id)
    return ok(BookingResponse.model_validate(booking))


@router.patch("/{booking_id}/cancel", response_model=ApiResponse[BookingResponse], summary="Cancel a booking")
async def cancel_booking(
    booking_id: uuid.UUID,
    body: BookingCancel | None = Body(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    reason = body.reason if body is not None else None
    booking = await booking_service.cancel_booking(db, current_user, booking_id, reason=reason)
    return ok(BookingResponse.model_validate(booking))


@router.patch("/{booking_id}/check-in", response_model=ApiResponse[BookingResponse], summary="Check a guest in")
async def check_in_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    booking = await booking_service.check_in_booking(db, current_user, booking_id)
    return ok(BookingResponse.model_validate(booking))


@router.patch("/{booking_id}/check-out", response_model=ApiResponse[BookingResponse], summary="Check a guest out")
async def check_out_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    booking = await booking_service.check_out_booking(db, current_user, booking_id)
    return ok(BookingResponse.model_validate(booking))
