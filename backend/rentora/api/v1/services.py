"""Home-service API router: public catalog, customer bookings, provider fulfilment."""

import uuid

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_current_user, get_db, page_params, require
from rentora.auth.permissions import Action
from rentora.models.enums import ServiceBookingStatus
from rentora.models.user import User
from rentora.schemas.common import ApiResponse, PageParams, ok
from rentora.schemas.service import (
    ServiceBookingCancel,
    ServiceBookingCreate,
    ServiceBookingResponse,
    ServiceCategoryCreate,
    ServiceCategoryResponse,
    ServiceCreate,
    ServiceDetailResponse,
    ServiceProviderCreate,
    ServiceProviderResponse,
    ServiceResponse,
)
from rentora.services import service_catalog

router = APIRouter(prefix="/api/v1/services", tags=["services"])


# ---------------------------------------------------------------------------
# Public catalog
# ---------------------------------------------------------------------------


@router.get("/categories", response_model=ApiResponse[list[ServiceCategoryResponse]])
async def list_categories(db: AsyncSession = Depends(get_db)) -> dict:
    categories = await service_catalog.list_categories(db)
    return ok([ServiceCategoryResponse.model_validate(c) for c in categories])


@router.get("", response_model=ApiResponse[list[ServiceResponse]])
async def list_services(
    category_id: uuid.UUID | None = Query(None, alias="category"),
    db: AsyncSession = Depends(get_db),
) -> dict:
    services = await service_catalog.list_services(db, category_id)
    return ok([ServiceResponse.model_validate(s) for s in services])


@router.get("/providers", response_model=ApiResponse[list[ServiceProviderResponse]])
async def list_providers(
    service_id: uuid.UUID | None = Query(None, alias="serviceId"),
    city: str | None = Query(None),
    db: AsyncSession = Depends(get_db),
) -> dict:
    providers = await service_catalog.list_providers(db, service_id, city)
    return ok([ServiceProviderResponse.model_validate(p) for p in providers])


# ---------------------------------------------------------------------------
# Customer bookings
# ---------------------------------------------------------------------------


@router.post(
    "/bookings",
    response_model=ApiResponse[ServiceBookingResponse],
    status_code=status.HTTP_201_CREATED,
)
async def book_service(
    body: ServiceBookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    booking = await service_catalog.create_service_booking(db, current_user, body)
    return ok(ServiceBookingResponse.model_validate(booking))


@router.get("/bookings/my", response_model=ApiResponse[list[ServiceBookingResponse]])
async def my_service_bookings(
    status_filter: ServiceBookingStatus | None = Query(None, alias="status"),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    bookings = await service_catalog.list_user_service_bookings(
        db,
        current_user.id,
        status_filter.value if status_filter else None,
        paging.offset,
        paging.limit,
    )
    return ok([ServiceBookingResponse.model_validate(b) for b in bookings])


@router.patch("/bookings/{booking_id}/cancel", response_model=ApiResponse[ServiceBookingResponse])
async def cancel_service_booking(
    booking_id: uuid.UUID,
    body: ServiceBookingCancel | None = Body(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    booking = await service_catalog.transition_service_booking(
        db,
        current_user,
        booking_id,
        ServiceBookingStatus.CANCELLED,
        reason=body.reason if body is not None else None,
    )
    return ok(ServiceBookingResponse.model_validate(booking))


@router.patch("/bookings/{booking_id}/confirm", response_model=ApiResponse[ServiceBookingResponse])
async def confirm_service_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    booking = await service_catalog.transition_service_booking(
        db, current_user, booking_id, ServiceBookingStatus.CONFIRMED
    )
    return ok(ServiceBookingResponse.model_validate(booking))


@router.patch("/bookings/{booking_id}/complete", response_model=ApiResponse[ServiceBookingResponse])
async def complete_service_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    booking = await service_catalog.transition_service_booking(
        db, current_user, booking_id, ServiceBookingStatus.COMPLETED
    )
    return ok(ServiceBookingResponse.model_validate(booking))


# ---------------------------------------------------------------------------
# Admin catalog management
# ---------------------------------------------------------------------------


@router.post(
    "/categories",
    response_model=ApiResponse[ServiceCategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    body: ServiceCategoryCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require(Action.SERVICE_MANAGE)),
) -> dict:
    category = await service_catalog.create_category(db, body)
    return ok(ServiceCategoryResponse.model_validate(category))


@router.post("", response_model=ApiResponse[ServiceResponse], status_code=status.HTTP_201_CREATED)
async def create_service(
    body: ServiceCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require(Action.SERVICE_MANAGE)),
) -> dict:
    service = await service_catalog.create_service(db, body)
    return ok(ServiceResponse.model_validate(service))


@router.post(
    "/providers",
    response_model=ApiResponse[ServiceProviderResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_provider(
    body: ServiceProviderCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require(Action.SERVICE_MANAGE)),
) -> dict:
    provider = await service_catalog.create_provider(db, body)
    return ok(ServiceProviderResponse.model_validate(provider))


# Declared last so the static paths above take precedence.
@router.get("/{service_id}", response_model=ApiResponse[ServiceDetailResponse])
async def get_service(service_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> dict:
    """Return a service with its category and active providers."""
    service, providers = await service_catalog.get_service(db, service_id)
    detail = ServiceDetailResponse.model_validate(service)
    detail.providers = [ServiceProviderResponse.model_validate(p) for p in providers]
    return ok(detail)
