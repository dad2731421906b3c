"""Property listing API routes: public browsing, host-managed CRUD."""

import logging
import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_current_user, get_db, page_params
from rentora.auth.permissions import Action, authorize, can
from rentora.database import as_naive_utc
from rentora.errors import InvalidStatusError, NotFoundError, ValidationError
from rentora.models.enums import PropertyStatus, PropertyType
from rentora.models.property import Property
from rentora.models.user import User
from rentora.schemas.common import ApiResponse, MessageData, PageParams, PaginationMeta, ok
from rentora.schemas.property import (
    CityCount,
    PropertyCreate,
    PropertyDetailResponse,
    PropertyResponse,
    PropertyUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/properties", tags=["properties"])

_SORTS = {
    "newest": Property.created_at.desc(),
    "price_asc": Property.price.asc(),
    "price_desc": Property.price.desc(),
}

# Owners may toggle a verified listing between these; verification itself is admin-only.
_OWNER_SETTABLE_FROM = {PropertyStatus.AVAILABLE.value, PropertyStatus.UNAVAILABLE.value}

FEATURED_LIMIT = 6


async def _get_property(db: AsyncSession, property_id: uuid.UUID) -> Property:
    result = await db.execute(
        select(Property).where(Property.id == property_id).execution_options(populate_existing=True)
    )
    prop = result.scalar_one_or_none()
    if prop is None:
        raise NotFoundError("Property not found")
    return prop


# ---------------------------------------------------------------------------
# Public browsing
# ---------------------------------------------------------------------------


@router.get("", response_model=ApiResponse[list[PropertyResponse]], summary="List available properties")
async def list_properties(
    property_type: PropertyType | None = Query(None, alias="type"),
    city: str | None = Query(None),
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
    bedrooms: int | None = Query(None, ge=0),
    furnished: bool | None = Query(None),
    sort: str = Query("newest", pattern="^(newest|price_asc|price_desc)$"),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return a filtered, paginated page of AVAILABLE properties."""
    filters = [Property.status == PropertyStatus.AVAILABLE.value]
    if property_type is not None:
        filters.append(Property.type == property_type.value)
    if city:
        filters.append(Property.city.ilike(f"%{city}%"))
    if min_price is not None:
        filters.append(Property.price >= min_price)
    if max_price is not None:
        filters.append(Property.price <= max_price)
    if bedrooms is not None:
        filters.append(Property.bedrooms == bedrooms)
    if furnished is not None:
        filters.append(Property.furnished.is_(furnished))

    total = (await db.execute(select(func.count()).select_from(Property).where(*filters))).scalar_one()
    result = await db.execute(
        select(Property).where(*filters).order_by(_SORTS[sort]).offset(paging.offset).limit(paging.limit)
    )
    items = [PropertyResponse.model_validate(p) for p in result.scalars().all()]
    return ok(items, PaginationMeta.build(paging.page, paging.limit, total))


@router.get("/featured/list", response_model=ApiResponse[list[PropertyResponse]], summary="Featured properties")
async def featured_properties(db: AsyncSession = Depends(get_db)) -> dict:
    result = await db.execute(
        select(Property)
        .where(Property.is_featured.is_(True), Property.status == PropertyStatus.AVAILABLE.value)
        .order_by(Property.created_at.desc())
        .limit(FEATURED_LIMIT)
    )
    return ok([PropertyResponse.model_validate(p) for p in result.scalars().all()])


@router.get("/meta/types", response_model=ApiResponse[list[str]], summary="Property types")
async def property_types() -> dict:
    return ok([t.value for t in PropertyType])


@router.get("/meta/cities", response_model=ApiResponse[list[CityCount]], summary="Cities with listings")
async def property_cities(db: AsyncSession = Depends(get_db)) -> dict:
    """Return each city that has AVAILABLE properties with its listing count."""
    result = await db.execute(
        select(Property.city, func.count(Property.id))
        .where(Property.status == PropertyStatus.AVAILABLE.value)
        .group_by(Property.city)
        .order_by(Property.city)
    )
    return ok([CityCount(name=city, count=count) for city, count in result.all()])


@router.get("/{property_id}", response_model=ApiResponse[PropertyDetailResponse], summary="Get a property")
async def get_property(property_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> dict:
    """Return a property with its owner card and count the view."""
    prop = await _get_property(db, property_id)
    prop.view_count += 1
    response = PropertyDetailResponse.model_validate(prop)
    await db.flush()
    return ok(response)


# ---------------------------------------------------------------------------
# Host management
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=ApiResponse[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a new property",
)
async def create_property(
    body: PropertyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Create a property owned by the current host. It awaits admin verification."""
    authorize(current_user, Action.PROPERTY_CREATE)

    values = body.model_dump()
    for field in ("available_from", "available_to"):
        if values[field] is not None:
            values[field] = as_naive_utc(values[field])

    prop = Property(
        owner_id=current_user.id,
        status=PropertyStatus.PENDING_VERIFICATION.value,
        **values,
    )
    db.add(prop)
    await db.flush()
    await db.refresh(prop)

    logger.info("Property %s created by host %s", prop.id, current_user.id)
    return ok(PropertyResponse.model_validate(prop))


@router.put("/{property_id}", response_model=ApiResponse[PropertyResponse], summary="Update a property")
async def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Partially update a property. Only explicitly set fields are changed."""
    prop = await _get_property(db, property_id)
    authorize(current_user, Action.PROPERTY_UPDATE, prop)

    update_data = body.model_dump(exclude_unset=True)
    if (
        "status" in update_data
        and prop.status not in _OWNER_SETTABLE_FROM
        and not can(current_user, Action.ADMIN_ACCESS)
    ):
        raise InvalidStatusError("Property must be verified before its availability can be changed")

    min_stay = update_data.get("min_stay_days", prop.min_stay_days)
    max_stay = update_data.get("max_stay_days", prop.max_stay_days)
    if max_stay is not None and max_stay < min_stay:
        raise ValidationError("Maximum stay cannot be shorter than minimum stay")

    for field, value in update_data.items():
        if field in ("available_from", "available_to") and value is not None:
            value = as_naive_utc(value)
        setattr(prop, field, value)

    await db.flush()
    await db.refresh(prop)
    return ok(PropertyResponse.model_validate(prop))


@router.delete("/{property_id}", response_model=ApiResponse[MessageData], summary="Delete a property")
async def delete_property(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    prop = await _get_property(db, property_id)
    authorize(current_user, Action.PROPERTY_DELETE, prop)

    await db.delete(prop)
    await db.flush()

    logger.info("Property %s deleted by user %s", property_id, current_user.id)
    return ok(MessageData(message="Property deleted"))
