"""Marketplace API router: second-hand listings browsed publicly and managed by their sellers."""

import uuid
from decimal import Decimal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_current_user, get_db, page_params, require
from rentora.auth.permissions import Action
from rentora.models.enums import ItemCondition, ListingStatus
from rentora.models.user import User
from rentora.schemas.common import ApiResponse, MessageData, PageParams, PaginationMeta, ok
from rentora.schemas.marketplace import (
    ListingCreate,
    ListingDetailResponse,
    ListingResponse,
    ListingUpdate,
    MarketplaceCategoryCreate,
    MarketplaceCategoryResponse,
)
from rentora.schemas.property import CityCount
from rentora.services import marketplace_service

router = APIRouter(prefix="/api/v1/marketplace", tags=["marketplace"])


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


@router.get("/categories", response_model=ApiResponse[list[MarketplaceCategoryResponse]])
async def list_categories(db: AsyncSession = Depends(get_db)) -> dict:
    categories = await marketplace_service.list_categories(db)
    return ok([MarketplaceCategoryResponse.model_validate(c) for c in categories])


@router.post(
    "/categories",
    response_model=ApiResponse[MarketplaceCategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    body: MarketplaceCategoryCreate,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require(Action.MARKETPLACE_MANAGE)),
) -> dict:
    category = await marketplace_service.create_category(db, body)
    return ok(MarketplaceCategoryResponse.model_validate(category))


# ---------------------------------------------------------------------------
# Browsing
# ---------------------------------------------------------------------------


@router.get("", response_model=ApiResponse[list[ListingResponse]])
async def list_listings(
    category_id: uuid.UUID | None = Query(None, alias="category"),
    city: str | None = Query(None),
    condition: ItemCondition | None = Query(None),
    min_price: Decimal | None = Query(None, alias="minPrice", ge=0),
    max_price: Decimal | None = Query(None, alias="maxPrice", ge=0),
    sort: str = Query("newest", pattern="^(newest|price_asc|price_desc)$"),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return a filtered, paginated page of ACTIVE listings."""
    items, total = await marketplace_service.list_listings(
        db,
        category_id=category_id,
        city=city,
        condition=condition.value if condition else None,
        min_price=min_price,
        max_price=max_price,
        sort=sort,
        offset=paging.offset,
        limit=paging.limit,
    )
    return ok(
        [ListingResponse.model_validate(i) for i in items],
        PaginationMeta.build(paging.page, paging.limit, total),
    )


@router.get("/meta/cities", response_model=ApiResponse[list[CityCount]])
async def listing_cities(db: AsyncSession = Depends(get_db)) -> dict:
    cities = await marketplace_service.list_cities(db)
    return ok([CityCount(name=city, count=count) for city, count in cities])


@router.get("/my/listings", response_model=ApiResponse[list[ListingResponse]])
async def my_listings(
    status_filter: ListingStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Every listing of the current user, whatever its status."""
    items = await marketplace_service.list_seller_listings(
        db, current_user.id, status_filter.value if status_filter else None
    )
    return ok([ListingResponse.model_validate(i) for i in items])


@router.get("/{item_id}", response_model=ApiResponse[ListingDetailResponse])
async def get_listing(item_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> dict:
    """Return a listing with its category and seller, and count the view."""
    item = await marketplace_service.get_listing(db, item_id)
    item.view_count += 1
    response = ListingDetailResponse.model_validate(item)
    await db.flush()
    return ok(response)


# ---------------------------------------------------------------------------
# Seller management
# ---------------------------------------------------------------------------


@router.post("", response_model=ApiResponse[ListingResponse], status_code=status.HTTP_201_CREATED)
async def create_listing(
    body: ListingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    item = await marketplace_service.create_listing(db, current_user, body)
    return ok(ListingResponse.model_validate(item))


@router.put("/{item_id}", response_model=ApiResponse[ListingResponse])
async def update_listing(
    item_id: uuid.UUID,
    body: ListingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    item = await marketplace_service.update_listing(db, current_user, item_id, body)
    return ok(ListingResponse.model_validate(item))


@router.delete("/{item_id}", response_model=ApiResponse[MessageData])
async def delete_listing(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    await marketplace_service.delete_listing(db, current_user, item_id)
    return ok(MessageData(message="Item deleted"))


@router.patch("/{item_id}/sold", response_model=ApiResponse[ListingResponse])
async def mark_sold(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    item = await marketplace_service.mark_sold(db, current_user, item_id)
    return ok(ListingResponse.model_validate(item))
