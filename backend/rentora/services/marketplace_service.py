"""Peer-to-peer marketplace: categories, listings and the sold transition."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.auth.permissions import Action, authorize
from rentora.database import utcnow
from rentora.errors import InvalidStatusError, NotFoundError, ValidationError
from rentora.models.enums import ListingStatus
from rentora.models.marketplace import MarketplaceCategory, MarketplaceItem
from rentora.models.user import User
from rentora.schemas.marketplace import ListingCreate, ListingUpdate, MarketplaceCategoryCreate

logger = logging.getLogger(__name__)

LISTING_SORTS = {
    "newest": MarketplaceItem.created_at.desc(),
    "price_asc": MarketplaceItem.price.asc(),
    "price_desc": MarketplaceItem.price.desc(),
}


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


async def list_categories(db: AsyncSession) -> list[MarketplaceCategory]:
    result = await db.execute(
        select(MarketplaceCategory)
        .where(MarketplaceCategory.is_active.is_(True))
        .order_by(MarketplaceCategory.name)
    )
    return list(result.scalars().all())


async def create_category(db: AsyncSession, data: MarketplaceCategoryCreate) -> MarketplaceCategory:
    category = MarketplaceCategory(**data.model_dump())
    db.add(category)
    await db.flush()
    await db.refresh(category)
    return category


async def _active_category(db: AsyncSession, category_id: uuid.UUID) -> MarketplaceCategory:
    category = await db.get(MarketplaceCategory, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    if not category.is_active:
        raise ValidationError("Category is not accepting listings")
    return category


# ---------------------------------------------------------------------------
# Browsing
# ---------------------------------------------------------------------------


async def list_listings(
    db: AsyncSession,
    *,
    category_id: uuid.UUID | None = None,
    city: str | None = None,
    condition: str | None = None,
    min_price: Decimal | None = None,
    max_price: Decimal | None = None,
    sort: str = "newest",
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[MarketplaceItem], int]:
    """Filtered page of ACTIVE listings and the total number that match."""
    filters = [MarketplaceItem.status == ListingStatus.ACTIVE.value]
    if category_id is not None:
        filters.append(MarketplaceItem.category_id == category_id)
    if city:
        filters.append(MarketplaceItem.city.ilike(f"%{city}%"))
    if condition:
        filters.append(MarketplaceItem.condition == condition)
    if min_price is not None:
        filters.append(MarketplaceItem.price >= min_price)
    if max_price is not None:
        filters.append(MarketplaceItem.price <= max_price)

    total = (await db.execute(select(func.count()).select_from(MarketplaceItem).where(*filters))).scalar_one()
    result = await db.execute(
        select(MarketplaceItem).where(*filters).order_by(LISTING_SORTS[sort]).offset(offset).limit(limit)
    )
    return list(result.scalars().all()), total


async def list_seller_listings(
    db: AsyncSession, seller_id: uuid.UUID, status: str | None = None
) -> list[MarketplaceItem]:
    query = select(MarketplaceItem).where(MarketplaceItem.seller_id == seller_id)
    if status:
        query = query.where(MarketplaceItem.status == status)
    result = await db.execute(query.order_by(MarketplaceItem.created_at.desc()))
    return list(result.scalars().all())


async def list_cities(db: AsyncSession) -> list[tuple[str, int]]:
    """Each city with ACTIVE listings, with its listing count."""
    result = await db.execute(
        select(MarketplaceItem.city, func.count(MarketplaceItem.id))
        .where(MarketplaceItem.status == ListingStatus.ACTIVE.value)
        .group_by(MarketplaceItem.city)
        .order_by(MarketplaceItem.city)
    )
    return [(city, count) for city, count in result.all()]


async def get_listing(db: AsyncSession, item_id: uuid.UUID) -> MarketplaceItem:
    result = await db.execute(
        select(MarketplaceItem).where(MarketplaceItem.id == item_id).execution_options(populate_existing=True)
    )
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError("Item not found")
    return item


# ---------------------------------------------------------------------------
# Seller management
# ---------------------------------------------------------------------------


async def create_listing(db: AsyncSession, seller: User, data: ListingCreate) -> MarketplaceItem:
    await _active_category(db, data.category_id)

    item = MarketplaceItem(seller_id=seller.id, status=ListingStatus.ACTIVE.value, **data.model_dump())
    db.add(item)
    await db.flush()
    await db.refresh(item)

    logger.info("Listing %s created by user %s", item.id, seller.id)
    return item


async def update_listing(db: AsyncSession, actor: User, item_id: uuid.UUID, data: ListingUpdate) -> MarketplaceItem:
    item = await get_listing(db, item_id)
    authorize(actor, Action.LISTING_UPDATE, item)

    update_data = data.model_dump(exclude_unset=True)
    if "category_id" in update_data:
        await _active_category(db, update_data["category_id"])

    for field, value in update_data.items():
        setattr(item, field, value)
    await db.flush()
    await db.refresh(item)
    return item


async def delete_listing(db: AsyncSession, actor: User, item_id: uuid.UUID) -> None:
    item = await get_listing(db, item_id)
    authorize(actor, Action.LISTING_DELETE, item)

    await db.delete(item)
    await db.flush()
    logger.info("Listing %s deleted by user %s", item_id, actor.id)


async def mark_sold(db: AsyncSession, actor: User, item_id: uuid.UUID) -> MarketplaceItem:
    """ACTIVE -> SOLD, stamping ``sold_at``. Only the seller may do this."""
    item = await get_listing(db, item_id)
    authorize(actor, Action.LISTING_MARK_SOLD, item)
    if item.status != ListingStatus.ACTIVE.value:
        raise InvalidStatusError("Only active listings can be marked as sold")

    item.status = ListingStatus.SOLD.value
    item.sold_at = utcnow()
    await db.flush()
    await db.refresh(item)

    logger.info("Listing %s marked sold by user %s", item.id, actor.id)
    return item
