"""Property rating aggregation.

The aggregate is recomputed from scratch after every review mutation rather
than adjusted incrementally, so it can never drift from the stored reviews.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.errors import NotFoundError
from rentora.models.property import Property
from rentora.models.review import Review

logger = logging.getLogger(__name__)


def mean_rating(ratings: list[int]) -> tuple[float, int]:
    """Return ``(mean, count)`` for a list of ratings; ``(0.0, 0)`` when empty."""
    if not ratings:
        return 0.0, 0
    return sum(ratings) / len(ratings), len(ratings)


async def refresh_property_rating(db: AsyncSession, property_id: uuid.UUID) -> tuple[float, int]:
    """Recompute and store a property's mean rating and review count.

    Locks the property row first so concurrent review writes for the same
    property apply their recomputations one after another.
    """
    result = await db.execute(
        select(Property)
        .where(Property.id == property_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    prop = result.scalar_one_or_none()
    if prop is None:
        raise NotFoundError("Property not found")

    ratings = (await db.execute(select(Review.rating).where(Review.property_id == property_id))).scalars().all()
    rating, count = mean_rating(list(ratings))

    prop.rating = rating
    prop.review_count = count
    await db.flush()

    logger.info("Rating for property %s refreshed: %.2f over %d reviews", property_id, rating, count)
    return rating, count
