"""Saved properties for the current user."""

import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.errors import AlreadyFavoritedError, NotFoundError
from rentora.models.favorite import FavoriteProperty
from rentora.models.property import Property


async def list_favorites(db: AsyncSession, user_id: uuid.UUID) -> list[Property]:
    """The user's saved properties, most recently saved first."""
    result = await db.execute(
        select(FavoriteProperty)
        .where(FavoriteProperty.user_id == user_id)
        .order_by(FavoriteProperty.created_at.desc(), FavoriteProperty.id)
        .execution_options(populate_existing=True)
    )
    return [favorite.property for favorite in result.scalars().all()]


async def add_favorite(db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID) -> FavoriteProperty:
    if await db.get(Property, property_id) is None:
        raise NotFoundError("Property not found")

    existing = await db.execute(
        select(FavoriteProperty.id).where(
            FavoriteProperty.user_id == user_id,
            FavoriteProperty.property_id == property_id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise AlreadyFavoritedError()

    favorite = FavoriteProperty(user_id=user_id, property_id=property_id)
    db.add(favorite)
    try:
        await db.flush()
    except IntegrityError as exc:
        raise AlreadyFavoritedError() from exc
    return favorite


async def remove_favorite(db: AsyncSession, user_id: uuid.UUID, property_id: uuid.UUID) -> None:
    """Idempotent: removing a property that is not saved succeeds."""
    await db.execute(
        delete(FavoriteProperty).where(
            FavoriteProperty.user_id == user_id,
            FavoriteProperty.property_id == property_id,
        )
    )
