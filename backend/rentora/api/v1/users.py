"""Account API router: password change, the caller's own listings and saved properties."""

import logging
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_current_user, get_db, page_params
from rentora.auth.passwords import hash_password, verify_password
from rentora.errors import InvalidPasswordError
from rentora.models.enums import PropertyStatus
from rentora.models.property import Property
from rentora.models.user import User
from rentora.schemas.auth import ChangePasswordRequest
from rentora.schemas.common import ApiResponse, MessageData, PageParams, PaginationMeta, ok
from rentora.schemas.property import PropertyResponse
from rentora.services import favorite_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.post("/change-password", response_model=ApiResponse[MessageData])
async def change_password(
    body: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Replace the password after checking the current one."""
    if not verify_password(body.current_password, current_user.hashed_password):
        raise InvalidPasswordError()

    current_user.hashed_password = hash_password(body.new_password)
    await db.flush()

    logger.info("User %s changed their password", current_user.id)
    return ok(MessageData(message="Password changed successfully"))


@router.get("/properties", response_model=ApiResponse[list[PropertyResponse]])
async def my_properties(
    status_filter: PropertyStatus | None = Query(None, alias="status"),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """The caller's own properties in every status, including those awaiting verification."""
    filters = [Property.owner_id == current_user.id]
    if status_filter is not None:
        filters.append(Property.status == status_filter.value)

    total = (await db.execute(select(func.count()).select_from(Property).where(*filters))).scalar_one()
    result = await db.execute(
        select(Property)
        .where(*filters)
        .order_by(Property.created_at.desc())
        .offset(paging.offset)
        .limit(paging.limit)
    )
    return ok(
        [PropertyResponse.model_validate(p) for p in result.scalars().all()],
        PaginationMeta.build(paging.page, paging.limit, total),
    )


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------


@router.get("/favorites", response_model=ApiResponse[list[PropertyResponse]])
async def list_favorites(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    properties = await favorite_service.list_favorites(db, current_user.id)
    return ok([PropertyResponse.model_validate(p) for p in properties])


@router.post(
    "/favorites/{property_id}",
    response_model=ApiResponse[MessageData],
    status_code=status.HTTP_201_CREATED,
)
async def add_favorite(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    await favorite_service.add_favorite(db, current_user.id, property_id)
    return ok(MessageData(message="Added to favorites"))


@router.delete("/favorites/{property_id}", response_model=ApiResponse[MessageData])
async def remove_favorite(
    property_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    await favorite_service.remove_favorite(db, current_user.id, property_id)
    return ok(MessageData(message="Removed from favorites"))
