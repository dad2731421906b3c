"""Review API router: property and service-booking reviews."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_current_user, get_db, page_params
from rentora.models.user import User
from rentora.schemas.common import ApiResponse, MessageData, PageParams, PaginationMeta, ok
from rentora.schemas.review import ReviewCreate, ReviewResponse, ReviewUpdate
from rentora.services import review_service

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.post(
    "",
    response_model=ApiResponse[ReviewResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Review a property or a completed service booking",
)
async def create_review(
    body: ReviewCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    review = await review_service.create_review(db, current_user, body)
    return ok(ReviewResponse.model_validate(review))


@router.get(
    "/property/{property_id}",
    response_model=ApiResponse[list[ReviewResponse]],
    summary="Reviews of a property",
)
async def property_reviews(
    property_id: uuid.UUID,
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Return a page of reviews; ``meta`` carries the average rating and total count."""
    items, average, total = await review_service.list_property_reviews(db, property_id, paging.offset, paging.limit)
    meta = PaginationMeta.build(paging.page, paging.limit, total).model_dump(by_alias=True)
    meta.update({"averageRating": average, "totalReviews": total})
    return ok([ReviewResponse.model_validate(r) for r in items], meta)


@router.get("/my", response_model=ApiResponse[list[ReviewResponse]], summary="Reviews I wrote")
async def my_reviews(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    items = await review_service.list_user_reviews(db, current_user.id)
    return ok([ReviewResponse.model_validate(r) for r in items])


@router.put("/{review_id}", response_model=ApiResponse[ReviewResponse], summary="Edit my review")
async def update_review(
    review_id: uuid.UUID,
    body: ReviewUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    review = await review_service.update_review(db, current_user, review_id, body)
    return ok(ReviewResponse.model_validate(review))


@router.delete("/{review_id}", response_model=ApiResponse[MessageData], summary="Delete a review")
async def delete_review(
    review_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    await review_service.delete_review(db, current_user, review_id)
    return ok(MessageData(message="Review deleted"))
