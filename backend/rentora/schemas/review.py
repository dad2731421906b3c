"""Pydantic v2 request/response schemas for review endpoints."""

import uuid
from datetime import datetime

from pydantic import Field, field_validator

from rentora.schemas.common import CamelModel


class ReviewCreate(CamelModel):
    """Schema for creating a review.

    Exactly one of ``property_id`` / ``service_booking_id`` must be set; the
    review service enforces that and reports a ``VALIDATION_ERROR``.
    """

    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, min_length=10, max_length=1000)
    property_id: uuid.UUID | None = None
    service_booking_id: uuid.UUID | None = None


class ReviewUpdate(CamelModel):
    """Editable review fields. The target cannot be changed."""

    rating: int | None = Field(None, ge=1, le=5)
    comment: str | None = Field(None, min_length=10, max_length=1000)

    @field_validator("rating")
    @classmethod
    def rating_not_null(cls, value: int | None) -> int:
        if value is None:
            raise ValueError("Rating cannot be null")
        return value


class ReviewResponse(CamelModel):
    id: uuid.UUID
    reviewer_id: uuid.UUID
    reviewee_id: uuid.UUID
    property_id: uuid.UUID | None = None
    service_booking_id: uuid.UUID | None = None
    rating: int
    comment: str | None = None
    created_at: datetime
    updated_at: datetime
