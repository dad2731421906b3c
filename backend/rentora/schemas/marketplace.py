"""Pydantic v2 request/response schemas for the peer-to-peer marketplace."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_validator

from rentora.models.enums import ItemCondition
from rentora.schemas.auth import UserSummary
from rentora.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ListingImage(CamelModel):
    url: str = Field(..., min_length=1, max_length=512)
    caption: str | None = Field(None, max_length=200)
    is_primary: bool = False


class MarketplaceCategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)


class ListingCreate(CamelModel):
    """Schema for listing an item for sale."""

    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=20)
    category_id: uuid.UUID
    condition: ItemCondition
    price: Decimal = Field(..., gt=0)
    original_price: Decimal | None = Field(None, gt=0)
    is_negotiable: bool = False
    city: str = Field(..., min_length=1, max_length=100)
    address: str | None = Field(None, max_length=255)
    images: list[ListingImage] = Field(default_factory=list)


class ListingUpdate(CamelModel):
    """Partial update of a listing. Status changes go through mark-sold."""

    title: str | None = Field(None, min_length=5, max_length=200)
    description: str | None = Field(None, min_length=20)
    category_id: uuid.UUID | None = None
    condition: ItemCondition | None = None
    price: Decimal | None = Field(None, gt=0)
    original_price: Decimal | None = Field(None, gt=0)
    is_negotiable: bool | None = None
    city: str | None = Field(None, min_length=1, max_length=100)
    address: str | None = Field(None, max_length=255)
    images: list[ListingImage] | None = None

    @field_validator(
        "title",
        "description",
        "category_id",
        "condition",
        "price",
        "is_negotiable",
        "city",
        "images",
    )
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class MarketplaceCategoryResponse(CamelModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    icon: str | None = None
    is_active: bool


class ListingResponse(CamelModel):
    id: uuid.UUID
    seller_id: uuid.UUID
    category_id: uuid.UUID
    title: str
    description: str
    condition: str
    price: Decimal
    original_price: Decimal | None = None
    is_negotiable: bool
    city: str
    address: str | None = None
    images: list[ListingImage] = []
    status: str
    view_count: int
    sold_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class ListingDetailResponse(ListingResponse):
    """Listing with its category and seller card."""

    category: MarketplaceCategoryResponse
    seller: UserSummary
