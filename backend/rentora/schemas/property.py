"""Pydantic v2 request/response schemas for property endpoints."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_validator, model_validator

from rentora.models.enums import PriceUnit, PropertyType
from rentora.schemas.auth import UserSummary
from rentora.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PropertyCreate(CamelModel):
    """Schema for creating a new property.

    ``rating`` and ``review_count`` are derived and deliberately absent.
    """

    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., min_length=20)
    type: PropertyType
    price: Decimal = Field(..., gt=0)
    price_unit: PriceUnit
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    area_sq_ft: float | None = Field(None, ge=0)
    furnished: bool = False
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    zip_code: str = Field(..., min_length=1, max_length=20)
    amenities: list[str] = Field(default_factory=list)
    rules: list[str] = Field(default_factory=list)
    available_from: datetime | None = None
    available_to: datetime | None = None
    min_stay_days: int = Field(1, ge=1)
    max_stay_days: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def check_stay_bounds(self) -> "PropertyCreate":
        """Validate that max_stay_days, when set, is not below min_stay_days."""
        if self.max_stay_days is not None and self.max_stay_days < self.min_stay_days:
            raise ValueError("max_stay_days must be greater than or equal to min_stay_days")
        return self


class PropertyUpdate(CamelModel):
    """Schema for partially updating a property. All fields optional."""

    title: str | None = Field(None, min_length=5, max_length=200)
    description: str | None = Field(None, min_length=20)
    type: PropertyType | None = None
    price: Decimal | None = Field(None, gt=0)
    price_unit: PriceUnit | None = None
    bedrooms: int | None = Field(None, ge=0)
    bathrooms: int | None = Field(None, ge=0)
    area_sq_ft: float | None = Field(None, ge=0)
    furnished: bool | None = None
    address: str | None = Field(None, min_length=1, max_length=255)
    city: str | None = Field(None, min_length=1, max_length=100)
    state: str | None = Field(None, min_length=1, max_length=100)
    zip_code: str | None = Field(None, min_length=1, max_length=20)
    amenities: list[str] | None = None
    rules: list[str] | None = None
    available_from: datetime | None = None
    available_to: datetime | None = None
    min_stay_days: int | None = Field(None, ge=1)
    max_stay_days: int | None = Field(None, ge=1)
    status: str | None = Field(None, pattern="^(AVAILABLE|UNAVAILABLE)$")

    @field_validator(
        "title",
        "description",
        "type",
        "price",
        "price_unit",
        "furnished",
        "address",
        "city",
        "state",
        "zip_code",
        "amenities",
        "rules",
        "min_stay_days",
        "status",
    )
    @classmethod
    def reject_null(cls, value):
        """Omit a field to leave it unchanged; only optional columns can be cleared."""
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class PropertyVerification(CamelModel):
    """Admin decision on a property awaiting verification."""

    approved: bool


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PropertyResponse(CamelModel):
    """Property information returned from the API."""

    id: uuid.UUID
    owner_id: uuid.UUID
    title: str
    description: str
    type: str
    price: Decimal
    price_unit: str
    bedrooms: int | None = None
    bathrooms: int | None = None
    area_sq_ft: float | None = None
    furnished: bool
    address: str
    city: str
    state: str
    zip_code: str
    amenities: list[str] = []
    rules: list[str] = []
    available_from: datetime | None = None
    available_to: datetime | None = None
    min_stay_days: int
    max_stay_days: int | None = None
    status: str
    is_featured: bool
    view_count: int
    rating: float
    review_count: int
    created_at: datetime
    updated_at: datetime


class PropertyDetailResponse(PropertyResponse):
    """Property with its owner card."""

    owner: UserSummary | None = None


class CityCount(CamelModel):
    name: str
    count: int
