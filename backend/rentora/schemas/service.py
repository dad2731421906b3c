"""Pydantic v2 request/response schemas for the home-service catalog and bookings."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import Field, model_validator

from rentora.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ServiceCategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    icon: str | None = Field(None, max_length=100)
    order: int = 0


class ServiceCreate(CamelModel):
    category_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    price_range_min: Decimal | None = Field(None, ge=0)
    price_range_max: Decimal | None = Field(None, ge=0)
    price_unit: str | None = Field(None, max_length=50)

    @model_validator(mode="after")
    def check_price_range(self) -> "ServiceCreate":
        if (
            self.price_range_min is not None
            and self.price_range_max is not None
            and self.price_range_max < self.price_range_min
        ):
            raise ValueError("price_range_max must be greater than or equal to price_range_min")
        return self


class ServiceProviderCreate(CamelModel):
    user_id: uuid.UUID
    service_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=200)
    phone: str | None = Field(None, max_length=50)
    city: str = Field(..., min_length=1, max_length=100)
    years_experience: int = Field(0, ge=0)
    is_verified: bool = False


class ServiceBookingCreate(CamelModel):
    """Schema for booking a provider for a service."""

    service_id: uuid.UUID
    provider_id: uuid.UUID
    scheduled_date: datetime
    scheduled_time: str = Field(..., min_length=1, max_length=20)
    address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    notes: str | None = Field(None, max_length=2000)


class ServiceBookingCancel(CamelModel):
    reason: str | None = Field(None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ServiceCategoryResponse(CamelModel):
    id: uuid.UUID
    name: str
    description: str | None = None
    icon: str | None = None
    order: int
    is_active: bool


class ServiceResponse(CamelModel):
    id: uuid.UUID
    category_id: uuid.UUID
    name: str
    description: str
    price_range_min: Decimal | None = None
    price_range_max: Decimal | None = None
    price_unit: str | None = None
    is_active: bool


class ServiceProviderResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    service_id: uuid.UUID
    name: str
    phone: str | None = None
    city: str
    years_experience: int
    is_verified: bool
    is_active: bool


class ServiceDetailResponse(ServiceResponse):
    """Service with its category and active providers."""

    category: ServiceCategoryResponse | None = None
    providers: list[ServiceProviderResponse] = []


class ServiceBookingResponse(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    service_id: uuid.UUID
    provider_id: uuid.UUID
    scheduled_date: datetime
    scheduled_time: str
    address: str
    city: str
    notes: str | None = None
    status: str
    cancellation_reason: str | None = None
    cancelled_at: datetime | None = None
    completed_at: datetime | None = None
    created_at: datetime
