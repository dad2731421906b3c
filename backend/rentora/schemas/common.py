"""Shared schema building blocks: camelCase base model and the response envelope."""

import math
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base model that reads snake_case or camelCase keys and emits camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Any = None


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
            has_more=page * limit < total,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every endpoint.

    ``data`` is set on success, ``error`` on failure; ``meta`` carries
    pagination or aggregate fields where an endpoint has them.
    """

    success: bool = True
    data: T | None = None
    error: ErrorBody | None = None
    meta: dict[str, Any] | None = None


class MessageData(BaseModel):
    """Generic message payload."""

    message: str


class PageParams(BaseModel):
    """1-based page/limit pagination parameters."""

    page: int = Field(1, ge=1)
    limit: int = Field(20, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def ok(data: Any = None, meta: dict[str, Any] | BaseModel | None = None) -> dict[str, Any]:
    """Build a success envelope for a route's return value."""
    if isinstance(meta, BaseModel):
        meta = meta.model_dump(by_alias=True)
    return {"success": True, "data": data, "meta": meta}
