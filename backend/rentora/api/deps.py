"""Shared API dependencies: single import point for all routers.

Re-exports database session and authentication dependencies so that router
modules can import everything they need from one place::

    from rentora.api.deps import get_db, get_current_user, page_params
"""

from fastapi import Query

from rentora.auth.dependencies import get_current_user, require
from rentora.config import settings
from rentora.database import get_db
from rentora.schemas.common import PageParams


def page_params(
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Page size"),
) -> PageParams:
    """Pagination query parameters shared by list endpoints."""
    return PageParams(page=page, limit=limit)


__all__ = [
    "get_db",
    "get_current_user",
    "require",
    "page_params",
]
