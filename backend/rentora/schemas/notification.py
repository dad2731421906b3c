"""Pydantic v2 response schemas for notifications."""

import uuid
from datetime import datetime
from typing import Any

from rentora.schemas.common import CamelModel


class NotificationResponse(CamelModel):
    id: uuid.UUID
    type: str
    title: str
    message: str
    data: dict[str, Any] | None = None
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime


class MarkAllReadResponse(CamelModel):
    updated: int
