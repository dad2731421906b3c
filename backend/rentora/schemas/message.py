"""Pydantic v2 request/response schemas for user-to-user messaging."""

import uuid
from datetime import datetime

from pydantic import Field

from rentora.schemas.common import CamelModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ConversationCreate(CamelModel):
    """Open (or reuse) a conversation with another user."""

    user_id: uuid.UUID


class MessageCreate(CamelModel):
    # Blank content is rejected by the service with VALIDATION_ERROR.
    content: str = Field(..., max_length=10000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class MessageResponse(CamelModel):
    id: uuid.UUID
    conversation_id: uuid.UUID
    sender_id: uuid.UUID
    content: str
    is_read: bool
    read_at: datetime | None = None
    created_at: datetime


class ConversationResponse(CamelModel):
    """A conversation with its participant ids and most recent message."""

    id: uuid.UUID
    participant_ids: list[uuid.UUID]
    created_at: datetime
    updated_at: datetime
    last_message: MessageResponse | None = None
