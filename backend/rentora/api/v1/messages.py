"""Messaging API router: two-party conversations between users."""

import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_current_user, get_db, page_params
from rentora.models.conversation import Conversation
from rentora.models.user import User
from rentora.schemas.common import ApiResponse, PageParams, PaginationMeta, ok
from rentora.schemas.message import ConversationCreate, ConversationResponse, MessageCreate, MessageResponse
from rentora.services import message_service

router = APIRouter(prefix="/api/v1/messages", tags=["messages"])


async def _conversation_payload(db: AsyncSession, conversation: Conversation) -> ConversationResponse:
    last = await message_service.last_message(db, conversation.id)
    return ConversationResponse(
        id=conversation.id,
        participant_ids=[p.user_id for p in conversation.participants],
        created_at=conversation.created_at,
        updated_at=conversation.updated_at,
        last_message=MessageResponse.model_validate(last) if last is not None else None,
    )


@router.get("/conversations", response_model=ApiResponse[list[ConversationResponse]])
async def list_conversations(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    conversations = await message_service.list_conversations(db, current_user.id)
    return ok([await _conversation_payload(db, c) for c in conversations])


@router.post("/conversations", response_model=ApiResponse[ConversationResponse])
async def open_conversation(
    body: ConversationCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Return the existing conversation with a user, or create it (201)."""
    conversation, created = await message_service.get_or_create_conversation(db, current_user, body.user_id)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return ok(await _conversation_payload(db, conversation))


@router.get("/conversations/{conversation_id}/messages", response_model=ApiResponse[list[MessageResponse]])
async def list_messages(
    conversation_id: uuid.UUID,
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Return messages in chronological order and mark the other side's as read."""
    messages, total = await message_service.list_messages(
        db, current_user, conversation_id, paging.offset, paging.limit
    )
    return ok(
        [MessageResponse.model_validate(m) for m in messages],
        PaginationMeta.build(paging.page, paging.limit, total),
    )


@router.post(
    "/conversations/{conversation_id}/messages",
    response_model=ApiResponse[MessageResponse],
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    conversation_id: uuid.UUID,
    body: MessageCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    message = await message_service.send_message(db, current_user, conversation_id, body.content)
    return ok(MessageResponse.model_validate(message))
