"""Two-party conversations and their messages."""

import logging
import uuid

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.database import utcnow
from rentora.errors import ForbiddenError, NotFoundError, ValidationError
from rentora.models.conversation import Conversation, ConversationParticipant, Message
from rentora.models.user import User

logger = logging.getLogger(__name__)


async def _get_conversation(db: AsyncSession, conversation_id: uuid.UUID) -> Conversation | None:
    result = await db.execute(
        select(Conversation).where(Conversation.id == conversation_id).execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _require_participant(db: AsyncSession, conversation_id: uuid.UUID, user_id: uuid.UUID) -> None:
    result = await db.execute(
        select(ConversationParticipant.id).where(
            ConversationParticipant.conversation_id == conversation_id,
            ConversationParticipant.user_id == user_id,
        )
    )
    if result.scalar_one_or_none() is None:
        raise ForbiddenError("Not authorized")


async def last_message(db: AsyncSession, conversation_id: uuid.UUID) -> Message | None:
    result = await db.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def list_conversations(db: AsyncSession, user_id: uuid.UUID) -> list[Conversation]:
    """Conversations the user takes part in, most recently active first."""
    result = await db.execute(
        select(Conversation)
        .join(ConversationParticipant, ConversationParticipant.conversation_id == Conversation.id)
        .where(ConversationParticipant.user_id == user_id)
        .order_by(Conversation.updated_at.desc())
    )
    return list(result.scalars().unique().all())


async def get_or_create_conversation(
    db: AsyncSession,
    user: User,
    other_user_id: uuid.UUID,
) -> tuple[Conversation, bool]:
    """Return the conversation between two users, creating it if needed.

    The boolean is True when a new conversation was created.
    """
    if other_user_id == user.id:
        raise ValidationError("Cannot create conversation with yourself")
    if await db.get(User, other_user_id) is None:
        raise NotFoundError("User not found")

    mine = select(ConversationParticipant.conversation_id).where(ConversationParticipant.user_id == user.id)
    result = await db.execute(
        select(Conversation)
        .join(ConversationParticipant, ConversationParticipant.conversation_id == Conversation.id)
        .where(ConversationParticipant.user_id == other_user_id, Conversation.id.in_(mine))
        .limit(1)
    )
    existing = result.scalar_one_or_none()
    if existing is not None:
        return existing, False

    conversation = Conversation(
        participants=[
            ConversationParticipant(user_id=user.id),
            ConversationParticipant(user_id=other_user_id),
        ]
    )
    db.add(conversation)
    await db.flush()
    logger.info("Conversation %s created between %s and %s", conversation.id, user.id, other_user_id)
    return await _get_conversation(db, conversation.id), True


async def list_messages(
    db: AsyncSession,
    user: User,
    conversation_id: uuid.UUID,
    offset: int,
    limit: int,
) -> tuple[list[Message], int]:
    """Return a page of messages in chronological order and mark the other side's as read."""
    await _require_participant(db, conversation_id, user.id)

    result = await db.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(Message.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    messages = list(result.scalars().all())
    messages.reverse()
    total = (
        await db.execute(select(func.count()).select_from(Message).where(Message.conversation_id == conversation_id))
    ).scalar_one()

    await db.execute(
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.sender_id != user.id,
            Message.is_read.is_(False),
        )
        .values(is_read=True, read_at=utcnow())
        .execution_options(synchronize_session="fetch")
    )
    return messages, total


async def send_message(db: AsyncSession, user: User, conversation_id: uuid.UUID, content: str) -> Message:
    if not content or not content.strip():
        raise ValidationError("Message content required")

    await _require_participant(db, conversation_id, user.id)
    conversation = await _get_conversation(db, conversation_id)

    message = Message(conversation_id=conversation_id, sender_id=user.id, content=content)
    db.add(message)
    conversation.updated_at = utcnow()
    await db.flush()
    await db.refresh(message)
    return message
