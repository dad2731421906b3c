"""Notification API router: the current user's in-app notifications."""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from rentora.api.deps import get_current_user, get_db, page_params
from rentora.models.user import User
from rentora.schemas.common import ApiResponse, MessageData, PageParams, PaginationMeta, ok
from rentora.schemas.notification import MarkAllReadResponse, NotificationResponse
from rentora.services import notification_service

router = APIRouter(prefix="/api/v1/notifications", tags=["notifications"])


@router.get("", response_model=ApiResponse[list[NotificationResponse]])
async def list_notifications(
    is_read: bool | None = Query(None, alias="isRead"),
    paging: PageParams = Depends(page_params),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    """Return a page of notifications, newest first; ``meta`` carries ``unreadCount``."""
    items, total, unread = await notification_service.list_notifications(
        db, current_user.id, is_read, paging.offset, paging.limit
    )
    meta = PaginationMeta.build(paging.page, paging.limit, total).model_dump(by_alias=True)
    meta["unreadCount"] = unread
    return ok([NotificationResponse.model_validate(n) for n in items], meta)


@router.patch("/{notification_id}/read", response_model=ApiResponse[NotificationResponse])
async def mark_read(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    notification = await notification_service.mark_read(db, current_user.id, notification_id)
    return ok(NotificationResponse.model_validate(notification))


@router.post("/mark-all-read", response_model=ApiResponse[MarkAllReadResponse])
async def mark_all_read(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    updated = await notification_service.mark_all_read(db, current_user.id)
    return ok(MarkAllReadResponse(updated=updated))


@router.delete("/{notification_id}", response_model=ApiResponse[MessageData])
async def delete_notification(
    notification_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> dict:
    await notification_service.delete_notification(db, current_user.id, notification_id)
    return ok(MessageData(message="Notification deleted"))
