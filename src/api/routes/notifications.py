"""Notification inbox endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from src.api.dependencies import ActorIdDep, NotificationInboxDep
from src.api.schemas.notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from src.config.logging import get_logger
from src.domain.exceptions import NotFoundError
from src.domain.value_objects import NotificationType

logger = get_logger(__name__)
router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    inbox: NotificationInboxDep,
    user_id: str = Query(..., min_length=1),
    read: Optional[bool] = None,
    notification_type: Optional[NotificationType] = Query(None, alias="type"),
    limit: int = Query(50, ge=1),
    offset: int = Query(0, ge=0),
):
    """A user's notifications, newest first, with the unread count."""
    page = await inbox.list_notifications(
        user_id,
        read=read,
        notification_type=notification_type,
        limit=limit,
        offset=offset,
    )
    return NotificationListResponse(
        items=[NotificationResponse.from_entity(n) for n in page.items],
        unread_count=page.unread_count,
    )


@router.post("/read", response_model=MarkReadResponse)
async def mark_notifications_read(
    body: MarkReadRequest,
    inbox: NotificationInboxDep,
    actor_id: ActorIdDep,
):
    """Mark the acting user's notifications read."""
    if body.mark_all:
        updated = await inbox.mark_all_read(actor_id)
    else:
        updated = await inbox.mark_read(actor_id, body.notification_ids)

    logger.info("Notifications marked as read", user_id=actor_id, updated=updated)
    return MarkReadResponse(updated=updated)


@router.put("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    inbox: NotificationInboxDep,
    actor_id: ActorIdDep,
):
    notification = await inbox.get(notification_id)
    if notification.recipient_id != actor_id:
        # Other users' notifications are not disclosed
        raise NotFoundError("Notification", str(notification_id))

    await inbox.mark_read(actor_id, [notification_id])
    return NotificationResponse.from_entity(await inbox.get(notification_id))
