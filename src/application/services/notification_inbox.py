"""
Notification Inbox: the read side of notifications.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from src.application.interfaces.repositories import NotificationRepositoryInterface
from src.application.interfaces.services import TransactionServiceInterface
from src.domain.entities import Notification
from src.domain.exceptions import NotFoundError, ValidationError
from src.domain.value_objects import NotificationType

MAX_PAGE_SIZE = 100


@dataclass
class NotificationPage:
    items: List[Notification]
    unread_count: int


class NotificationInbox:
    """Lists a user's notifications and flips them to read."""

    def __init__(
        self,
        notification_repository: NotificationRepositoryInterface,
        transaction_service: TransactionServiceInterface,
    ):
        self.notification_repository = notification_repository
        self.transaction_service = transaction_service

    async def list_notifications(
        self,
        user_id: str,
        read: Optional[bool] = None,
        notification_type: Optional[NotificationType] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> NotificationPage:
        """Newest first, with the user's total unread count."""
        if not user_id or not user_id.strip():
            raise ValidationError("User id is required")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationError("Offset cannot be negative")

        items = await self.notification_repository.list_for_recipient(
            user_id,
            read=read,
            notification_type=notification_type,
            limit=limit,
            offset=offset,
        )
        unread_count = await self.notification_repository.count_unread(user_id)
        return NotificationPage(items=items, unread_count=unread_count)

    async def get(self, notification_id: UUID) -> Notification:
        notification = await self.notification_repository.get_by_id(notification_id)
        if notification is None:
            raise NotFoundError("Notification", str(notification_id))
        return notification

    async def mark_read(self, user_id: str, notification_ids: List[UUID]) -> int:
        """Mark some of the user's notifications read. Others' ids are ignored."""
        if not user_id or not user_id.strip():
            raise ValidationError("User id is required")
        if not notification_ids:
            raise ValidationError("At least one notification id is required")

        return await self._mark(user_id, list(notification_ids))

    async def mark_all_read(self, user_id: str) -> int:
        if not user_id or not user_id.strip():
            raise ValidationError("User id is required")

        return await self._mark(user_id, None)

    async def _mark(self, user_id: str, notification_ids: Optional[List[UUID]]) -> int:
        read_at = datetime.now(timezone.utc)
        return await self.transaction_service.execute_in_transaction(
            lambda: self.notification_repository.mark_read(
                user_id, notification_ids, read_at
            )
        )
