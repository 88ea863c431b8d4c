"""Notification repository implementation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.repositories import NotificationRepositoryInterface
from src.config.logging import get_logger
from src.domain.entities import Notification
from src.domain.value_objects import NotificationType
from src.infrastructure.database.models import NotificationModel
from src.infrastructure.database.repositories.dialect import as_utc, insert_for

logger = get_logger(__name__)


class NotificationRepository(NotificationRepositoryInterface):
    """Notification repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert_if_absent(self, notification: Notification) -> bool:
        """Insert unless a notification with the same id exists."""
        stmt = (
            insert_for(self.db, NotificationModel)
            .values(
                id=notification.id,
                recipient_id=notification.recipient_id,
                title=notification.title,
                description=notification.description,
                type=notification.type.value,
                read=notification.read,
                read_at=notification.read_at,
                action_url=notification.action_url,
                extra_data=notification.metadata,
                created_at=notification.created_at,
                updated_at=notification.created_at,
            )
            .on_conflict_do_nothing(index_elements=["id"])
            .returning(NotificationModel.id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        """Get notification by ID."""
        stmt = (
            select(NotificationModel)
            .where(NotificationModel.id == notification_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def list_for_recipient(
        self,
        recipient_id: str,
        read: Optional[bool] = None,
        notification_type: Optional[NotificationType] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Notification]:
        """Notifications of a user, newest first."""
        stmt = select(NotificationModel).where(
            NotificationModel.recipient_id == recipient_id
        )
        if read is not None:
            stmt = stmt.where(NotificationModel.read == read)
        if notification_type is not None:
            stmt = stmt.where(NotificationModel.type == notification_type.value)

        stmt = (
            stmt.order_by(NotificationModel.created_at.desc())
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def count_unread(self, recipient_id: str) -> int:
        """Number of unread notifications of a user."""
        stmt = select(func.count()).where(
            NotificationModel.recipient_id == recipient_id,
            NotificationModel.read.is_(False),
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def mark_read(
        self,
        recipient_id: str,
        notification_ids: Optional[List[UUID]],
        read_at: datetime,
    ) -> int:
        """Flip unread notifications of recipient_id to read."""
        stmt = update(NotificationModel).where(
            NotificationModel.recipient_id == recipient_id,
            NotificationModel.read.is_(False),
        )
        if notification_ids is not None:
            if not notification_ids:
                return 0
            stmt = stmt.where(NotificationModel.id.in_(notification_ids))

        result = await self.db.execute(
            stmt.values(read=True, read_at=read_at, updated_at=read_at).execution_options(
                synchronize_session=False
            )
        )

        logger.info(
            "Notifications marked as read",
            recipient_id=recipient_id,
            count=result.rowcount,
        )
        return result.rowcount

    def _model_to_entity(self, model: NotificationModel) -> Notification:
        """Convert database model to domain entity."""
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            title=model.title,
            description=model.description,
            type=NotificationType(model.type),
            read=model.read,
            read_at=as_utc(model.read_at),
            created_at=as_utc(model.created_at),
            action_url=model.action_url,
            metadata=model.extra_data or {},
        )
