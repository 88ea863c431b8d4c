"""
Transactional Outbox Pattern implementation over SQLAlchemy.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.services import (
    OutboxEvent,
    OutboxEventStatus,
    OutboxInterface,
)
from src.config.logging import get_logger
from src.domain.events import DomainEvent
from src.infrastructure.database.models import OutboxEventModel
from src.infrastructure.database.repositories.dialect import as_utc

logger = get_logger(__name__)


class TransactionalOutbox(OutboxInterface):
    """Outbox table holding events whose dispatch must be retried."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session
        self.logger = logger

    async def create_event(
        self,
        event: DomainEvent,
        max_retries: int = 3,
        error_message: Optional[str] = None,
    ) -> OutboxEvent:
        """
        Create an outbox event within the current transaction.

        The caller commits; this method only flushes.
        """
        outbox_event = OutboxEvent(
            id=uuid4(),
            event_type=event.event_type,
            aggregate_id=event.aggregate_id,
            event_data=event.to_payload(),
            max_retries=max_retries,
            created_at=datetime.now(timezone.utc),
            error_message=error_message,
        )

        self.db_session.add(
            OutboxEventModel(
                id=outbox_event.id,
                event_type=outbox_event.event_type,
                aggregate_id=outbox_event.aggregate_id,
                event_data=outbox_event.event_data,
                status=outbox_event.status.value,
                retry_count=outbox_event.retry_count,
                max_retries=outbox_event.max_retries,
                created_at=outbox_event.created_at,
                error_message=error_message,
            )
        )
        await self.db_session.flush()

        self.logger.info(
            "Outbox event created",
            event_id=str(outbox_event.id),
            event_type=outbox_event.event_type,
            aggregate_id=outbox_event.aggregate_id,
        )

        return outbox_event

    async def mark_event_processing(self, event_id: UUID) -> bool:
        """Mark an event as processing to prevent duplicate processing."""
        result = await self.db_session.execute(
            update(OutboxEventModel)
            .where(
                OutboxEventModel.id == event_id,
                OutboxEventModel.status == OutboxEventStatus.PENDING.value,
            )
            .values(
                status=OutboxEventStatus.PROCESSING.value,
                processed_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        await self.db_session.commit()

        return result.rowcount > 0

    async def mark_event_completed(self, event_id: UUID) -> None:
        """Mark an event as completed."""
        await self.db_session.execute(
            update(OutboxEventModel)
            .where(OutboxEventModel.id == event_id)
            .values(
                status=OutboxEventStatus.COMPLETED.value,
                processed_at=datetime.now(timezone.utc),
                error_message=None,
            )
            .execution_options(synchronize_session=False)
        )
        await self.db_session.commit()

    async def mark_event_failed(self, event_id: UUID, error_message: str) -> None:
        """Mark an event as failed with error message."""
        await self.db_session.execute(
            update(OutboxEventModel)
            .where(OutboxEventModel.id == event_id)
            .values(
                status=OutboxEventStatus.FAILED.value,
                error_message=error_message,
                retry_count=OutboxEventModel.retry_count + 1,
                processed_at=datetime.now(timezone.utc),
            )
            .execution_options(synchronize_session=False)
        )
        await self.db_session.commit()

    async def reset_event_for_retry(self, event_id: UUID) -> bool:
        """Move a failed event back to pending."""
        result = await self.db_session.execute(
            update(OutboxEventModel)
            .where(
                OutboxEventModel.id == event_id,
                OutboxEventModel.status == OutboxEventStatus.FAILED.value,
            )
            .values(status=OutboxEventStatus.PENDING.value)
            .execution_options(synchronize_session=False)
        )
        await self.db_session.commit()

        return result.rowcount > 0

    async def get_pending_events(self, limit: int = 100) -> List[OutboxEvent]:
        """Get pending events for processing."""
        return await self._find(OutboxEventStatus.PENDING, limit)

    async def get_failed_events_for_retry(self, limit: int = 25) -> List[OutboxEvent]:
        """Failed events that still have retries left."""
        stmt = (
            select(OutboxEventModel)
            .where(
                OutboxEventModel.status == OutboxEventStatus.FAILED.value,
                OutboxEventModel.retry_count < OutboxEventModel.max_retries,
            )
            .order_by(OutboxEventModel.processed_at.asc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db_session.execute(stmt)
        return [self._model_to_event(model) for model in result.scalars().all()]

    async def cleanup_completed_events(self, days_old: int = 7) -> int:
        """Clean up completed events older than specified days."""
        cutoff = datetime.now(timezone.utc) - timedelta(days=days_old)
        result = await self.db_session.execute(
            delete(OutboxEventModel).where(
                OutboxEventModel.status == OutboxEventStatus.COMPLETED.value,
                OutboxEventModel.created_at < cutoff,
            )
        )
        await self.db_session.commit()

        deleted_count = result.rowcount
        self.logger.info(
            "Cleaned up completed outbox events",
            deleted_count=deleted_count,
            days_old=days_old,
        )
        return deleted_count

    async def _find(self, status: OutboxEventStatus, limit: int) -> List[OutboxEvent]:
        stmt = (
            select(OutboxEventModel)
            .where(OutboxEventModel.status == status.value)
            .order_by(OutboxEventModel.created_at.asc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db_session.execute(stmt)
        events = [self._model_to_event(model) for model in result.scalars().all()]

        self.logger.debug(
            "Retrieved outbox events", status=status.value, count=len(events), limit=limit
        )
        return events

    def _model_to_event(self, model: OutboxEventModel) -> OutboxEvent:
        return OutboxEvent(
            id=model.id,
            event_type=model.event_type,
            aggregate_id=model.aggregate_id,
            event_data=model.event_data,
            status=OutboxEventStatus(model.status),
            retry_count=model.retry_count,
            max_retries=model.max_retries,
            created_at=as_utc(model.created_at),
            processed_at=as_utc(model.processed_at),
            error_message=model.error_message,
        )
