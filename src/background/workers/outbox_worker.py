"""
Outbox Worker: redelivers notification dispatches that failed after commit.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.services import (
    OutboxEvent,
    OutboxEventStatus,
    OutboxInterface,
)
from src.application.services import EventPublisher, NotificationDispatcher
from src.config.logging import get_logger
from src.config.settings import settings
from src.infrastructure.database.repositories import (
    NotificationRepository,
    TransactionalOutbox,
    TransactionService,
)
from src.infrastructure.memory import (
    InMemoryNotificationRepository,
    InMemoryOutbox,
    InMemoryStore,
    InMemoryTransactionService,
)
from src.infrastructure.monitoring.metrics import record_worker_task

logger = get_logger(__name__)


class OutboxWorker:
    """Worker for processing outbox events.

    Each parked event is replayed through the notification dispatcher.
    Replays are idempotent: notifications that were already written are
    detected by their deterministic id and not duplicated.
    """

    def __init__(
        self,
        outbox: OutboxInterface,
        event_publisher: EventPublisher,
        retry_base_delay_minutes: Optional[int] = None,
    ):
        self.outbox = outbox
        self.event_publisher = event_publisher
        self.retry_base_delay_minutes = (
            retry_base_delay_minutes
            if retry_base_delay_minutes is not None
            else settings.OUTBOX_RETRY_BASE_DELAY_MINUTES
        )
        self.is_running = False
        self.processed_count = 0
        self.error_count = 0
        self.retry_count = 0

    async def process_pending_events(self, batch_size: Optional[int] = None) -> int:
        """Redeliver pending events, then failed ones whose backoff has elapsed."""
        batch_size = batch_size or settings.OUTBOX_BATCH_SIZE
        logger.info("Starting outbox event processing", batch_size=batch_size)

        pending_events = await self.outbox.get_pending_events(limit=batch_size)

        # 25% of the batch for retries
        retry_limit = max(1, batch_size // 4)
        failed_events = await self.outbox.get_failed_events_for_retry(limit=retry_limit)

        all_events = pending_events + failed_events
        if not all_events:
            logger.info("No pending or retryable events found")
            return 0

        logger.info(
            "Retrieved events for processing",
            pending_count=len(pending_events),
            retry_count=len(failed_events),
        )

        processed_count = 0
        for event in all_events:
            if await self._process(event):
                processed_count += 1

        logger.info(
            "Outbox event processing completed",
            total_events=len(all_events),
            processed_count=processed_count,
            total_processed=self.processed_count,
            total_errors=self.error_count,
        )
        return processed_count

    async def _process(self, event: OutboxEvent) -> bool:
        if event.status == OutboxEventStatus.FAILED:
            if not self._should_retry_event(event):
                return False
            if not await self.outbox.reset_event_for_retry(event.id):
                logger.warning("Failed to reset event for retry", event_id=str(event.id))
                return False
            self.retry_count += 1

        if not await self.outbox.mark_event_processing(event.id):
            # Claimed by another worker
            return False

        try:
            result = await self.event_publisher.redeliver(event)
        except Exception as e:
            logger.error(
                "Error redelivering outbox event",
                event_id=str(event.id),
                event_type=event.event_type,
                retry_count=event.retry_count,
                error=str(e),
                exc_info=True,
            )
            self.error_count += 1
            record_worker_task("outbox", event.event_type, "error")
            await self.outbox.mark_event_failed(event.id, str(e))
            return False

        await self.outbox.mark_event_completed(event.id)
        self.processed_count += 1
        record_worker_task("outbox", event.event_type, "success")
        logger.info(
            "Outbox event redelivered",
            event_id=str(event.id),
            event_type=event.event_type,
            created=len(result.created),
            duplicates=len(result.duplicates),
        )
        return True

    def _should_retry_event(self, event: OutboxEvent) -> bool:
        """
        Exponential backoff: base, 3x base, 9x base minutes after the last failure.
        """
        if event.retry_count >= event.max_retries:
            return False
        if not event.processed_at:
            return True

        delay_minutes = self.retry_base_delay_minutes * (3**event.retry_count)
        cutoff_time = datetime.now(timezone.utc) - timedelta(minutes=delay_minutes)
        return event.processed_at < cutoff_time

    async def cleanup(self, days_old: Optional[int] = None) -> int:
        days_old = days_old if days_old is not None else settings.OUTBOX_CLEANUP_DAYS
        deleted = await self.outbox.cleanup_completed_events(days_old=days_old)
        logger.info("Outbox cleanup completed", deleted=deleted, days_old=days_old)
        return deleted

    async def start_continuous_processing(self, interval_seconds: int = 30):
        """Process batches every interval_seconds until stopped."""
        logger.info(
            "Starting continuous outbox event processing",
            interval_seconds=interval_seconds,
        )
        self.is_running = True

        while self.is_running:
            try:
                await self.process_pending_events()
            except Exception as e:
                logger.error(
                    "Error in continuous outbox processing", error=str(e), exc_info=True
                )
            await asyncio.sleep(interval_seconds)

    def stop_continuous_processing(self):
        logger.info("Stopping continuous outbox event processing")
        self.is_running = False

    def get_stats(self) -> dict:
        """Get worker statistics."""
        total_operations = self.processed_count + self.error_count
        return {
            "is_running": self.is_running,
            "total_processed": self.processed_count,
            "total_errors": self.error_count,
            "total_retries": self.retry_count,
            "success_rate": (self.processed_count / total_operations)
            if total_operations > 0
            else 0,
        }


def create_outbox_worker(
    session: Optional[AsyncSession] = None, store: Optional[InMemoryStore] = None
) -> OutboxWorker:
    """Wire an OutboxWorker over a database session or an in-memory store."""
    if store is not None:
        outbox = InMemoryOutbox(store)
        transaction_service = InMemoryTransactionService()
        notification_repository = InMemoryNotificationRepository(store)
    elif session is not None:
        outbox = TransactionalOutbox(session)
        transaction_service = TransactionService(session)
        notification_repository = NotificationRepository(session)
    else:
        raise ValueError("Either a session or a store is required")

    publisher = EventPublisher(
        NotificationDispatcher(notification_repository), transaction_service, outbox
    )
    return OutboxWorker(outbox, publisher)
