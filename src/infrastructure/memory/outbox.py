"""
In-memory outbox and transaction service.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, List, Optional, TypeVar
from uuid import UUID, uuid4

from src.application.interfaces.services import (
    OutboxEvent,
    OutboxEventStatus,
    OutboxInterface,
    TransactionServiceInterface,
)
from src.domain.events import DomainEvent
from src.infrastructure.memory.store import InMemoryStore

T = TypeVar("T")


class InMemoryTransactionService(TransactionServiceInterface):
    """Writes to the memory store are applied immediately; nothing to commit."""

    async def execute_in_transaction(self, operation: Callable[[], Awaitable[T]]) -> T:
        return await operation()

    async def commit(self) -> None:
        pass

    async def rollback(self) -> None:
        pass


class InMemoryOutbox(OutboxInterface):
    """Outbox over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create_event(
        self,
        event: DomainEvent,
        max_retries: int = 3,
        error_message: Optional[str] = None,
    ) -> OutboxEvent:
        await asyncio.sleep(0)
        outbox_event = OutboxEvent(
            id=uuid4(),
            event_type=event.event_type,
            aggregate_id=event.aggregate_id,
            event_data=event.to_payload(),
            max_retries=max_retries,
            created_at=datetime.now(timezone.utc),
            error_message=error_message,
        )
        async with self.store.lock:
            self.store.outbox_events[outbox_event.id] = outbox_event
        return outbox_event

    async def get_pending_events(self, limit: int = 100) -> List[OutboxEvent]:
        await asyncio.sleep(0)
        async with self.store.lock:
            events = [
                e
                for e in self.store.outbox_events.values()
                if e.status == OutboxEventStatus.PENDING
            ]
            events.sort(key=lambda e: e.created_at)
            return events[:limit]

    async def get_failed_events_for_retry(self, limit: int = 25) -> List[OutboxEvent]:
        await asyncio.sleep(0)
        async with self.store.lock:
            events = [
                e
                for e in self.store.outbox_events.values()
                if e.status == OutboxEventStatus.FAILED and e.retry_count < e.max_retries
            ]
            events.sort(key=lambda e: e.processed_at or e.created_at)
            return events[:limit]

    async def reset_event_for_retry(self, event_id: UUID) -> bool:
        return await self._transition(
            event_id, OutboxEventStatus.FAILED, OutboxEventStatus.PENDING
        )

    async def mark_event_processing(self, event_id: UUID) -> bool:
        return await self._transition(
            event_id, OutboxEventStatus.PENDING, OutboxEventStatus.PROCESSING
        )

    async def mark_event_completed(self, event_id: UUID) -> None:
        await self._transition(event_id, None, OutboxEventStatus.COMPLETED)

    async def mark_event_failed(self, event_id: UUID, error_message: str) -> None:
        await asyncio.sleep(0)
        async with self.store.lock:
            event = self.store.outbox_events.get(event_id)
            if event:
                event.status = OutboxEventStatus.FAILED
                event.error_message = error_message
                event.retry_count += 1
                event.processed_at = datetime.now(timezone.utc)

    async def cleanup_completed_events(self, days_old: int = 7) -> int:
        await asyncio.sleep(0)
        cutoff = datetime.now(timezone.utc) - timedelta(days=days_old)
        async with self.store.lock:
            stale = [
                event_id
                for event_id, event in self.store.outbox_events.items()
                if event.status == OutboxEventStatus.COMPLETED and event.created_at < cutoff
            ]
            for event_id in stale:
                del self.store.outbox_events[event_id]
            return len(stale)

    async def _transition(
        self,
        event_id: UUID,
        expected: Optional[OutboxEventStatus],
        target: OutboxEventStatus,
    ) -> bool:
        await asyncio.sleep(0)
        async with self.store.lock:
            event = self.store.outbox_events.get(event_id)
            if event is None or (expected is not None and event.status != expected):
                return False
            event.status = target
            event.processed_at = datetime.now(timezone.utc)
            if target == OutboxEventStatus.COMPLETED:
                event.error_message = None
            return True
