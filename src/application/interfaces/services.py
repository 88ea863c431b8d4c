"""
Service interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar
from uuid import UUID

from src.domain.events import DomainEvent

T = TypeVar("T")


class OutboxEventStatus(str, Enum):
    """Status of outbox events."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class OutboxEvent:
    """Domain event parked for (re)delivery."""

    id: UUID
    event_type: str
    aggregate_id: str
    event_data: Dict[str, Any]
    status: OutboxEventStatus = OutboxEventStatus.PENDING
    retry_count: int = 0
    max_retries: int = 3
    created_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    error_message: Optional[str] = None


class TransactionServiceInterface(ABC):
    """Interface for transaction management."""

    @abstractmethod
    async def execute_in_transaction(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run operation and commit, rolling back on any error."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        pass

    @abstractmethod
    async def rollback(self) -> None:
        pass


class OutboxInterface(ABC):
    """Interface for the transactional outbox holding undelivered events."""

    @abstractmethod
    async def create_event(
        self, event: DomainEvent, max_retries: int = 3, error_message: Optional[str] = None
    ) -> OutboxEvent:
        """Store an event for later delivery."""
        pass

    @abstractmethod
    async def get_pending_events(self, limit: int = 100) -> List[OutboxEvent]:
        """Events waiting for (re)delivery, oldest first."""
        pass

    @abstractmethod
    async def get_failed_events_for_retry(self, limit: int = 25) -> List[OutboxEvent]:
        """Failed events that still have retries left."""
        pass

    @abstractmethod
    async def reset_event_for_retry(self, event_id: UUID) -> bool:
        """Move a failed event back to pending."""
        pass

    @abstractmethod
    async def mark_event_processing(self, event_id: UUID) -> bool:
        """Claim an event. Returns False if another worker claimed it."""
        pass

    @abstractmethod
    async def mark_event_completed(self, event_id: UUID) -> None:
        pass

    @abstractmethod
    async def mark_event_failed(self, event_id: UUID, error_message: str) -> None:
        pass

    @abstractmethod
    async def cleanup_completed_events(self, days_old: int = 7) -> int:
        """Delete completed events older than days_old."""
        pass
