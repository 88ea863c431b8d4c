"""
Event Publisher: runs notification dispatch after the primary write commits.
"""

from typing import Iterable, List, Optional

from src.application.interfaces.services import (
    OutboxEvent,
    OutboxInterface,
    TransactionServiceInterface,
)
from src.application.services.notification_dispatcher import (
    DispatchResult,
    NotificationDispatcher,
)
from src.config.logging import get_logger
from src.config.settings import settings
from src.domain.events import DomainEvent, deserialize_event
from src.domain.exceptions import DispatchFailure
from src.infrastructure.monitoring.metrics import record_dispatch_failure

logger = get_logger(__name__)


class EventPublisher:
    """Dispatches committed events, one transaction per event.

    A failed dispatch is rolled back, parked in the outbox for the
    background workers and reported to the caller as a DispatchFailure.
    It never propagates into the operation that produced the event.
    """

    def __init__(
        self,
        dispatcher: NotificationDispatcher,
        transaction_service: TransactionServiceInterface,
        outbox: OutboxInterface,
        max_retries: Optional[int] = None,
    ):
        self.dispatcher = dispatcher
        self.transaction_service = transaction_service
        self.outbox = outbox
        self.max_retries = (
            max_retries if max_retries is not None else settings.DISPATCH_MAX_RETRIES
        )

    async def publish(self, events: Iterable[DomainEvent]) -> List[DispatchFailure]:
        """Dispatch each event; return the failures as warnings."""
        failures = []
        for event in events:
            failure = await self._publish_one(event)
            if failure is not None:
                failures.append(failure)
        return failures

    async def redeliver(self, outbox_event: OutboxEvent) -> DispatchResult:
        """Dispatch an event read back from the outbox. Errors propagate."""
        event = deserialize_event(outbox_event.event_type, outbox_event.event_data)
        return await self.transaction_service.execute_in_transaction(
            lambda: self.dispatcher.dispatch(event)
        )

    async def _publish_one(self, event: DomainEvent) -> Optional[DispatchFailure]:
        try:
            await self.transaction_service.execute_in_transaction(
                lambda: self.dispatcher.dispatch(event)
            )
            return None
        except Exception as e:
            logger.error(
                "Notification dispatch failed",
                event_type=event.event_type,
                source_id=event.source_id,
                error=str(e),
                exc_info=True,
            )
            record_dispatch_failure(event.event_type)
            return await self._park(event, str(e))

    async def _park(self, event: DomainEvent, error_message: str) -> DispatchFailure:
        failure = DispatchFailure(
            event_type=event.event_type,
            source_id=event.source_id,
            error_message=error_message,
        )

        try:
            outbox_event = await self.transaction_service.execute_in_transaction(
                lambda: self.outbox.create_event(
                    event, max_retries=self.max_retries, error_message=error_message
                )
            )
            failure.outbox_event_id = str(outbox_event.id)
        except Exception as e:
            logger.error(
                "Failed to store event in outbox",
                event_type=event.event_type,
                source_id=event.source_id,
                error=str(e),
                exc_info=True,
            )

        return failure
