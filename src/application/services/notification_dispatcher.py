"""
Notification Dispatcher: turns domain events into notification records.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Type

from src.application.interfaces.repositories import NotificationRepositoryInterface
from src.config.logging import get_logger
from src.config.settings import settings
from src.domain.entities import Notification
from src.domain.events import (
    ApplicationSubmitted,
    ArrivalConfirmed,
    DomainEvent,
    EtaUpdated,
    JobCancelled,
    MessageSent,
    PaymentCompleted,
    UserStatusChanged,
)
from src.domain.value_objects import MessageType, NotificationType
from src.infrastructure.monitoring.metrics import record_notification_write

logger = get_logger(__name__)


@dataclass
class DispatchResult:
    """Outcome of dispatching one event."""

    event_type: str
    source_id: str
    created: List[Notification] = field(default_factory=list)
    duplicates: List[Notification] = field(default_factory=list)

    @property
    def recipients(self) -> List[str]:
        return [n.recipient_id for n in self.created + self.duplicates]


class NotificationDispatcher:
    """Maps each event to its recipients and writes one notification each.

    Notification ids are derived from (event type, source id, recipient),
    so dispatching the same event twice leaves a single row per recipient.
    Events with no interested counterparty produce nothing.
    """

    def __init__(self, notification_repository: NotificationRepositoryInterface):
        self.notification_repository = notification_repository
        self._builders: Dict[Type[DomainEvent], Callable[..., List[Notification]]] = {
            ApplicationSubmitted: self._application_submitted,
            EtaUpdated: self._eta_updated,
            ArrivalConfirmed: self._arrival_confirmed,
            JobCancelled: self._job_cancelled,
            MessageSent: self._message_sent,
            PaymentCompleted: self._payment_completed,
            UserStatusChanged: self._user_status_changed,
        }

    def build_notifications(self, event: DomainEvent) -> List[Notification]:
        """Notifications an event produces, without writing them."""
        builder = self._builders.get(type(event))
        if builder is None:
            return []
        return builder(event)

    async def dispatch(self, event: DomainEvent) -> DispatchResult:
        """Write the notifications for an event, skipping ones already written."""
        result = DispatchResult(event_type=event.event_type, source_id=event.source_id)

        for notification in self.build_notifications(event):
            created = await self.notification_repository.insert_if_absent(notification)
            record_notification_write(notification.type.value, created)
            if created:
                result.created.append(notification)
            else:
                result.duplicates.append(notification)

        logger.info(
            "Event dispatched",
            event_type=event.event_type,
            source_id=event.source_id,
            created=len(result.created),
            duplicates=len(result.duplicates),
        )
        return result

    def _notification(
        self, event: DomainEvent, recipient_id: str, **values
    ) -> Notification:
        return Notification(
            id=Notification.deterministic_id(
                event.event_type, event.source_id, recipient_id
            ),
            recipient_id=recipient_id,
            **values,
        )

    def _application_submitted(self, event: ApplicationSubmitted) -> List[Notification]:
        return [
            self._notification(
                event,
                event.household_id,
                title="New Job Application",
                description=f"{event.worker_name} has applied for your job: {event.title}",
                type=NotificationType.JOB_APPLICATION,
                action_url=f"/household/jobs/{event.job_id}/applications",
                metadata={
                    "job_id": str(event.job_id),
                    "application_id": str(event.application_id),
                    "worker_id": event.worker_id,
                },
            )
        ]

    def _eta_updated(self, event: EtaUpdated) -> List[Notification]:
        eta_time = event.estimated_arrival.strftime("%H:%M")
        return [
            self._notification(
                event,
                event.household_id,
                title="Worker ETA Updated",
                description=f"{event.worker_name} will arrive at approximately {eta_time}.",
                type=NotificationType.INFO,
                metadata={
                    "job_id": str(event.job_id),
                    "worker_id": event.worker_id,
                    "eta": event.estimated_arrival.isoformat(),
                    "current_location": event.current_location.to_dict()
                    if event.current_location
                    else None,
                },
            )
        ]

    def _arrival_confirmed(self, event: ArrivalConfirmed) -> List[Notification]:
        return [
            self._notification(
                event,
                event.household_id,
                title="Worker Has Arrived",
                description=(
                    f"{event.worker_name} has arrived for your {event.title} appointment."
                ),
                type=NotificationType.INFO,
                metadata={
                    "job_id": str(event.job_id),
                    "worker_id": event.worker_id,
                    "arrived_at": event.arrived_at.isoformat(),
                },
            )
        ]

    def _job_cancelled(self, event: JobCancelled) -> List[Notification]:
        description = f'The job "{event.title}" has been cancelled.'
        if event.reason:
            description += f" Reason: {event.reason}"

        return [
            self._notification(
                event,
                party,
                title="Job Cancelled",
                description=description,
                type=NotificationType.WARNING,
                metadata={
                    "job_id": str(event.job_id),
                    "cancelled_by": event.actor_id,
                },
            )
            for party in event.parties
            if party != event.actor_id
        ]

    def _message_sent(self, event: MessageSent) -> List[Notification]:
        if event.message_type == MessageType.TEXT:
            preview = event.content[: settings.MESSAGE_PREVIEW_LENGTH]
            if len(event.content) > settings.MESSAGE_PREVIEW_LENGTH:
                preview += "..."
        else:
            preview = event.message_type.preview_label

        return [
            self._notification(
                event,
                event.receiver_id,
                title="New Message",
                description=f"You have a new message: {preview}",
                type=NotificationType.INFO,
                action_url=f"/messages/{event.conversation_id}",
                metadata={
                    "conversation_id": event.conversation_id,
                    "sender_id": event.sender_id,
                    "message_id": str(event.message_id),
                },
            )
        ]

    def _payment_completed(self, event: PaymentCompleted) -> List[Notification]:
        amount = int(event.amount) if float(event.amount).is_integer() else event.amount
        return [
            self._notification(
                event,
                event.worker_id,
                title="Payment Received",
                description=(
                    f"You have received a payment of {amount} RWF "
                    f"from {event.household_name}."
                ),
                type=NotificationType.PAYMENT,
                metadata={"payment_id": event.payment_id},
            )
        ]

    def _user_status_changed(self, event: UserStatusChanged) -> List[Notification]:
        if not event.new_status.notifies_user:
            return []
        return [
            self._notification(
                event,
                event.user_id,
                title="Account Status Updated",
                description=(
                    f"Your account status has been changed to: {event.new_status.value}"
                ),
                type=NotificationType.INFO,
            )
        ]
