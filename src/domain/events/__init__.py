"""
Domain events package.
"""

from typing import Any, Dict, Type

from .application_submitted import ApplicationSubmitted
from .arrival_confirmed import ArrivalConfirmed
from .base import DomainEvent, JobEvent
from .eta_updated import EtaUpdated
from .job_assigned import JobAssigned
from .job_cancelled import JobCancelled
from .job_completed import JobCompleted
from .job_created import JobCreated
from .message_sent import MessageSent
from .payment_completed import PaymentCompleted
from .user_status_changed import UserStatusChanged
from .work_started import WorkStarted

EVENT_TYPES: Dict[str, Type[DomainEvent]] = {
    event.event_type: event
    for event in (
        ApplicationSubmitted,
        ArrivalConfirmed,
        EtaUpdated,
        JobAssigned,
        JobCancelled,
        JobCompleted,
        JobCreated,
        MessageSent,
        PaymentCompleted,
        UserStatusChanged,
        WorkStarted,
    )
}


def deserialize_event(event_type: str, data: Dict[str, Any]) -> DomainEvent:
    """Rebuild an event stored by the outbox."""
    try:
        event_class = EVENT_TYPES[event_type]
    except KeyError:
        raise ValueError(f"Unknown event type: {event_type}") from None
    return event_class.from_payload(data)


__all__ = [
    "ApplicationSubmitted",
    "ArrivalConfirmed",
    "DomainEvent",
    "EVENT_TYPES",
    "EtaUpdated",
    "JobAssigned",
    "JobCancelled",
    "JobCompleted",
    "JobCreated",
    "JobEvent",
    "MessageSent",
    "PaymentCompleted",
    "UserStatusChanged",
    "WorkStarted",
    "deserialize_event",
]
