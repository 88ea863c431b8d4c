"""
Notification dispatch failure.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class DispatchFailure:
    """A side effect that failed after its primary operation committed.

    Returned to callers as a warning; never raised through a lifecycle
    operation and never undoes the committed state.
    """

    event_type: str
    source_id: str
    error_message: str
    outbox_event_id: Optional[str] = None

    @property
    def queued_for_retry(self) -> bool:
        return self.outbox_event_id is not None

    def to_warning(self) -> dict:
        return {
            "type": "dispatch_failure",
            "event_type": self.event_type,
            "source_id": self.source_id,
            "message": self.error_message,
            "queued_for_retry": self.queued_for_retry,
        }
