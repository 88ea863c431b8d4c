"""Notification domain entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import NAMESPACE_URL, UUID, uuid4, uuid5

from src.domain.value_objects import NotificationType

NOTIFICATION_NAMESPACE = uuid5(NAMESPACE_URL, "household-services/notifications")


@dataclass
class Notification:
    """An in-app message telling a user that something happened."""

    recipient_id: str
    title: str
    description: str
    type: NotificationType = NotificationType.INFO
    id: UUID = field(default_factory=uuid4)
    read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    action_url: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    @staticmethod
    def deterministic_id(event_type: str, source_id: str, recipient_id: str) -> UUID:
        """Stable id for one (event, recipient) pair.

        Replaying the same event yields the same id, so an insert-if-absent
        on this id never produces a second notification.
        """
        return uuid5(NOTIFICATION_NAMESPACE, f"{event_type}:{source_id}:{recipient_id}")

    def mark_read(self, read_at: Optional[datetime] = None) -> bool:
        """Flip to read. Returns False if it was already read."""
        if self.read:
            return False
        self.read = True
        self.read_at = read_at or datetime.now(timezone.utc)
        return True
