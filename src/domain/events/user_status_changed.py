"""
User status changed domain event.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from src.domain.value_objects import UserStatus

from .base import DomainEvent


@dataclass
class UserStatusChanged(DomainEvent):
    """Event raised when an administrator changes an account status."""

    event_type = "user_status_changed"

    user_id: str
    new_status: UserStatus
    actor_id: str
    reason: Optional[str] = None
    changed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def source_id(self) -> str:
        return f"{self.user_id}:{self.new_status.value}:{self.changed_at.isoformat()}"

    @property
    def aggregate_id(self) -> str:
        return self.user_id
