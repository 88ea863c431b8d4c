"""
Payment completed domain event.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from .base import DomainEvent


@dataclass
class PaymentCompleted(DomainEvent):
    """Event raised when the payment provider confirms a payout to a worker."""

    event_type = "payment_completed"

    payment_id: str
    worker_id: str
    amount: float
    household_name: str
    completed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def source_id(self) -> str:
        return self.payment_id
