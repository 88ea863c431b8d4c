"""
Account events raised by collaborators outside the job lifecycle.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from src.application.services.event_publisher import EventPublisher
from src.config.logging import get_logger
from src.domain.events import DomainEvent, PaymentCompleted, UserStatusChanged
from src.domain.exceptions import DispatchFailure, ValidationError
from src.domain.value_objects import UserStatus

logger = get_logger(__name__)


@dataclass
class AccountEventResult:
    event: DomainEvent
    warnings: List[DispatchFailure] = field(default_factory=list)


class AccountEvents:
    """Publishes payment and account-status events; stores nothing itself."""

    def __init__(self, event_publisher: EventPublisher):
        self.event_publisher = event_publisher

    async def payment_completed(
        self, payment_id: str, worker_id: str, amount: float, household_name: str
    ) -> AccountEventResult:
        """A payout to a worker was confirmed by the payment provider."""
        if not payment_id or not payment_id.strip():
            raise ValidationError("Payment id is required")
        if not worker_id or not worker_id.strip():
            raise ValidationError("Worker id is required")
        if amount is None or amount <= 0:
            raise ValidationError("Amount must be greater than zero")

        event = PaymentCompleted(
            payment_id=payment_id,
            worker_id=worker_id,
            amount=amount,
            household_name=household_name or "a household",
        )
        logger.info("Payment completed", payment_id=payment_id, worker_id=worker_id)
        return await self._publish(event)

    async def user_status_changed(
        self,
        user_id: str,
        new_status: Union[str, UserStatus],
        actor_id: str,
        reason: Optional[str] = None,
    ) -> AccountEventResult:
        """An administrator changed a user's account status."""
        if not user_id or not user_id.strip():
            raise ValidationError("User id is required")
        if not actor_id or not actor_id.strip():
            raise ValidationError("Actor id is required")
        try:
            status = UserStatus(new_status)
        except ValueError:
            allowed = ", ".join(s.value for s in UserStatus)
            raise ValidationError(
                f"Invalid user status '{new_status}' (expected one of: {allowed})"
            ) from None

        event = UserStatusChanged(
            user_id=user_id, new_status=status, actor_id=actor_id, reason=reason
        )
        logger.info(
            "User status changed",
            user_id=user_id,
            new_status=status.value,
            actor_id=actor_id,
        )
        return await self._publish(event)

    async def _publish(self, event: DomainEvent) -> AccountEventResult:
        warnings = await self.event_publisher.publish([event])
        return AccountEventResult(event=event, warnings=warnings)
