"""
Unit tests for NotificationDispatcher.
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from conftest import HOUSEHOLD_ID, WORKER_ID
from src.domain.events import (
    ArrivalConfirmed,
    EtaUpdated,
    JobAssigned,
    JobCancelled,
    MessageSent,
    PaymentCompleted,
    UserStatusChanged,
)
from src.domain.value_objects import MessageType, NotificationType, UserStatus


def _cancelled(actor_id, worker_id=WORKER_ID, reason=None):
    return JobCancelled(
        job_id=uuid4(),
        version=4,
        household_id=HOUSEHOLD_ID,
        title="House cleaning help",
        previous_status="assigned",
        cancelled_at=datetime.now(timezone.utc),
        actor_id=actor_id,
        worker_id=worker_id,
        worker_name="Alice",
        reason=reason,
    )


def _message(content, message_type=MessageType.TEXT):
    return MessageSent(
        message_id=uuid4(),
        conversation_id=f"{HOUSEHOLD_ID}_{WORKER_ID}",
        sender_id=HOUSEHOLD_ID,
        receiver_id=WORKER_ID,
        content=content,
        sent_at=datetime.now(timezone.utc),
        message_type=message_type,
    )


class TestBuildNotifications:
    """Recipients and wording per event type."""

    def test_eta_updated(self, dispatcher):
        event = EtaUpdated(
            job_id=uuid4(),
            version=3,
            household_id=HOUSEHOLD_ID,
            worker_id=WORKER_ID,
            worker_name="Alice",
            title="House cleaning help",
            estimated_arrival=datetime(2030, 1, 1, 14, 5, tzinfo=timezone.utc),
            actor_id=WORKER_ID,
        )

        [notification] = dispatcher.build_notifications(event)

        assert notification.recipient_id == HOUSEHOLD_ID
        assert notification.title == "Worker ETA Updated"
        assert notification.description == "Alice will arrive at approximately 14:05."

    def test_arrival_confirmed(self, dispatcher):
        event = ArrivalConfirmed(
            job_id=uuid4(),
            version=3,
            household_id=HOUSEHOLD_ID,
            worker_id=WORKER_ID,
            worker_name="Alice",
            title="House cleaning help",
            arrived_at=datetime.now(timezone.utc),
            actor_id=WORKER_ID,
        )

        [notification] = dispatcher.build_notifications(event)

        assert notification.recipient_id == HOUSEHOLD_ID
        assert notification.description == (
            "Alice has arrived for your House cleaning help appointment."
        )

    def test_cancel_by_household_notifies_worker_only(self, dispatcher):
        notifications = dispatcher.build_notifications(
            _cancelled(HOUSEHOLD_ID, reason="Plans changed")
        )

        assert [n.recipient_id for n in notifications] == [WORKER_ID]
        assert notifications[0].type == NotificationType.WARNING
        assert notifications[0].description == (
            'The job "House cleaning help" has been cancelled. Reason: Plans changed'
        )

    def test_cancel_by_third_party_notifies_both(self, dispatcher):
        notifications = dispatcher.build_notifications(_cancelled("admin-1"))

        assert sorted(n.recipient_id for n in notifications) == [HOUSEHOLD_ID, WORKER_ID]

    def test_cancel_of_open_job_by_household_notifies_nobody(self, dispatcher):
        assert dispatcher.build_notifications(_cancelled(HOUSEHOLD_ID, worker_id=None)) == []

    def test_message_preview_is_truncated(self, dispatcher):
        [notification] = dispatcher.build_notifications(_message("a" * 80))

        assert notification.recipient_id == WORKER_ID
        assert notification.description == "You have a new message: " + "a" * 50 + "..."

    def test_image_message_preview(self, dispatcher):
        [notification] = dispatcher.build_notifications(
            _message("https://cdn/p.png", MessageType.IMAGE)
        )

        assert notification.description == "You have a new message: [image]"

    def test_payment_completed(self, dispatcher):
        event = PaymentCompleted(
            payment_id="pay-1", worker_id=WORKER_ID, amount=50000, household_name="The Mugishas"
        )

        [notification] = dispatcher.build_notifications(event)

        assert notification.type == NotificationType.PAYMENT
        assert notification.description == (
            "You have received a payment of 50000 RWF from The Mugishas."
        )

    def test_user_status_changed(self, dispatcher):
        active = UserStatusChanged(user_id="user-9", new_status=UserStatus.ACTIVE, actor_id="admin")
        suspended = UserStatusChanged(
            user_id="user-9", new_status=UserStatus.SUSPENDED, actor_id="admin"
        )

        [notification] = dispatcher.build_notifications(active)
        assert notification.description == "Your account status has been changed to: active"
        assert dispatcher.build_notifications(suspended) == []

    def test_events_without_counterparty(self, dispatcher):
        event = JobAssigned(
            job_id=uuid4(),
            version=3,
            household_id=HOUSEHOLD_ID,
            worker_id=WORKER_ID,
            worker_name="Alice",
            title="House cleaning help",
            actor_id=HOUSEHOLD_ID,
        )
        assert dispatcher.build_notifications(event) == []


class TestDispatch:
    @pytest.mark.asyncio
    async def test_dispatch_is_idempotent(self, dispatcher, notification_repository):
        event = _cancelled("admin-1")

        first = await dispatcher.dispatch(event)
        second = await dispatcher.dispatch(event)

        assert len(first.created) == 2
        assert second.created == []
        assert len(second.duplicates) == 2
        assert sorted(second.recipients) == [HOUSEHOLD_ID, WORKER_ID]
        assert await notification_repository.count_unread(HOUSEHOLD_ID) == 1
        assert await notification_repository.count_unread(WORKER_ID) == 1
