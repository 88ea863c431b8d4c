"""
Integration tests for the SQLAlchemy repositories (SQLite in memory).
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from conftest import HOUSEHOLD_ID, OTHER_WORKER_ID, WORKER_ID, make_job, make_job_request
from src.application.services import (
    ApplicationRegistry,
    ConversationRouter,
    EventPublisher,
    JobLifecycleEngine,
    NotificationDispatcher,
    NotificationInbox,
)
from src.background.workers import create_outbox_worker
from src.domain.entities import Application, Notification
from src.domain.events import JobCancelled
from src.domain.exceptions import ConflictError, DuplicateApplicationError
from src.domain.value_objects import ApplicationStatus, JobStatus, Location
from src.infrastructure.database.repositories import (
    ConversationRepository,
    JobRepository,
    NotificationRepository,
    TransactionalOutbox,
    TransactionService,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def sql_services(db_session):
    transaction_service = TransactionService(db_session)
    job_repository = JobRepository(db_session)
    notification_repository = NotificationRepository(db_session)
    publisher = EventPublisher(
        NotificationDispatcher(notification_repository),
        transaction_service,
        TransactionalOutbox(db_session),
    )
    return {
        "engine": JobLifecycleEngine(job_repository, transaction_service, publisher),
        "registry": ApplicationRegistry(job_repository, transaction_service, publisher),
        "router": ConversationRouter(
            ConversationRepository(db_session), transaction_service, publisher
        ),
        "inbox": NotificationInbox(notification_repository, transaction_service),
        "job_repository": job_repository,
        "notification_repository": notification_repository,
        "publisher": publisher,
    }


class TestJobRepository:
    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session):
        repository = JobRepository(db_session)
        job = make_job(household_name="The Mugishas")

        await repository.create(job)
        await db_session.commit()
        stored = await repository.get_by_id(job.id)

        assert stored.to_dict() == job.to_dict()
        assert stored.created_at.tzinfo is not None
        assert await repository.get_by_id(uuid4()) is None

    @pytest.mark.asyncio
    async def test_update_if_status_is_a_compare_and_set(self, db_session):
        repository = JobRepository(db_session)
        job = make_job()
        await repository.create(job)

        changes = {"status": JobStatus.CANCELLED, "cancelled_by": HOUSEHOLD_ID}
        assert await repository.update_if_status(job.id, JobStatus.OPEN, changes) == 2
        assert await repository.update_if_status(job.id, JobStatus.OPEN, changes) is None

        stored = await repository.get_by_id(job.id)
        assert stored.status == JobStatus.CANCELLED
        assert stored.version == 2

    @pytest.mark.asyncio
    async def test_location_changes_round_trip(self, db_session):
        repository = JobRepository(db_session)
        job = make_job()
        await repository.create(job)
        location = Location(latitude=-1.95, longitude=30.06, address="Kigali")

        await repository.update_if_status(
            job.id,
            JobStatus.OPEN,
            {"status": JobStatus.ASSIGNED, "worker_id": WORKER_ID, "current_location": location},
        )

        assert (await repository.get_by_id(job.id)).current_location == location

    @pytest.mark.asyncio
    async def test_unique_application_per_worker(self, db_session):
        repository = JobRepository(db_session)
        job = make_job()
        await repository.create(job)

        first = await repository.add_application(
            Application(job_id=job.id, worker_id=WORKER_ID, worker_name="Alice")
        )
        assert first.sequence == 2

        with pytest.raises(DuplicateApplicationError):
            await repository.add_application(
                Application(job_id=job.id, worker_id=WORKER_ID, worker_name="Alice")
            )

    @pytest.mark.asyncio
    async def test_find_filters(self, db_session):
        repository = JobRepository(db_session)
        await repository.create(make_job(service_type="cleaning"))
        await repository.create(make_job(service_type="gardening"))
        await repository.create(make_job(service_type="cleaning", household_id="household-2"))

        assert len(await repository.find(service_type="cleaning")) == 2
        assert len(await repository.find(household_id="household-2")) == 1
        assert len(await repository.find(status=JobStatus.OPEN, limit=2)) == 2
        assert await repository.find(worker_id=WORKER_ID) == []


class TestNotificationRepository:
    @pytest.mark.asyncio
    async def test_insert_if_absent_deduplicates(self, db_session):
        repository = NotificationRepository(db_session)
        notification_id = Notification.deterministic_id("payment_completed", "pay-1", WORKER_ID)

        def build():
            return Notification(
                id=notification_id,
                recipient_id=WORKER_ID,
                title="Payment Received",
                description="You have received a payment",
                metadata={"payment_id": "pay-1"},
            )

        assert await repository.insert_if_absent(build()) is True
        assert await repository.insert_if_absent(build()) is False
        assert await repository.count_unread(WORKER_ID) == 1

        stored = await repository.get_by_id(notification_id)
        assert stored.metadata == {"payment_id": "pay-1"}


class TestServicesOverSql:
    """The services wired to the SQL repositories on one session."""

    @pytest.mark.asyncio
    async def test_job_lifecycle(self, sql_services):
        engine = sql_services["engine"]
        registry = sql_services["registry"]
        notification_repository = sql_services["notification_repository"]

        job = (await engine.create_job(make_job_request(), actor_id=HOUSEHOLD_ID)).job
        await registry.apply(job.id, WORKER_ID, "Alice")
        await registry.apply(job.id, OTHER_WORKER_ID, "Bob")

        await engine.assign_worker(job.id, WORKER_ID, None, actor_id=HOUSEHOLD_ID)
        await engine.update_eta(
            job.id, datetime.now(timezone.utc) + timedelta(minutes=15), None, actor_id=WORKER_ID
        )
        await engine.confirm_arrival(job.id, None, actor_id=WORKER_ID)
        await engine.start_work(job.id, actor_id=WORKER_ID)
        result = await engine.complete_job(job.id, actor_id=WORKER_ID)

        assert result.job.status == JobStatus.COMPLETED
        assert result.job.version == 8

        stored = await engine.get_job(job.id, count_view=True)
        assert stored.status == JobStatus.COMPLETED
        assert stored.worker_id == WORKER_ID
        assert stored.view_count == 1
        assert [a.status for a in stored.applicants] == [
            ApplicationStatus.ACCEPTED,
            ApplicationStatus.REJECTED,
        ]
        titles = sorted(
            n.title for n in await notification_repository.list_for_recipient(HOUSEHOLD_ID)
        )
        assert titles == [
            "New Job Application",
            "New Job Application",
            "Worker ETA Updated",
            "Worker Has Arrived",
        ]

    @pytest.mark.asyncio
    async def test_stale_transition_conflicts(self, sql_services):
        engine = sql_services["engine"]
        job_repository = sql_services["job_repository"]
        job = (await engine.create_job(make_job_request(), actor_id=HOUSEHOLD_ID)).job

        # Another writer cancels after our read
        stale = await job_repository.get_by_id(job.id)
        await engine.cancel_job(job.id, actor_id=HOUSEHOLD_ID)
        job_repository.get_by_id = AsyncMock(return_value=stale)

        with pytest.raises(ConflictError):
            await engine.cancel_job(job.id, actor_id=HOUSEHOLD_ID)

    @pytest.mark.asyncio
    async def test_conversation_and_inbox(self, sql_services):
        router = sql_services["router"]
        inbox = sql_services["inbox"]

        await router.send_message(HOUSEHOLD_ID, WORKER_ID, "Hello")
        reply = await router.send_message(WORKER_ID, HOUSEHOLD_ID, "Hi, I am on my way")
        conversation_id = reply.message.conversation_id

        messages = await router.list_messages(conversation_id)
        assert [m.content for m in messages] == ["Hello", "Hi, I am on my way"]

        [conversation] = await router.list_conversations(HOUSEHOLD_ID)
        assert conversation.last_message == "Hi, I am on my way"
        assert conversation.unread_count == 1
        assert await router.mark_conversation_read(conversation_id, HOUSEHOLD_ID) == 1

        page = await inbox.list_notifications(WORKER_ID)
        assert page.unread_count == 1
        assert await inbox.mark_all_read(WORKER_ID) == 1

    @pytest.mark.asyncio
    async def test_outbox_redelivery(self, db_session, sql_services):
        notification_repository = sql_services["notification_repository"]
        event = JobCancelled(
            job_id=uuid4(),
            version=3,
            household_id=HOUSEHOLD_ID,
            title="House cleaning help",
            previous_status="assigned",
            cancelled_at=datetime.now(timezone.utc),
            actor_id=HOUSEHOLD_ID,
            worker_id=WORKER_ID,
            worker_name="Alice",
        )
        outbox = TransactionalOutbox(db_session)
        await outbox.create_event(event)
        await db_session.commit()

        worker = create_outbox_worker(session=db_session)
        assert await worker.process_pending_events() == 1

        assert await notification_repository.count_unread(WORKER_ID) == 1
        assert await outbox.get_pending_events() == []


