"""
Unit tests for JobLifecycleEngine.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from conftest import HOUSEHOLD_ID, OTHER_WORKER_ID, WORKER_ID, make_job, make_job_request
from src.application.services import JobLifecycleEngine
from src.application.services.job_lifecycle_engine import parse_eta
from src.domain.entities import Application
from src.domain.events import (
    ArrivalConfirmed,
    EtaUpdated,
    JobAssigned,
    JobCancelled,
    JobCreated,
)
from src.domain.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from src.domain.value_objects import ApplicationStatus, JobStatus, Location


def _future(minutes=30):
    return datetime.now(timezone.utc) + timedelta(minutes=minutes)


class TestParseEta:
    def test_zulu_suffix(self):
        assert parse_eta("2030-01-01T10:00:00Z") == datetime(
            2030, 1, 1, 10, 0, tzinfo=timezone.utc
        )

    def test_offset_is_normalized_to_utc(self):
        assert parse_eta("2030-01-01T12:00:00+02:00") == datetime(
            2030, 1, 1, 10, 0, tzinfo=timezone.utc
        )

    def test_naive_is_taken_as_utc(self):
        assert parse_eta(datetime(2030, 1, 1, 10, 0)).tzinfo == timezone.utc

    @pytest.mark.parametrize("value", ["", "tomorrow", None])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_eta(value)


class TestJobLifecycleEngine:
    """Test cases for JobLifecycleEngine over the in-memory store."""

    @pytest.mark.asyncio
    async def test_create_job(self, engine, notification_repository):
        result = await engine.create_job(make_job_request(), actor_id=HOUSEHOLD_ID)

        assert result.job.status == JobStatus.OPEN
        assert result.job.applicants == []
        assert result.warnings == []
        assert isinstance(result.events[0], JobCreated)
        # Nobody is told about a new job
        assert await notification_repository.count_unread(HOUSEHOLD_ID) == 0

    @pytest.mark.asyncio
    async def test_create_job_requires_actor(self, engine):
        with pytest.raises(ValidationError, match="Actor id is required"):
            await engine.create_job(make_job_request(), actor_id="")

    @pytest.mark.asyncio
    async def test_create_job_validation(self, engine, job_repository):
        with pytest.raises(ValidationError):
            await engine.create_job(make_job_request(title="Hi"), actor_id=HOUSEHOLD_ID)
        with pytest.raises(ValidationError, match="Salary must be greater than zero"):
            await engine.create_job(make_job_request(salary=float("nan")), actor_id=HOUSEHOLD_ID)

        assert await job_repository.find() == []

    @pytest.mark.asyncio
    async def test_assign_worker(self, engine, registry, create_open_job):
        job = await create_open_job([WORKER_ID, OTHER_WORKER_ID], registry)

        result = await engine.assign_worker(job.id, WORKER_ID, None, actor_id=HOUSEHOLD_ID)

        assert result.job.status == JobStatus.ASSIGNED
        assert result.job.worker_id == WORKER_ID
        assert result.job.worker_name == f"Name of {WORKER_ID}"
        assert isinstance(result.events[0], JobAssigned)
        assert result.events[0].version == result.job.version

        stored = await engine.get_job(job.id)
        assert stored.version == result.job.version
        statuses = {a.worker_id: a.status for a in stored.applicants}
        assert statuses == {
            WORKER_ID: ApplicationStatus.ACCEPTED,
            OTHER_WORKER_ID: ApplicationStatus.REJECTED,
        }

    @pytest.mark.asyncio
    async def test_assign_worker_who_did_not_apply(self, engine, registry, create_open_job):
        job = await create_open_job([WORKER_ID], registry)

        with pytest.raises(NotFoundError):
            await engine.assign_worker(job.id, "stranger", "Stranger", actor_id=HOUSEHOLD_ID)

    @pytest.mark.asyncio
    async def test_update_eta_and_revision(self, engine, registry, create_open_job):
        job = await create_open_job([WORKER_ID], registry)
        await engine.assign_worker(job.id, WORKER_ID, "Alice", actor_id=HOUSEHOLD_ID)
        location = Location(latitude=-1.95, longitude=30.06)

        first = await engine.update_eta(job.id, _future(30), location, actor_id=WORKER_ID)
        second = await engine.update_eta(job.id, _future(40), None, actor_id=WORKER_ID)

        assert first.job.status == JobStatus.ON_WAY
        assert second.job.status == JobStatus.ON_WAY
        assert second.job.version == first.job.version + 1
        assert isinstance(first.events[0], EtaUpdated)
        assert first.events[0].current_location == location

    @pytest.mark.asyncio
    async def test_update_eta_in_the_past(self, engine, registry, create_open_job):
        job = await create_open_job([WORKER_ID], registry)
        await engine.assign_worker(job.id, WORKER_ID, "Alice", actor_id=HOUSEHOLD_ID)

        with pytest.raises(ValidationError, match="ETA cannot be in the past"):
            await engine.update_eta(job.id, _future(-60), None, actor_id=WORKER_ID)

        assert (await engine.get_job(job.id)).status == JobStatus.ASSIGNED

    @pytest.mark.asyncio
    async def test_eta_within_clock_skew_is_accepted(self, engine, registry, create_open_job):
        job = await create_open_job([WORKER_ID], registry)
        await engine.assign_worker(job.id, WORKER_ID, "Alice", actor_id=HOUSEHOLD_ID)

        eta = datetime.now(timezone.utc) - timedelta(seconds=5)
        result = await engine.update_eta(job.id, eta, None, actor_id=WORKER_ID)

        assert result.job.status == JobStatus.ON_WAY

    @pytest.mark.asyncio
    async def test_late_eta_after_arrival(self, engine, registry, create_open_job):
        job = await create_open_job([WORKER_ID], registry)
        await engine.assign_worker(job.id, WORKER_ID, "Alice", actor_id=HOUSEHOLD_ID)
        arrival = await engine.confirm_arrival(job.id, None, actor_id=WORKER_ID)
        assert isinstance(arrival.events[0], ArrivalConfirmed)

        with pytest.raises(InvalidTransitionError):
            await engine.update_eta(job.id, _future(), None, actor_id=WORKER_ID)

    @pytest.mark.asyncio
    async def test_complete_open_job_leaves_job_unchanged(self, engine, create_open_job):
        job = await create_open_job()

        with pytest.raises(InvalidTransitionError):
            await engine.complete_job(job.id, actor_id=WORKER_ID)

        stored = await engine.get_job(job.id)
        assert stored.to_dict() == job.to_dict()

    @pytest.mark.asyncio
    async def test_work_through_completion(self, engine, registry, create_open_job):
        job = await create_open_job([WORKER_ID], registry)
        await engine.assign_worker(job.id, WORKER_ID, "Alice", actor_id=HOUSEHOLD_ID)
        await engine.confirm_arrival(job.id, None, actor_id=WORKER_ID)
        await engine.start_work(job.id, actor_id=WORKER_ID)

        result = await engine.complete_job(job.id, actor_id=WORKER_ID)

        assert result.job.status == JobStatus.COMPLETED
        assert result.job.worker_id == WORKER_ID

    @pytest.mark.asyncio
    async def test_cancel_assigned_job(self, engine, registry, create_open_job):
        job = await create_open_job([WORKER_ID], registry)
        await engine.assign_worker(job.id, WORKER_ID, "Alice", actor_id=HOUSEHOLD_ID)

        result = await engine.cancel_job(job.id, actor_id=HOUSEHOLD_ID, reason="Plans changed")

        assert result.job.status == JobStatus.CANCELLED
        assert result.job.worker_id is None
        event = result.events[0]
        assert isinstance(event, JobCancelled)
        assert event.previous_status == "assigned"
        assert event.worker_id == WORKER_ID
        assert event.reason == "Plans changed"

    @pytest.mark.asyncio
    async def test_unknown_job(self, engine):
        with pytest.raises(NotFoundError):
            await engine.start_work(uuid4(), actor_id=WORKER_ID)
        with pytest.raises(NotFoundError):
            await engine.increment_view_count(uuid4())

    @pytest.mark.asyncio
    async def test_get_job_counts_views(self, engine, create_open_job):
        job = await create_open_job()

        await engine.get_job(job.id, count_view=True)
        viewed = await engine.get_job(job.id, count_view=True)

        assert viewed.view_count == 2
        # Views are not state changes
        assert viewed.version == job.version

    @pytest.mark.asyncio
    async def test_list_jobs_filters_and_limits(self, engine, create_open_job):
        first = await create_open_job()
        await create_open_job()
        await engine.cancel_job(first.id, actor_id=HOUSEHOLD_ID)

        open_jobs = await engine.list_jobs(status=JobStatus.OPEN)
        assert len(open_jobs) == 1
        assert len(await engine.list_jobs(household_id=HOUSEHOLD_ID, limit=1)) == 1

        with pytest.raises(ValidationError):
            await engine.list_jobs(limit=0)
        with pytest.raises(ValidationError):
            await engine.list_jobs(offset=-1)


class TestJobLifecycleEngineWithMocks:
    """Store interactions checked against a mocked repository."""

    @pytest.fixture
    def mock_publisher(self):
        publisher = AsyncMock()
        publisher.publish = AsyncMock(return_value=[])
        return publisher

    @pytest.fixture
    def mocked_engine(self, mock_job_repository, transaction_service, mock_publisher):
        return JobLifecycleEngine(mock_job_repository, transaction_service, mock_publisher)

    @pytest.fixture
    def assigned_job(self):
        job = make_job()
        job.applicants.append(
            Application(job_id=job.id, worker_id=WORKER_ID, worker_name="Alice")
        )
        job.assign_worker(WORKER_ID)
        job.version = 3
        return job

    @pytest.mark.asyncio
    async def test_lost_race_raises_conflict(
        self, mocked_engine, mock_job_repository, mock_publisher, assigned_job
    ):
        mock_job_repository.get_by_id.return_value = assigned_job
        mock_job_repository.update_if_status.return_value = None

        with pytest.raises(ConflictError) as exc_info:
            await mocked_engine.confirm_arrival(assigned_job.id, None, actor_id=WORKER_ID)

        assert exc_info.value.retriable is True
        mock_job_repository.update_if_status.assert_awaited_once()
        mock_publisher.publish.assert_not_called()

    @pytest.mark.asyncio
    async def test_write_is_guarded_by_the_status_read(
        self, mocked_engine, mock_job_repository, assigned_job
    ):
        mock_job_repository.get_by_id.return_value = assigned_job
        mock_job_repository.update_if_status.return_value = 4

        result = await mocked_engine.confirm_arrival(assigned_job.id, None, actor_id=WORKER_ID)

        job_id, expected_status, changes = mock_job_repository.update_if_status.call_args.args
        assert job_id == assigned_job.id
        assert expected_status == JobStatus.ASSIGNED
        assert changes["status"] == JobStatus.ARRIVED
        assert result.job.version == 4
        assert result.events[0].source_id == f"{assigned_job.id}:v4"

    @pytest.mark.asyncio
    async def test_rejected_transition_writes_nothing(
        self, mocked_engine, mock_job_repository, assigned_job
    ):
        mock_job_repository.get_by_id.return_value = assigned_job

        with pytest.raises(InvalidTransitionError):
            await mocked_engine.complete_job(assigned_job.id, actor_id=WORKER_ID)

        mock_job_repository.update_if_status.assert_not_called()

    @pytest.mark.asyncio
    async def test_dispatch_warnings_are_returned(
        self, mocked_engine, mock_job_repository, mock_publisher, assigned_job
    ):
        warning = object()
        mock_publisher.publish.return_value = [warning]
        mock_job_repository.get_by_id.return_value = assigned_job
        mock_job_repository.update_if_status.return_value = 4

        result = await mocked_engine.confirm_arrival(assigned_job.id, None, actor_id=WORKER_ID)

        assert result.job.status == JobStatus.ARRIVED
        assert result.warnings == [warning]
