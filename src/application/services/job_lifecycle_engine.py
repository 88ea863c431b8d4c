"""
Job Lifecycle Engine: the job state machine.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, List, Optional, Union
from uuid import UUID

from src.application.interfaces.repositories import JobRepositoryInterface
from src.application.interfaces.services import TransactionServiceInterface
from src.application.services.event_publisher import EventPublisher
from src.config.logging import get_logger
from src.config.settings import settings
from src.domain.entities import Job
from src.domain.events import (
    ArrivalConfirmed,
    DomainEvent,
    EtaUpdated,
    JobAssigned,
    JobCancelled,
    JobCompleted,
    JobCreated,
    WorkStarted,
)
from src.domain.exceptions import (
    ConflictError,
    DispatchFailure,
    LifecycleError,
    NotFoundError,
    ValidationError,
)
from src.domain.value_objects import Benefits, JobStatus, Location
from src.infrastructure.monitoring.metrics import (
    record_job_transition,
    record_lifecycle_rejection,
)

logger = get_logger(__name__)


@dataclass
class CreateJobRequest:
    """Request for creating a job."""

    title: str
    service_type: str
    description: str
    schedule: str
    salary: float
    pay_frequency: str
    household_id: str
    household_name: Optional[str] = None
    household_location: Optional[str] = None
    benefits: Optional[Benefits] = None


@dataclass
class LifecycleResult:
    """Committed job, the events it produced and any dispatch warnings."""

    job: Job
    events: List[DomainEvent]
    warnings: List[DispatchFailure] = field(default_factory=list)


def require_actor(actor_id: Optional[str]) -> str:
    if not actor_id or not actor_id.strip():
        raise ValidationError("Actor id is required")
    return actor_id


def parse_eta(value: Union[str, datetime, None]) -> datetime:
    """Parse an ETA into an aware UTC datetime. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        eta = value
    elif isinstance(value, str) and value.strip():
        try:
            eta = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(f"Invalid ETA timestamp: {value!r}") from None
    else:
        raise ValidationError("ETA is required")

    if eta.tzinfo is None:
        eta = eta.replace(tzinfo=timezone.utc)
    return eta.astimezone(timezone.utc)


class JobLifecycleEngine:
    """Validates and applies job transitions, one event per committed write.

    Each write is conditioned on the status read just before it. A writer
    that loses the race gets a ConflictError and may reload and retry.
    Notifications are dispatched after the commit; their failures come
    back as warnings and never undo the transition.
    """

    def __init__(
        self,
        job_repository: JobRepositoryInterface,
        transaction_service: TransactionServiceInterface,
        event_publisher: EventPublisher,
        eta_clock_skew_seconds: Optional[int] = None,
    ):
        self.job_repository = job_repository
        self.transaction_service = transaction_service
        self.event_publisher = event_publisher
        self.eta_clock_skew = timedelta(
            seconds=eta_clock_skew_seconds
            if eta_clock_skew_seconds is not None
            else settings.ETA_CLOCK_SKEW_SECONDS
        )

    async def create_job(self, request: CreateJobRequest, actor_id: str) -> LifecycleResult:
        """Post a new open job."""
        try:
            require_actor(actor_id)
            job = Job(
                title=request.title,
                service_type=request.service_type,
                description=request.description,
                schedule=request.schedule,
                salary=request.salary,
                pay_frequency=request.pay_frequency,
                household_id=request.household_id,
                household_name=request.household_name,
                household_location=request.household_location,
                benefits=request.benefits or Benefits(),
            )
        except ValidationError as e:
            record_lifecycle_rejection("create_job", type(e).__name__)
            raise

        await self.transaction_service.execute_in_transaction(
            lambda: self.job_repository.create(job)
        )

        event = JobCreated(
            job_id=job.id,
            version=job.version,
            household_id=job.household_id,
            title=job.title,
            service_type=job.service_type,
            actor_id=actor_id,
        )
        return await self._finish("create_job", job, event)

    async def assign_worker(
        self,
        job_id: UUID,
        worker_id: str,
        worker_name: Optional[str],
        actor_id: str,
    ) -> LifecycleResult:
        """Pick one of the applicants; the other pending applications are rejected."""

        async def settle(job: Job) -> None:
            await self.job_repository.settle_applications(job.id, worker_id)

        return await self._transition(
            "assign_worker",
            job_id,
            actor_id,
            change=lambda job: job.assign_worker(worker_id, worker_name),
            event=lambda job: JobAssigned(
                job_id=job.id,
                version=job.version,
                household_id=job.household_id,
                worker_id=job.worker_id,
                worker_name=job.worker_name,
                title=job.title,
                actor_id=actor_id,
            ),
            after_write=settle,
        )

    async def update_eta(
        self,
        job_id: UUID,
        eta: Union[str, datetime],
        location: Optional[Location],
        actor_id: str,
    ) -> LifecycleResult:
        """Record the worker's estimated arrival. Rejected once the worker arrived."""
        try:
            estimated_arrival = parse_eta(eta)
            if estimated_arrival < datetime.now(timezone.utc) - self.eta_clock_skew:
                raise ValidationError("ETA cannot be in the past")
        except ValidationError as e:
            record_lifecycle_rejection("update_eta", type(e).__name__)
            raise

        return await self._transition(
            "update_eta",
            job_id,
            actor_id,
            change=lambda job: job.update_eta(estimated_arrival, location),
            event=lambda job: EtaUpdated(
                job_id=job.id,
                version=job.version,
                household_id=job.household_id,
                worker_id=job.worker_id,
                worker_name=job.worker_name,
                title=job.title,
                estimated_arrival=estimated_arrival,
                current_location=location,
                actor_id=actor_id,
            ),
        )

    async def confirm_arrival(
        self, job_id: UUID, location: Optional[Location], actor_id: str
    ) -> LifecycleResult:
        """Record that the worker reached the household."""
        return await self._transition(
            "confirm_arrival",
            job_id,
            actor_id,
            change=lambda job: job.confirm_arrival(location),
            event=lambda job: ArrivalConfirmed(
                job_id=job.id,
                version=job.version,
                household_id=job.household_id,
                worker_id=job.worker_id,
                worker_name=job.worker_name,
                title=job.title,
                arrived_at=job.arrived_at,
                worker_location=location,
                actor_id=actor_id,
            ),
        )

    async def start_work(self, job_id: UUID, actor_id: str) -> LifecycleResult:
        return await self._transition(
            "start_work",
            job_id,
            actor_id,
            change=lambda job: job.start_work(),
            event=lambda job: WorkStarted(
                job_id=job.id,
                version=job.version,
                household_id=job.household_id,
                worker_id=job.worker_id,
                title=job.title,
                started_at=job.started_at,
                actor_id=actor_id,
            ),
        )

    async def complete_job(self, job_id: UUID, actor_id: str) -> LifecycleResult:
        return await self._transition(
            "complete_job",
            job_id,
            actor_id,
            change=lambda job: job.complete(),
            event=lambda job: JobCompleted(
                job_id=job.id,
                version=job.version,
                household_id=job.household_id,
                worker_id=job.worker_id,
                title=job.title,
                completed_at=job.completed_at,
                actor_id=actor_id,
            ),
        )

    async def cancel_job(
        self, job_id: UUID, actor_id: str, reason: Optional[str] = None
    ) -> LifecycleResult:
        """Cancel from any non-terminal status, releasing the worker."""
        before = {}

        def change(job: Job):
            before.update(
                status=job.status.value,
                worker_id=job.worker_id,
                worker_name=job.worker_name,
            )
            return job.cancel(actor_id)

        async def settle(job: Job) -> None:
            await self.job_repository.settle_applications(job.id, None)

        return await self._transition(
            "cancel_job",
            job_id,
            actor_id,
            change=change,
            event=lambda job: JobCancelled(
                job_id=job.id,
                version=job.version,
                household_id=job.household_id,
                title=job.title,
                previous_status=before["status"],
                cancelled_at=job.cancelled_at,
                actor_id=actor_id,
                worker_id=before["worker_id"],
                worker_name=before["worker_name"],
                reason=reason,
            ),
            after_write=settle,
        )

    async def increment_view_count(self, job_id: UUID) -> int:
        """Count a view. Legal in any status; emits nothing."""
        view_count = await self.transaction_service.execute_in_transaction(
            lambda: self.job_repository.increment_view_count(job_id)
        )
        if view_count is None:
            raise NotFoundError("Job", str(job_id))
        return view_count

    async def get_job(self, job_id: UUID, count_view: bool = False) -> Job:
        if count_view:
            await self.increment_view_count(job_id)
        return await self._load(job_id)

    async def list_jobs(
        self,
        status: Optional[JobStatus] = None,
        service_type: Optional[str] = None,
        household_id: Optional[str] = None,
        worker_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Job]:
        if limit < 1:
            raise ValidationError("Limit must be at least 1")
        if offset < 0:
            raise ValidationError("Offset cannot be negative")

        return await self.job_repository.find(
            status=status,
            service_type=service_type,
            household_id=household_id,
            worker_id=worker_id,
            limit=min(limit, settings.JOB_LIST_MAX_LIMIT),
            offset=offset,
        )

    async def _load(self, job_id: UUID) -> Job:
        job = await self.job_repository.get_by_id(job_id)
        if job is None:
            raise NotFoundError("Job", str(job_id))
        return job

    async def _transition(
        self,
        operation: str,
        job_id: UUID,
        actor_id: str,
        change: Callable[[Job], dict],
        event: Callable[[Job], DomainEvent],
        after_write: Optional[Callable[[Job], Awaitable[None]]] = None,
    ) -> LifecycleResult:
        try:
            require_actor(actor_id)
            job = await self._load(job_id)
            expected_status = job.status
            changes = change(job)
        except (LifecycleError, ValidationError) as e:
            record_lifecycle_rejection(operation, type(e).__name__)
            raise

        async def write() -> int:
            version = await self.job_repository.update_if_status(
                job.id, expected_status, changes
            )
            if version is None:
                raise ConflictError(str(job.id), expected_status.value)
            if after_write is not None:
                await after_write(job)
            return version

        try:
            job.version = await self.transaction_service.execute_in_transaction(write)
        except ConflictError as e:
            record_lifecycle_rejection(operation, type(e).__name__)
            logger.info(
                "Job transition lost a concurrent write",
                operation=operation,
                job_id=str(job.id),
                expected_status=expected_status.value,
            )
            raise

        return await self._finish(operation, job, event(job))

    async def _finish(self, operation: str, job: Job, event: DomainEvent) -> LifecycleResult:
        record_job_transition(operation, job.status.value)
        logger.info(
            "Job transition committed",
            operation=operation,
            job_id=str(job.id),
            status=job.status.value,
            version=job.version,
            actor_id=getattr(event, "actor_id", None),
        )

        warnings = await self.event_publisher.publish([event])
        return LifecycleResult(job=job, events=[event], warnings=warnings)
