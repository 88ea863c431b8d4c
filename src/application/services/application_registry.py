"""
Application Registry: worker applications attached to a job.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from uuid import UUID

from src.application.interfaces.repositories import JobRepositoryInterface
from src.application.interfaces.services import TransactionServiceInterface
from src.application.services.event_publisher import EventPublisher
from src.config.logging import get_logger
from src.domain.entities import Application
from src.domain.events import ApplicationSubmitted, DomainEvent
from src.domain.exceptions import (
    ConflictError,
    DispatchFailure,
    DuplicateApplicationError,
    LifecycleError,
    NotFoundError,
    ValidationError,
)
from src.domain.value_objects import JobStatus
from src.infrastructure.monitoring.metrics import (
    record_application_submitted,
    record_lifecycle_rejection,
)

logger = get_logger(__name__)


@dataclass
class ApplicationResult:
    """Stored application, its event and any dispatch warnings."""

    application: Application
    events: List[DomainEvent]
    warnings: List[DispatchFailure] = field(default_factory=list)


class ApplicationRegistry:
    """Accepts at most one application per worker while a job is open."""

    def __init__(
        self,
        job_repository: JobRepositoryInterface,
        transaction_service: TransactionServiceInterface,
        event_publisher: EventPublisher,
    ):
        self.job_repository = job_repository
        self.transaction_service = transaction_service
        self.event_publisher = event_publisher

    async def apply(
        self,
        job_id: UUID,
        worker_id: str,
        worker_name: str,
        cover_letter: Optional[str] = None,
        proposed_rate: Optional[float] = None,
    ) -> ApplicationResult:
        """Append a pending application and notify the household."""
        try:
            application = Application(
                job_id=job_id,
                worker_id=worker_id,
                worker_name=worker_name,
                cover_letter=cover_letter,
                proposed_rate=proposed_rate,
            )

            job = await self.job_repository.get_by_id(job_id)
            if job is None:
                raise NotFoundError("Job", str(job_id))
            job.ensure_accepts_applications()
            if job.has_applied(worker_id):
                raise DuplicateApplicationError(str(job_id), worker_id)

            stored = await self.transaction_service.execute_in_transaction(
                lambda: self.job_repository.add_application(application)
            )
            if stored is None:
                raise ConflictError(str(job_id), JobStatus.OPEN.value)

        except (LifecycleError, ValidationError) as e:
            record_lifecycle_rejection("apply", type(e).__name__)
            logger.info(
                "Application rejected",
                job_id=str(job_id),
                worker_id=worker_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise

        record_application_submitted()
        logger.info(
            "Application submitted",
            job_id=str(job_id),
            worker_id=worker_id,
            application_id=str(stored.id),
        )

        event = ApplicationSubmitted(
            job_id=job.id,
            application_id=stored.id,
            household_id=job.household_id,
            worker_id=stored.worker_id,
            worker_name=stored.worker_name,
            title=job.title,
            applied_at=stored.applied_at,
            proposed_rate=stored.proposed_rate,
        )
        warnings = await self.event_publisher.publish([event])
        return ApplicationResult(application=stored, events=[event], warnings=warnings)

    async def list_applications(self, job_id: UUID) -> List[Application]:
        """Applications in the order they were submitted."""
        job = await self.job_repository.get_by_id(job_id)
        if job is None:
            raise NotFoundError("Job", str(job_id))
        return await self.job_repository.list_applications(job_id)
