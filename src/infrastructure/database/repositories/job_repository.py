"""Job repository implementation."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from src.application.interfaces.repositories import JobRepositoryInterface
from src.config.logging import get_logger
from src.domain.entities import Application, Job
from src.domain.exceptions import DuplicateApplicationError
from src.domain.value_objects import (
    ApplicationStatus,
    Benefits,
    JobStatus,
    Location,
)
from src.infrastructure.database.models import JobApplicationModel, JobModel
from src.infrastructure.database.repositories.dialect import as_utc, insert_for

logger = get_logger(__name__)


class JobRepository(JobRepositoryInterface):
    """Job repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, job: Job) -> Job:
        """Create a new job."""
        job_model = JobModel(
            id=job.id,
            title=job.title,
            service_type=job.service_type,
            description=job.description,
            schedule=job.schedule,
            salary=job.salary,
            pay_frequency=job.pay_frequency,
            household_id=job.household_id,
            household_name=job.household_name,
            household_location=job.household_location,
            benefits=job.benefits.to_dict(),
            status=job.status.value,
            view_count=job.view_count,
            version=job.version,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )

        self.db.add(job_model)
        # Use flush instead of commit to maintain transaction atomicity
        await self.db.flush()

        logger.info("Job created", job_id=str(job.id), household_id=job.household_id)
        return job

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID."""
        stmt = (
            select(JobModel)
            .where(JobModel.id == job_id)
            .options(selectinload(JobModel.applications))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def find(
        self,
        status: Optional[JobStatus] = None,
        service_type: Optional[str] = None,
        household_id: Optional[str] = None,
        worker_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Job]:
        """Find jobs by filters, newest first."""
        stmt = select(JobModel).options(selectinload(JobModel.applications))

        if status:
            stmt = stmt.where(JobModel.status == status.value)
        if service_type:
            stmt = stmt.where(JobModel.service_type == service_type)
        if household_id:
            stmt = stmt.where(JobModel.household_id == household_id)
        if worker_id:
            stmt = stmt.where(JobModel.worker_id == worker_id)

        stmt = (
            stmt.order_by(JobModel.created_at.desc())
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def update_if_status(
        self, job_id: UUID, expected_status: JobStatus, changes: Dict[str, Any]
    ) -> Optional[int]:
        """Apply changes only if the job still has expected_status."""
        stmt = (
            update(JobModel)
            .where(JobModel.id == job_id, JobModel.status == expected_status.value)
            .values(**self._to_columns(changes), version=JobModel.version + 1)
            .returning(JobModel.version)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        new_version = result.scalar_one_or_none()

        if new_version is None:
            logger.warning(
                "Conditional job update did not match",
                job_id=str(job_id),
                expected_status=expected_status.value,
            )
        return new_version

    async def add_application(self, application: Application) -> Optional[Application]:
        """Append an application while the job is open."""
        now = datetime.now(timezone.utc)

        # Guard on status first; the row lock also serializes concurrent applies
        guard = (
            update(JobModel)
            .where(
                JobModel.id == application.job_id,
                JobModel.status == JobStatus.OPEN.value,
            )
            .values(version=JobModel.version + 1, updated_at=now)
            .returning(JobModel.version)
            .execution_options(synchronize_session=False)
        )
        sequence = (await self.db.execute(guard)).scalar_one_or_none()
        if sequence is None:
            return None

        application.sequence = sequence
        stmt = (
            insert_for(self.db, JobApplicationModel)
            .values(
                id=application.id,
                job_id=application.job_id,
                worker_id=application.worker_id,
                worker_name=application.worker_name,
                cover_letter=application.cover_letter,
                proposed_rate=application.proposed_rate,
                status=application.status.value,
                applied_at=application.applied_at,
                sequence=application.sequence,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["job_id", "worker_id"])
            .returning(JobApplicationModel.id)
        )
        inserted = (await self.db.execute(stmt)).scalar_one_or_none()
        if inserted is None:
            raise DuplicateApplicationError(str(application.job_id), application.worker_id)

        logger.info(
            "Application stored",
            job_id=str(application.job_id),
            worker_id=application.worker_id,
            sequence=sequence,
        )
        return application

    async def list_applications(self, job_id: UUID) -> List[Application]:
        """Applications of a job in insertion order."""
        stmt = (
            select(JobApplicationModel)
            .where(JobApplicationModel.job_id == job_id)
            .order_by(JobApplicationModel.sequence)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return [self._application_to_entity(m) for m in result.scalars().all()]

    async def settle_applications(
        self, job_id: UUID, accepted_worker_id: Optional[str] = None
    ) -> int:
        """Accept one worker's application and reject the other pending ones."""
        now = datetime.now(timezone.utc)
        settled = 0

        if accepted_worker_id is not None:
            accepted = await self.db.execute(
                update(JobApplicationModel)
                .where(
                    JobApplicationModel.job_id == job_id,
                    JobApplicationModel.worker_id == accepted_worker_id,
                )
                .values(status=ApplicationStatus.ACCEPTED.value, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            settled += accepted.rowcount

        reject = (
            update(JobApplicationModel)
            .where(
                JobApplicationModel.job_id == job_id,
                JobApplicationModel.status == ApplicationStatus.PENDING.value,
            )
            .values(status=ApplicationStatus.REJECTED.value, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        rejected = await self.db.execute(reject)
        settled += rejected.rowcount

        return settled

    async def increment_view_count(self, job_id: UUID) -> Optional[int]:
        """Bump the view counter without touching status or version."""
        stmt = (
            update(JobModel)
            .where(JobModel.id == job_id)
            .values(view_count=JobModel.view_count + 1)
            .returning(JobModel.view_count)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _to_columns(changes: Dict[str, Any]) -> Dict[str, Any]:
        columns = {}
        for name, value in changes.items():
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, (Location, Benefits)):
                value = value.to_dict()
            columns[name] = value
        return columns

    def _application_to_entity(self, model: JobApplicationModel) -> Application:
        return Application(
            id=model.id,
            job_id=model.job_id,
            worker_id=model.worker_id,
            worker_name=model.worker_name,
            cover_letter=model.cover_letter,
            proposed_rate=model.proposed_rate,
            status=ApplicationStatus(model.status),
            applied_at=as_utc(model.applied_at),
            sequence=model.sequence,
        )

    def _model_to_entity(self, model: JobModel) -> Job:
        """Convert database model to domain entity."""
        return Job(
            id=model.id,
            title=model.title,
            service_type=model.service_type,
            description=model.description,
            schedule=model.schedule,
            salary=model.salary,
            pay_frequency=model.pay_frequency,
            household_id=model.household_id,
            household_name=model.household_name,
            household_location=model.household_location,
            benefits=Benefits.from_dict(model.benefits),
            status=JobStatus(model.status),
            worker_id=model.worker_id,
            worker_name=model.worker_name,
            applicants=[self._application_to_entity(a) for a in model.applications],
            view_count=model.view_count,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
            estimated_arrival=as_utc(model.estimated_arrival),
            current_location=Location.from_dict(model.current_location),
            arrived_at=as_utc(model.arrived_at),
            worker_location=Location.from_dict(model.worker_location),
            started_at=as_utc(model.started_at),
            completed_at=as_utc(model.completed_at),
            cancelled_at=as_utc(model.cancelled_at),
            cancelled_by=model.cancelled_by,
            version=model.version,
        )
