"""Job domain entity."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID, uuid4

from src.domain.entities.application import Application
from src.domain.exceptions import (
    ApplicationsClosedError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from src.domain.value_objects import ApplicationStatus, Benefits, JobStatus, Location

MIN_TITLE_LENGTH = 5
MIN_DESCRIPTION_LENGTH = 20


@dataclass
class Job:
    """Job posting created by a household and worked by one worker.

    Transition methods validate against the current status, update the
    entity in place and return the column changes so the repository can
    write them as a single status-guarded update.
    """

    title: str
    service_type: str
    description: str
    schedule: str
    salary: float
    pay_frequency: str
    household_id: str
    household_name: Optional[str] = None
    household_location: Optional[str] = None
    benefits: Benefits = field(default_factory=Benefits)
    id: UUID = field(default_factory=uuid4)
    status: JobStatus = JobStatus.OPEN
    worker_id: Optional[str] = None
    worker_name: Optional[str] = None
    applicants: List[Application] = field(default_factory=list)
    view_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Worker progress
    estimated_arrival: Optional[datetime] = None
    current_location: Optional[Location] = None
    arrived_at: Optional[datetime] = None
    worker_location: Optional[Location] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    cancelled_at: Optional[datetime] = None
    cancelled_by: Optional[str] = None
    version: int = 1

    def __post_init__(self):
        """Validate job data."""
        if not self.title or len(self.title.strip()) < MIN_TITLE_LENGTH:
            raise ValidationError(
                f"Title must be at least {MIN_TITLE_LENGTH} characters"
            )
        if not self.description or len(self.description.strip()) < MIN_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
            )
        if not self.schedule or not self.schedule.strip():
            raise ValidationError("Schedule is required")
        if self.salary is None or not math.isfinite(self.salary) or self.salary <= 0:
            raise ValidationError("Salary must be greater than zero")
        if not self.service_type or not self.service_type.strip():
            raise ValidationError("Service type is required")
        if not self.pay_frequency or not self.pay_frequency.strip():
            raise ValidationError("Pay frequency is required")
        if not self.household_id or not self.household_id.strip():
            raise ValidationError("Household id is required")

        # Set timestamps if not provided
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)
        if not self.updated_at:
            self.updated_at = self.created_at

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal()

    def find_application(self, worker_id: str) -> Optional[Application]:
        """Application submitted by worker_id, if any."""
        for application in self.applicants:
            if application.worker_id == worker_id:
                return application
        return None

    def has_applied(self, worker_id: str) -> bool:
        return self.find_application(worker_id) is not None

    def ensure_accepts_applications(self) -> None:
        """Raise unless workers may still apply."""
        if not self.status.accepts_applications():
            raise ApplicationsClosedError(str(self.id), self.status.value)

    def assign_worker(
        self, worker_id: str, worker_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """Choose one of the applicants to do the job.

        The worker name defaults to the one given on the application.
        """
        self._require("assign a worker", JobStatus.OPEN)
        chosen = self.find_application(worker_id)
        if chosen is None:
            raise NotFoundError("Application from worker", worker_id)

        for application in self.applicants:
            if application.worker_id == worker_id:
                application.status = ApplicationStatus.ACCEPTED
            elif application.is_pending:
                application.status = ApplicationStatus.REJECTED

        return self._apply(
            status=JobStatus.ASSIGNED,
            worker_id=worker_id,
            worker_name=worker_name or chosen.worker_name,
        )

    def update_eta(
        self, estimated_arrival: datetime, current_location: Optional[Location] = None
    ) -> Dict[str, Any]:
        """Record that the worker is on the way."""
        self._require("update the ETA", JobStatus.ASSIGNED, JobStatus.ON_WAY)
        return self._apply(
            status=JobStatus.ON_WAY,
            estimated_arrival=estimated_arrival,
            current_location=current_location,
        )

    def confirm_arrival(self, worker_location: Optional[Location] = None) -> Dict[str, Any]:
        """Record that the worker reached the household."""
        self._require("confirm arrival", JobStatus.ASSIGNED, JobStatus.ON_WAY)
        now = datetime.now(timezone.utc)
        return self._apply(
            status=JobStatus.ARRIVED,
            arrived_at=now,
            worker_location=worker_location,
            updated_at=now,
        )

    def start_work(self) -> Dict[str, Any]:
        self._require("start work", JobStatus.ARRIVED)
        now = datetime.now(timezone.utc)
        return self._apply(status=JobStatus.IN_PROGRESS, started_at=now, updated_at=now)

    def complete(self) -> Dict[str, Any]:
        self._require("complete the job", JobStatus.IN_PROGRESS)
        now = datetime.now(timezone.utc)
        return self._apply(status=JobStatus.COMPLETED, completed_at=now, updated_at=now)

    def cancel(self, actor_id: str) -> Dict[str, Any]:
        """Cancel from any non-terminal status, releasing the worker."""
        if self.is_terminal:
            raise InvalidTransitionError.for_status(
                "cancel the job",
                self.status.value,
                [s.value for s in JobStatus if not s.is_terminal()],
            )

        for application in self.applicants:
            if application.is_pending:
                application.status = ApplicationStatus.REJECTED

        now = datetime.now(timezone.utc)
        return self._apply(
            status=JobStatus.CANCELLED,
            worker_id=None,
            worker_name=None,
            cancelled_at=now,
            cancelled_by=actor_id,
            updated_at=now,
        )

    def _require(self, operation: str, *allowed: JobStatus) -> None:
        if self.status not in allowed:
            raise InvalidTransitionError.for_status(
                operation, self.status.value, [s.value for s in allowed]
            )

    def _apply(self, **changes: Any) -> Dict[str, Any]:
        target = changes["status"]
        if not self.status.can_transition_to(target):
            raise InvalidTransitionError.for_status(
                f"move to '{target.value}'", self.status.value, _sources_of(target)
            )

        changes.setdefault("updated_at", datetime.now(timezone.utc))
        for name, value in changes.items():
            setattr(self, name, value)
        return changes

    def to_dict(self) -> dict:
        """Convert job to dictionary."""
        return {
            "id": str(self.id),
            "title": self.title,
            "service_type": self.service_type,
            "description": self.description,
            "schedule": self.schedule,
            "salary": self.salary,
            "pay_frequency": self.pay_frequency,
            "household_id": self.household_id,
            "household_name": self.household_name,
            "household_location": self.household_location,
            "benefits": self.benefits.to_dict(),
            "status": self.status.value,
            "worker_id": self.worker_id,
            "worker_name": self.worker_name,
            "applicants": [a.to_dict() for a in self.applicants],
            "view_count": self.view_count,
            "version": self.version,
        }


def _sources_of(target: JobStatus) -> Iterable[str]:
    return [s.value for s in JobStatus if s.can_transition_to(target)]
