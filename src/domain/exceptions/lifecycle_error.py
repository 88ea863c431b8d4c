"""
Job lifecycle domain exceptions.
"""

from typing import Iterable, Optional


class LifecycleError(Exception):
    """Base exception for job lifecycle errors."""

    retriable = False


class InvalidTransitionError(LifecycleError):
    """Raised when a business rule forbids the requested change."""

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        required_statuses: Optional[Iterable[str]] = None,
    ):
        self.current_status = current_status
        self.required_statuses = list(required_statuses or [])
        super().__init__(message)

    @classmethod
    def for_status(
        cls, operation: str, current_status: str, required_statuses: Iterable[str]
    ) -> "InvalidTransitionError":
        """Build the standard 'cannot X while status is Y' error."""
        required = sorted(required_statuses)
        return cls(
            f"Cannot {operation} while job status is '{current_status}' "
            f"(requires: {', '.join(required)})",
            current_status=current_status,
            required_statuses=required,
        )


class ApplicationsClosedError(InvalidTransitionError):
    """Raised when applying to a job that left the open state."""

    def __init__(self, job_id: str, current_status: str):
        self.job_id = job_id
        super().__init__(
            "Job is no longer accepting applications",
            current_status=current_status,
            required_statuses=["open"],
        )


class DuplicateApplicationError(InvalidTransitionError):
    """Raised when a worker applies twice to the same job."""

    def __init__(self, job_id: str, worker_id: str):
        self.job_id = job_id
        self.worker_id = worker_id
        super().__init__("You have already applied for this job")


class NotFoundError(LifecycleError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(LifecycleError):
    """Raised when a conditional write lost a race. Re-read and retry."""

    retriable = True

    def __init__(self, job_id: str, expected_status: str):
        self.job_id = job_id
        self.expected_status = expected_status
        super().__init__(
            f"Job {job_id} changed concurrently (expected status "
            f"'{expected_status}'); reload the job and try again"
        )
