"""
Job created domain event.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from .base import JobEvent


@dataclass
class JobCreated(JobEvent):
    """Event raised when a household posts a job."""

    event_type = "job_created"

    job_id: UUID
    version: int
    household_id: str
    title: str
    service_type: str
    actor_id: str
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
