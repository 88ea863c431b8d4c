"""
Job assigned domain event.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from .base import JobEvent


@dataclass
class JobAssigned(JobEvent):
    """Event raised when a household picks a worker."""

    event_type = "job_assigned"

    job_id: UUID
    version: int
    household_id: str
    worker_id: str
    worker_name: str
    title: str
    actor_id: str
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
