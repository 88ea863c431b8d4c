"""
Job completed domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from .base import JobEvent


@dataclass
class JobCompleted(JobEvent):
    """Event raised when the work is finished."""

    event_type = "job_completed"

    job_id: UUID
    version: int
    household_id: str
    worker_id: str
    title: str
    completed_at: datetime
    actor_id: str
