"""
Work started domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from .base import JobEvent


@dataclass
class WorkStarted(JobEvent):
    """Event raised when the worker begins the job."""

    event_type = "work_started"

    job_id: UUID
    version: int
    household_id: str
    worker_id: str
    title: str
    started_at: datetime
    actor_id: str
