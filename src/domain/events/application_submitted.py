"""
Application submitted domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from .base import DomainEvent


@dataclass
class ApplicationSubmitted(DomainEvent):
    """Event raised when a worker applies for an open job."""

    event_type = "application_submitted"

    job_id: UUID
    application_id: UUID
    household_id: str
    worker_id: str
    worker_name: str
    title: str
    applied_at: datetime
    proposed_rate: Optional[float] = None

    @property
    def source_id(self) -> str:
        # A worker applies at most once per job
        return f"{self.job_id}:{self.worker_id}"

    @property
    def aggregate_id(self) -> str:
        return str(self.job_id)
