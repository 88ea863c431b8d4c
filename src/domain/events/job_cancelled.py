"""
Job cancelled domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from .base import JobEvent


@dataclass
class JobCancelled(JobEvent):
    """Event raised when a job is cancelled.

    ``worker_id`` is the worker assigned before cancellation, if any.
    """

    event_type = "job_cancelled"

    job_id: UUID
    version: int
    household_id: str
    title: str
    previous_status: str
    cancelled_at: datetime
    actor_id: str
    worker_id: Optional[str] = None
    worker_name: Optional[str] = None
    reason: Optional[str] = None

    @property
    def parties(self) -> List[str]:
        """Household and pre-cancel worker, without duplicates."""
        parties = [self.household_id]
        if self.worker_id and self.worker_id != self.household_id:
            parties.append(self.worker_id)
        return parties
