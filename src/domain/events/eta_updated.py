"""
ETA updated domain event.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from src.domain.value_objects import Location

from .base import JobEvent


@dataclass
class EtaUpdated(JobEvent):
    """Event raised when the worker reports an estimated arrival time."""

    event_type = "eta_updated"

    job_id: UUID
    version: int
    household_id: str
    worker_id: str
    worker_name: str
    title: str
    estimated_arrival: datetime
    actor_id: str
    current_location: Optional[Location] = None
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
