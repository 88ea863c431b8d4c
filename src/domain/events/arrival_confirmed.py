"""
Arrival confirmed domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.value_objects import Location

from .base import JobEvent


@dataclass
class ArrivalConfirmed(JobEvent):
    """Event raised when the worker reaches the household."""

    event_type = "arrival_confirmed"

    job_id: UUID
    version: int
    household_id: str
    worker_id: str
    worker_name: str
    title: str
    arrived_at: datetime
    actor_id: str
    worker_location: Optional[Location] = None
