"""Application domain entity."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from src.domain.exceptions import ValidationError
from src.domain.value_objects import ApplicationStatus


@dataclass
class Application:
    """A worker's bid to perform an open job."""

    job_id: UUID
    worker_id: str
    worker_name: str
    cover_letter: Optional[str] = None
    proposed_rate: Optional[float] = None
    id: UUID = field(default_factory=uuid4)
    status: ApplicationStatus = ApplicationStatus.PENDING
    applied_at: Optional[datetime] = None
    # Position among the job's applicants, assigned by the store
    sequence: int = 0

    def __post_init__(self):
        """Validate application data."""
        if not self.worker_id or not self.worker_id.strip():
            raise ValidationError("Worker id is required")
        if not self.worker_name or not self.worker_name.strip():
            raise ValidationError("Worker name is required")
        if self.proposed_rate is not None and (
            not math.isfinite(self.proposed_rate) or self.proposed_rate <= 0
        ):
            raise ValidationError("Proposed rate must be greater than zero")

        if not self.applied_at:
            self.applied_at = datetime.now(timezone.utc)

    @property
    def is_pending(self) -> bool:
        return self.status == ApplicationStatus.PENDING

    def to_dict(self) -> dict:
        """Convert application to dictionary."""
        return {
            "id": str(self.id),
            "job_id": str(self.job_id),
            "worker_id": self.worker_id,
            "worker_name": self.worker_name,
            "cover_letter": self.cover_letter,
            "proposed_rate": self.proposed_rate,
            "status": self.status.value,
            "applied_at": self.applied_at.isoformat() if self.applied_at else None,
        }
