"""
Job status value object.
"""

from enum import Enum
from typing import FrozenSet


class JobStatus(str, Enum):
    """Job lifecycle status enumeration."""

    OPEN = "open"
    ASSIGNED = "assigned"
    ON_WAY = "on_way"
    ARRIVED = "arrived"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    def is_terminal(self) -> bool:
        """Check if no further transition is possible."""
        return self in [self.COMPLETED, self.CANCELLED]

    def requires_worker(self) -> bool:
        """Check if a job in this status must have an assigned worker."""
        return self in [
            self.ASSIGNED,
            self.ON_WAY,
            self.ARRIVED,
            self.IN_PROGRESS,
            self.COMPLETED,
        ]

    def accepts_applications(self) -> bool:
        """Check if workers may still apply."""
        return self == self.OPEN

    def allowed_targets(self) -> FrozenSet["JobStatus"]:
        """Statuses reachable from this one in a single transition."""
        return _TRANSITIONS[self]

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Check if a transition to target is legal."""
        return target in _TRANSITIONS[self]


_TRANSITIONS = {
    JobStatus.OPEN: frozenset({JobStatus.ASSIGNED, JobStatus.CANCELLED}),
    # Arrival may skip the ETA step
    JobStatus.ASSIGNED: frozenset(
        {JobStatus.ON_WAY, JobStatus.ARRIVED, JobStatus.CANCELLED}
    ),
    # on_way -> on_way is an ETA revision
    JobStatus.ON_WAY: frozenset(
        {JobStatus.ON_WAY, JobStatus.ARRIVED, JobStatus.CANCELLED}
    ),
    JobStatus.ARRIVED: frozenset({JobStatus.IN_PROGRESS, JobStatus.CANCELLED}),
    JobStatus.IN_PROGRESS: frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}
