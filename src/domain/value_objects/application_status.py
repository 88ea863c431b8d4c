"""
Application status value object.
"""

from enum import Enum


class ApplicationStatus(str, Enum):
    """Status of a worker's application to a job."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    def is_settled(self) -> bool:
        """Check if the household has already decided on this application."""
        return self != self.PENDING
