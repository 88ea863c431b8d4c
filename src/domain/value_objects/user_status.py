"""
User account status value object.
"""

from enum import Enum


class UserStatus(str, Enum):
    """Account status managed by administrators."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    PENDING = "pending"

    @property
    def notifies_user(self) -> bool:
        """Suspended users are not told through in-app notifications."""
        return self != self.SUSPENDED
