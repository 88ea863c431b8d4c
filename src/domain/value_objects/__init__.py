"""
Domain value objects package.
"""

from .application_status import ApplicationStatus
from .benefits import Benefits
from .job_status import JobStatus
from .location import Location
from .message_type import MessageType
from .notification_type import NotificationType
from .user_status import UserStatus

__all__ = [
    "ApplicationStatus",
    "Benefits",
    "JobStatus",
    "Location",
    "MessageType",
    "NotificationType",
    "UserStatus",
]
