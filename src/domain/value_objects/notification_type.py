"""
Notification type value object.
"""

from enum import Enum


class NotificationType(str, Enum):
    """Notification type enumeration."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"
    JOB_APPLICATION = "job_application"
    PAYMENT = "payment"
    BOOKING = "booking"
