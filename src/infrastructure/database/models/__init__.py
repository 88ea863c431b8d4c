"""
Database models package.
"""

from .base import Base, BaseModel
from .conversation import ConversationModel, MessageModel
from .job import JobModel
from .job_application import JobApplicationModel
from .notification import NotificationModel
from .outbox_event import OutboxEventModel

__all__ = [
    "Base",
    "BaseModel",
    "ConversationModel",
    "JobApplicationModel",
    "JobModel",
    "MessageModel",
    "NotificationModel",
    "OutboxEventModel",
]
