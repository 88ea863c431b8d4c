"""
Domain entities package.
"""

from .application import Application
from .conversation import Conversation, Message, conversation_id_for
from .job import Job
from .notification import Notification

__all__ = [
    "Application",
    "Conversation",
    "Job",
    "Message",
    "Notification",
    "conversation_id_for",
]
