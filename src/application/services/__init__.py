"""
Application services package.
"""

from .account_events import AccountEventResult, AccountEvents
from .application_registry import ApplicationRegistry, ApplicationResult
from .conversation_router import ConversationRouter, MessageResult
from .event_publisher import EventPublisher
from .job_lifecycle_engine import CreateJobRequest, JobLifecycleEngine, LifecycleResult
from .notification_dispatcher import DispatchResult, NotificationDispatcher
from .notification_inbox import NotificationInbox, NotificationPage

__all__ = [
    "AccountEventResult",
    "AccountEvents",
    "ApplicationRegistry",
    "ApplicationResult",
    "ConversationRouter",
    "CreateJobRequest",
    "DispatchResult",
    "EventPublisher",
    "JobLifecycleEngine",
    "LifecycleResult",
    "MessageResult",
    "NotificationDispatcher",
    "NotificationInbox",
    "NotificationPage",
]
