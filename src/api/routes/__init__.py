"""
API routes package.
"""

from .admin import router as admin_router
from .health import router as health_router
from .jobs import router as jobs_router
from .messages import router as messages_router
from .notifications import router as notifications_router
from .webhooks import router as webhooks_router

__all__ = [
    "admin_router",
    "health_router",
    "jobs_router",
    "messages_router",
    "notifications_router",
    "webhooks_router",
]
