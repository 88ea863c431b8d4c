"""
In-memory store used for development and tests.
"""

from .outbox import InMemoryOutbox, InMemoryTransactionService
from .repositories import (
    InMemoryConversationRepository,
    InMemoryJobRepository,
    InMemoryNotificationRepository,
)
from .store import InMemoryStore

__all__ = [
    "InMemoryConversationRepository",
    "InMemoryJobRepository",
    "InMemoryNotificationRepository",
    "InMemoryOutbox",
    "InMemoryStore",
    "InMemoryTransactionService",
]
