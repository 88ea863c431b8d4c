"""
Application interfaces package.
"""

from .repositories import (
    ConversationRepositoryInterface,
    JobRepositoryInterface,
    NotificationRepositoryInterface,
)
from .services import (
    OutboxEvent,
    OutboxEventStatus,
    OutboxInterface,
    TransactionServiceInterface,
)

__all__ = [
    "ConversationRepositoryInterface",
    "JobRepositoryInterface",
    "NotificationRepositoryInterface",
    "OutboxEvent",
    "OutboxEventStatus",
    "OutboxInterface",
    "TransactionServiceInterface",
]
