"""
Database repositories package.
"""

from .conversation_repository import ConversationRepository
from .job_repository import JobRepository
from .notification_repository import NotificationRepository
from .transaction_repository import TransactionService
from .transactional_outbox_repository import TransactionalOutbox

__all__ = [
    "ConversationRepository",
    "JobRepository",
    "NotificationRepository",
    "TransactionService",
    "TransactionalOutbox",
]
