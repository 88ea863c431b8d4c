"""
Message sent domain event.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.domain.value_objects import MessageType

from .base import DomainEvent


@dataclass
class MessageSent(DomainEvent):
    """Event raised when a chat message is appended."""

    event_type = "message_sent"

    message_id: UUID
    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    sent_at: datetime
    message_type: MessageType = MessageType.TEXT
    job_id: Optional[UUID] = None

    @property
    def source_id(self) -> str:
        return str(self.message_id)

    @property
    def aggregate_id(self) -> str:
        return self.conversation_id
