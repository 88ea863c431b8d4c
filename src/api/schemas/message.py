"""
Messaging API schemas.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.entities import Conversation, Message
from src.domain.value_objects import MessageType

from .common import WarningsMixin


class SendMessageRequest(BaseModel):
    """Message from the acting user to receiver_id."""

    receiver_id: str = Field(..., min_length=1)
    content: str = Field(..., max_length=5000)
    type: MessageType = MessageType.TEXT
    job_id: Optional[UUID] = None


class MessageResponse(BaseModel):
    """Message response schema."""

    id: UUID
    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    type: str
    read: bool
    created_at: Optional[datetime] = None
    job_id: Optional[UUID] = None

    @classmethod
    def from_entity(cls, message: Message) -> "MessageResponse":
        return cls(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            content=message.content,
            type=message.type.value,
            read=message.read,
            created_at=message.created_at,
            job_id=message.job_id,
        )


class ConversationResponse(BaseModel):
    """Conversation summary as seen by one participant."""

    id: str
    participants: List[str]
    other_participant: Optional[str] = None
    last_message: str
    last_message_at: datetime
    last_sender_id: str
    unread_count: int = 0

    @classmethod
    def from_entity(
        cls, conversation: Conversation, user_id: Optional[str] = None
    ) -> "ConversationResponse":
        return cls(
            id=conversation.id,
            participants=conversation.participants,
            other_participant=conversation.other_participant(user_id) if user_id else None,
            last_message=conversation.last_message,
            last_message_at=conversation.last_message_at,
            last_sender_id=conversation.last_sender_id,
            unread_count=conversation.unread_count,
        )


class SendMessageResponse(WarningsMixin):
    message: MessageResponse
    conversation: ConversationResponse


class MessageListResponse(BaseModel):
    conversation_id: str
    items: List[MessageResponse]


class ConversationListResponse(BaseModel):
    items: List[ConversationResponse]


class MarkConversationReadResponse(BaseModel):
    conversation_id: str
    updated: int
