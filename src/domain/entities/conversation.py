"""Conversation and message domain entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID, uuid4

from src.domain.exceptions import ValidationError
from src.domain.value_objects import MessageType

CONVERSATION_ID_SEPARATOR = "_"


def conversation_id_for(user_a: str, user_b: str) -> str:
    """Deterministic, order-independent id for the conversation of two users."""
    a = (user_a or "").strip()
    b = (user_b or "").strip()
    if not a or not b:
        raise ValidationError("Both participant ids are required")
    if CONVERSATION_ID_SEPARATOR in a or CONVERSATION_ID_SEPARATOR in b:
        raise ValidationError(
            f"Participant ids must not contain '{CONVERSATION_ID_SEPARATOR}'"
        )
    if a == b:
        raise ValidationError("A conversation needs two distinct participants")
    return CONVERSATION_ID_SEPARATOR.join(sorted([a, b]))


@dataclass
class Message:
    """A single chat message between two users."""

    conversation_id: str
    sender_id: str
    receiver_id: str
    content: str
    type: MessageType = MessageType.TEXT
    id: UUID = field(default_factory=uuid4)
    read: bool = False
    created_at: Optional[datetime] = None
    job_id: Optional[UUID] = None

    def __post_init__(self):
        """Validate message data."""
        if not self.content or not self.content.strip():
            raise ValidationError("Message content is required")

        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    def preview(self, length: int) -> str:
        """Short text used in conversation lists and notifications."""
        if self.type != MessageType.TEXT:
            return self.type.preview_label
        if len(self.content) > length:
            return self.content[:length] + "..."
        return self.content


@dataclass
class Conversation:
    """Summary of the latest activity between two users."""

    id: str
    participants: List[str]
    last_message: str
    last_message_at: datetime
    last_sender_id: str
    created_at: Optional[datetime] = None
    # Filled by queries made on behalf of one participant
    unread_count: int = 0

    def __post_init__(self):
        if len(self.participants) != 2:
            raise ValidationError("A conversation has exactly two participants")
        if not self.created_at:
            self.created_at = self.last_message_at

    def other_participant(self, user_id: str) -> Optional[str]:
        """The participant that is not user_id."""
        for participant in self.participants:
            if participant != user_id:
                return participant
        return None

    @classmethod
    def from_message(cls, message: Message, preview: str) -> "Conversation":
        """Summary reflecting a just-sent message."""
        return cls(
            id=message.conversation_id,
            participants=sorted([message.sender_id, message.receiver_id]),
            last_message=preview,
            last_message_at=message.created_at,
            last_sender_id=message.sender_id,
        )
