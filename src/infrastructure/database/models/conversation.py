"""
Conversation and message SQLAlchemy models.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, Text, Uuid

from .base import Base, BaseModel, utc_now


class ConversationModel(Base):
    """Conversation summary keyed by the sorted participant pair."""

    __tablename__ = "conversations"

    id = Column(String(300), primary_key=True)
    participant_a = Column(String(128), nullable=False, index=True)
    participant_b = Column(String(128), nullable=False, index=True)
    last_message = Column(Text, nullable=False)
    last_message_at = Column(DateTime(timezone=True), nullable=False)
    last_sender_id = Column(String(128), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False
    )

    def __repr__(self) -> str:
        return f"<Conversation(id={self.id})>"


class MessageModel(BaseModel):
    """Chat message database model."""

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_conversation_created", "conversation_id", "created_at"),
    )

    conversation_id = Column(
        String(300), ForeignKey("conversations.id"), nullable=False
    )
    sender_id = Column(String(128), nullable=False)
    receiver_id = Column(String(128), nullable=False, index=True)
    content = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default="text")
    read = Column(Boolean, nullable=False, default=False)
    job_id = Column(Uuid)
