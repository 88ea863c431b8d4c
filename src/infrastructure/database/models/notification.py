"""
Notification SQLAlchemy model.
"""

from sqlalchemy import JSON, Boolean, Column, DateTime, Index, String, Text

from .base import BaseModel


class NotificationModel(BaseModel):
    """Notification database model."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("ix_notifications_recipient_created", "recipient_id", "created_at"),
    )

    recipient_id = Column(String(128), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(30), nullable=False, default="info")
    read = Column(Boolean, nullable=False, default=False)
    read_at = Column(DateTime(timezone=True))
    action_url = Column(String(512))
    # "metadata" is reserved on declarative classes
    extra_data = Column("metadata", JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, recipient_id={self.recipient_id})>"
