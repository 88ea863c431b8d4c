"""
Outbox event SQLAlchemy model.
"""

from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, Uuid

from .base import Base, utc_now


class OutboxEventModel(Base):
    """Event waiting for (re)delivery."""

    __tablename__ = "outbox_events"

    id = Column(Uuid, primary_key=True, default=uuid4)
    event_type = Column(String(50), nullable=False, index=True)
    aggregate_id = Column(String(300), nullable=False, index=True)
    event_data = Column(JSON, nullable=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    retry_count = Column(Integer, nullable=False, default=0)
    max_retries = Column(Integer, nullable=False, default=3)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    processed_at = Column(DateTime(timezone=True))
    error_message = Column(Text)

    def __repr__(self) -> str:
        return f"<OutboxEvent(id={self.id}, event_type={self.event_type})>"
