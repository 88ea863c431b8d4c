"""
Notification API schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from src.domain.entities import Notification


class NotificationResponse(BaseModel):
    """Notification response schema."""

    id: UUID
    recipient_id: str
    title: str
    description: str
    type: str
    read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    action_url: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_entity(cls, notification: Notification) -> "NotificationResponse":
        return cls(
            id=notification.id,
            recipient_id=notification.recipient_id,
            title=notification.title,
            description=notification.description,
            type=notification.type.value,
            read=notification.read,
            read_at=notification.read_at,
            created_at=notification.created_at,
            action_url=notification.action_url,
            metadata=notification.metadata,
        )


class NotificationListResponse(BaseModel):
    items: List[NotificationResponse]
    unread_count: int


class MarkReadRequest(BaseModel):
    """Either a list of ids or mark_all, not both."""

    notification_ids: Optional[List[UUID]] = None
    mark_all: bool = False

    @model_validator(mode="after")
    def validate_target(self):
        if self.mark_all and self.notification_ids:
            raise ValueError("Pass either notification_ids or mark_all, not both")
        if not self.mark_all and not self.notification_ids:
            raise ValueError("notification_ids is required unless mark_all is set")
        return self


class MarkReadResponse(BaseModel):
    updated: int
