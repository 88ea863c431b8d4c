"""
Repository interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.domain.entities import Application, Conversation, Job, Message, Notification
from src.domain.value_objects import JobStatus, NotificationType


class JobRepositoryInterface(ABC):
    """Job repository interface.

    Writes that change a job are conditioned on the status the caller read;
    the repository never overwrites a job whose status moved in between.
    """

    @abstractmethod
    async def create(self, job: Job) -> Job:
        """Create a new job."""
        pass

    @abstractmethod
    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID, applicants included in insertion order."""
        pass

    @abstractmethod
    async def find(
        self,
        status: Optional[JobStatus] = None,
        service_type: Optional[str] = None,
        household_id: Optional[str] = None,
        worker_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Job]:
        """Find jobs by filters, newest first."""
        pass

    @abstractmethod
    async def update_if_status(
        self, job_id: UUID, expected_status: JobStatus, changes: Dict[str, Any]
    ) -> Optional[int]:
        """Apply changes only if the job still has expected_status.

        Returns the new version, or None when the guard did not match.
        """
        pass

    @abstractmethod
    async def add_application(self, application: Application) -> Optional[Application]:
        """Append an application while the job is open.

        Returns the stored application, or None when the job left the open
        status. Raises DuplicateApplicationError if the worker already applied.
        """
        pass

    @abstractmethod
    async def list_applications(self, job_id: UUID) -> List[Application]:
        """Applications of a job in insertion order."""
        pass

    @abstractmethod
    async def settle_applications(
        self, job_id: UUID, accepted_worker_id: Optional[str] = None
    ) -> int:
        """Accept one worker's application and reject the other pending ones."""
        pass

    @abstractmethod
    async def increment_view_count(self, job_id: UUID) -> Optional[int]:
        """Bump the view counter without touching status or version."""
        pass


class NotificationRepositoryInterface(ABC):
    """Notification repository interface."""

    @abstractmethod
    async def insert_if_absent(self, notification: Notification) -> bool:
        """Insert unless a notification with the same id exists.

        Returns True when a row was created.
        """
        pass

    @abstractmethod
    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        """Get notification by ID."""
        pass

    @abstractmethod
    async def list_for_recipient(
        self,
        recipient_id: str,
        read: Optional[bool] = None,
        notification_type: Optional[NotificationType] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Notification]:
        """Notifications of a user, newest first."""
        pass

    @abstractmethod
    async def count_unread(self, recipient_id: str) -> int:
        """Number of unread notifications of a user."""
        pass

    @abstractmethod
    async def mark_read(
        self,
        recipient_id: str,
        notification_ids: Optional[List[UUID]],
        read_at: datetime,
    ) -> int:
        """Flip unread notifications of recipient_id to read.

        notification_ids=None marks every unread notification.
        """
        pass


class ConversationRepositoryInterface(ABC):
    """Conversation and message repository interface."""

    @abstractmethod
    async def add_message(self, message: Message) -> Message:
        """Append a message."""
        pass

    @abstractmethod
    async def upsert_summary(self, conversation: Conversation) -> None:
        """Create or refresh the conversation summary.

        A summary is never replaced by an older message.
        """
        pass

    @abstractmethod
    async def get_by_id(self, conversation_id: str) -> Optional[Conversation]:
        """Get conversation summary by ID."""
        pass

    @abstractmethod
    async def list_messages(
        self, conversation_id: str, limit: int, before: Optional[datetime] = None
    ) -> List[Message]:
        """Newest messages created before the cursor, returned oldest first."""
        pass

    @abstractmethod
    async def list_for_user(self, user_id: str, limit: int = 20) -> List[Conversation]:
        """Conversations of a user by latest activity, with unread counts."""
        pass

    @abstractmethod
    async def mark_read(self, conversation_id: str, reader_id: str) -> int:
        """Mark messages addressed to reader_id as read."""
        pass
