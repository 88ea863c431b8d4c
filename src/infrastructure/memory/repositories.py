"""
In-memory repository implementations.
"""

import asyncio
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from src.application.interfaces.repositories import (
    ConversationRepositoryInterface,
    JobRepositoryInterface,
    NotificationRepositoryInterface,
)
from src.domain.entities import Application, Conversation, Job, Message, Notification
from src.domain.exceptions import DuplicateApplicationError
from src.domain.value_objects import ApplicationStatus, JobStatus, NotificationType
from src.infrastructure.memory.store import InMemoryStore


class InMemoryJobRepository(JobRepositoryInterface):
    """Job repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def create(self, job: Job) -> Job:
        await asyncio.sleep(0)
        async with self.store.lock:
            self.store.jobs[job.id] = deepcopy(job)
        return job

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        await asyncio.sleep(0)
        async with self.store.lock:
            job = self.store.jobs.get(job_id)
            return deepcopy(job) if job else None

    async def find(
        self,
        status: Optional[JobStatus] = None,
        service_type: Optional[str] = None,
        household_id: Optional[str] = None,
        worker_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Job]:
        await asyncio.sleep(0)
        async with self.store.lock:
            jobs = [
                job
                for job in self.store.jobs.values()
                if (status is None or job.status == status)
                and (service_type is None or job.service_type == service_type)
                and (household_id is None or job.household_id == household_id)
                and (worker_id is None or job.worker_id == worker_id)
            ]
            jobs.sort(key=lambda job: job.created_at, reverse=True)
            return deepcopy(jobs[offset : offset + limit])

    async def update_if_status(
        self, job_id: UUID, expected_status: JobStatus, changes: Dict[str, Any]
    ) -> Optional[int]:
        await asyncio.sleep(0)
        async with self.store.lock:
            job = self.store.jobs.get(job_id)
            if job is None or job.status != expected_status:
                return None
            for name, value in changes.items():
                setattr(job, name, deepcopy(value))
            job.version += 1
            return job.version

    async def add_application(self, application: Application) -> Optional[Application]:
        await asyncio.sleep(0)
        async with self.store.lock:
            job = self.store.jobs.get(application.job_id)
            if job is None or job.status != JobStatus.OPEN:
                return None
            if job.has_applied(application.worker_id):
                raise DuplicateApplicationError(str(job.id), application.worker_id)

            job.version += 1
            job.updated_at = datetime.now(timezone.utc)
            application.sequence = job.version
            job.applicants.append(deepcopy(application))
            return application

    async def list_applications(self, job_id: UUID) -> List[Application]:
        await asyncio.sleep(0)
        async with self.store.lock:
            job = self.store.jobs.get(job_id)
            return deepcopy(job.applicants) if job else []

    async def settle_applications(
        self, job_id: UUID, accepted_worker_id: Optional[str] = None
    ) -> int:
        await asyncio.sleep(0)
        async with self.store.lock:
            job = self.store.jobs.get(job_id)
            if job is None:
                return 0
            settled = 0
            for application in job.applicants:
                if application.worker_id == accepted_worker_id:
                    application.status = ApplicationStatus.ACCEPTED
                    settled += 1
                elif application.is_pending:
                    application.status = ApplicationStatus.REJECTED
                    settled += 1
            return settled

    async def increment_view_count(self, job_id: UUID) -> Optional[int]:
        await asyncio.sleep(0)
        async with self.store.lock:
            job = self.store.jobs.get(job_id)
            if job is None:
                return None
            job.view_count += 1
            return job.view_count


class InMemoryNotificationRepository(NotificationRepositoryInterface):
    """Notification repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def insert_if_absent(self, notification: Notification) -> bool:
        await asyncio.sleep(0)
        async with self.store.lock:
            if notification.id in self.store.notifications:
                return False
            self.store.notifications[notification.id] = deepcopy(notification)
            return True

    async def get_by_id(self, notification_id: UUID) -> Optional[Notification]:
        await asyncio.sleep(0)
        async with self.store.lock:
            notification = self.store.notifications.get(notification_id)
            return deepcopy(notification) if notification else None

    async def list_for_recipient(
        self,
        recipient_id: str,
        read: Optional[bool] = None,
        notification_type: Optional[NotificationType] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Notification]:
        await asyncio.sleep(0)
        async with self.store.lock:
            notifications = [
                n
                for n in self.store.notifications.values()
                if n.recipient_id == recipient_id
                and (read is None or n.read == read)
                and (notification_type is None or n.type == notification_type)
            ]
            notifications.sort(key=lambda n: n.created_at, reverse=True)
            return deepcopy(notifications[offset : offset + limit])

    async def count_unread(self, recipient_id: str) -> int:
        await asyncio.sleep(0)
        async with self.store.lock:
            return sum(
                1
                for n in self.store.notifications.values()
                if n.recipient_id == recipient_id and not n.read
            )

    async def mark_read(
        self,
        recipient_id: str,
        notification_ids: Optional[List[UUID]],
        read_at: datetime,
    ) -> int:
        await asyncio.sleep(0)
        async with self.store.lock:
            wanted = set(notification_ids) if notification_ids is not None else None
            count = 0
            for notification in self.store.notifications.values():
                if notification.recipient_id != recipient_id:
                    continue
                if wanted is not None and notification.id not in wanted:
                    continue
                if notification.mark_read(read_at):
                    count += 1
            return count


class InMemoryConversationRepository(ConversationRepositoryInterface):
    """Conversation repository over an InMemoryStore."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    async def add_message(self, message: Message) -> Message:
        await asyncio.sleep(0)
        async with self.store.lock:
            self.store.messages.append(deepcopy(message))
        return message

    async def upsert_summary(self, conversation: Conversation) -> None:
        await asyncio.sleep(0)
        async with self.store.lock:
            current = self.store.conversations.get(conversation.id)
            if current is None:
                self.store.conversations[conversation.id] = deepcopy(conversation)
            elif current.last_message_at <= conversation.last_message_at:
                current.last_message = conversation.last_message
                current.last_message_at = conversation.last_message_at
                current.last_sender_id = conversation.last_sender_id

    async def get_by_id(self, conversation_id: str) -> Optional[Conversation]:
        await asyncio.sleep(0)
        async with self.store.lock:
            conversation = self.store.conversations.get(conversation_id)
            return deepcopy(conversation) if conversation else None

    async def list_messages(
        self, conversation_id: str, limit: int, before: Optional[datetime] = None
    ) -> List[Message]:
        await asyncio.sleep(0)
        async with self.store.lock:
            messages = [
                m
                for m in self.store.messages
                if m.conversation_id == conversation_id
                and (before is None or m.created_at < before)
            ]
            messages.sort(key=lambda m: m.created_at)
            return deepcopy(messages[-limit:]) if limit > 0 else []

    async def list_for_user(self, user_id: str, limit: int = 20) -> List[Conversation]:
        await asyncio.sleep(0)
        async with self.store.lock:
            conversations = [
                c for c in self.store.conversations.values() if user_id in c.participants
            ]
            conversations.sort(key=lambda c: c.last_message_at, reverse=True)
            conversations = deepcopy(conversations[:limit])

            for conversation in conversations:
                conversation.unread_count = sum(
                    1
                    for m in self.store.messages
                    if m.conversation_id == conversation.id
                    and m.receiver_id == user_id
                    and not m.read
                )
            return conversations

    async def mark_read(self, conversation_id: str, reader_id: str) -> int:
        await asyncio.sleep(0)
        async with self.store.lock:
            count = 0
            for message in self.store.messages:
                if (
                    message.conversation_id == conversation_id
                    and message.receiver_id == reader_id
                    and not message.read
                ):
                    message.read = True
                    count += 1
            return count
