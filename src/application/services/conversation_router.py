"""
Conversation Router: deterministic conversations and chat messages.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from src.application.interfaces.repositories import ConversationRepositoryInterface
from src.application.interfaces.services import TransactionServiceInterface
from src.application.services.event_publisher import EventPublisher
from src.config.logging import get_logger
from src.config.settings import settings
from src.domain.entities import Conversation, Message, conversation_id_for
from src.domain.events import DomainEvent, MessageSent
from src.domain.exceptions import DispatchFailure, NotFoundError, ValidationError
from src.domain.value_objects import MessageType
from src.infrastructure.monitoring.metrics import record_message_sent

logger = get_logger(__name__)

MAX_PAGE_SIZE = 200


@dataclass
class MessageResult:
    """Stored message, the refreshed summary and any dispatch warnings."""

    message: Message
    conversation: Conversation
    events: List[DomainEvent]
    warnings: List[DispatchFailure] = field(default_factory=list)


class ConversationRouter:
    """Routes messages into the one conversation each pair of users shares."""

    def __init__(
        self,
        conversation_repository: ConversationRepositoryInterface,
        transaction_service: TransactionServiceInterface,
        event_publisher: EventPublisher,
    ):
        self.conversation_repository = conversation_repository
        self.transaction_service = transaction_service
        self.event_publisher = event_publisher

    @staticmethod
    def conversation_id_for(user_a: str, user_b: str) -> str:
        return conversation_id_for(user_a, user_b)

    async def send_message(
        self,
        sender_id: str,
        receiver_id: str,
        content: str,
        message_type: MessageType = MessageType.TEXT,
        job_id: Optional[UUID] = None,
    ) -> MessageResult:
        """Append a message and refresh the conversation summary."""
        message = Message(
            conversation_id=conversation_id_for(sender_id, receiver_id),
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=content,
            type=message_type,
            job_id=job_id,
        )
        summary = message.content if message.type == MessageType.TEXT else message.type.preview_label
        conversation = Conversation.from_message(message, summary)

        async def write() -> None:
            # Summary first: messages reference the conversation row
            await self.conversation_repository.upsert_summary(conversation)
            await self.conversation_repository.add_message(message)

        await self.transaction_service.execute_in_transaction(write)

        record_message_sent(message.type.value)
        logger.info(
            "Message sent",
            conversation_id=message.conversation_id,
            message_id=str(message.id),
            sender_id=sender_id,
        )

        event = MessageSent(
            message_id=message.id,
            conversation_id=message.conversation_id,
            sender_id=sender_id,
            receiver_id=receiver_id,
            content=message.content,
            sent_at=message.created_at,
            message_type=message.type,
            job_id=job_id,
        )
        warnings = await self.event_publisher.publish([event])
        return MessageResult(
            message=message, conversation=conversation, events=[event], warnings=warnings
        )

    async def list_messages(
        self,
        conversation_id: str,
        limit: Optional[int] = None,
        before: Optional[datetime] = None,
    ) -> List[Message]:
        """Oldest-first page of the newest messages created before ``before``."""
        if not conversation_id or not conversation_id.strip():
            raise ValidationError("Conversation id is required")

        limit = limit if limit is not None else settings.MESSAGE_PAGE_DEFAULT_LIMIT
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        if before is not None:
            if before.tzinfo is None:
                before = before.replace(tzinfo=timezone.utc)
            before = before.astimezone(timezone.utc)

        return await self.conversation_repository.list_messages(
            conversation_id, limit=limit, before=before
        )

    async def list_conversations(self, user_id: str, limit: int = 20) -> List[Conversation]:
        """Conversations of a user, most recent activity first."""
        if not user_id or not user_id.strip():
            raise ValidationError("User id is required")
        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

        return await self.conversation_repository.list_for_user(user_id, limit=limit)

    async def mark_conversation_read(self, conversation_id: str, reader_id: str) -> int:
        """Mark the messages addressed to reader_id as read."""
        conversation = await self.conversation_repository.get_by_id(conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation", conversation_id)
        if reader_id not in conversation.participants:
            raise ValidationError("Reader is not a participant of this conversation")

        count = await self.transaction_service.execute_in_transaction(
            lambda: self.conversation_repository.mark_read(conversation_id, reader_id)
        )
        logger.info(
            "Conversation marked as read",
            conversation_id=conversation_id,
            reader_id=reader_id,
            count=count,
        )
        return count
