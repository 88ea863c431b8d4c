"""Conversation repository implementation."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.interfaces.repositories import ConversationRepositoryInterface
from src.config.logging import get_logger
from src.domain.entities import Conversation, Message
from src.domain.value_objects import MessageType
from src.infrastructure.database.models import ConversationModel, MessageModel
from src.infrastructure.database.repositories.dialect import as_utc, insert_for

logger = get_logger(__name__)


class ConversationRepository(ConversationRepositoryInterface):
    """Conversation repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_message(self, message: Message) -> Message:
        """Append a message."""
        message_model = MessageModel(
            id=message.id,
            conversation_id=message.conversation_id,
            sender_id=message.sender_id,
            receiver_id=message.receiver_id,
            content=message.content,
            type=message.type.value,
            read=message.read,
            job_id=message.job_id,
            created_at=message.created_at,
            updated_at=message.created_at,
        )

        self.db.add(message_model)
        await self.db.flush()
        return message

    async def upsert_summary(self, conversation: Conversation) -> None:
        """Create or refresh the conversation summary in one statement."""
        participant_a, participant_b = sorted(conversation.participants)
        now = datetime.now(timezone.utc)

        stmt = insert_for(self.db, ConversationModel).values(
            id=conversation.id,
            participant_a=participant_a,
            participant_b=participant_b,
            last_message=conversation.last_message,
            last_message_at=conversation.last_message_at,
            last_sender_id=conversation.last_sender_id,
            created_at=conversation.created_at,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["id"],
            set_={
                "last_message": stmt.excluded.last_message,
                "last_message_at": stmt.excluded.last_message_at,
                "last_sender_id": stmt.excluded.last_sender_id,
                "updated_at": stmt.excluded.updated_at,
            },
            # Never move the summary back to an older message
            where=ConversationModel.last_message_at <= stmt.excluded.last_message_at,
        )
        await self.db.execute(stmt)

    async def get_by_id(self, conversation_id: str) -> Optional[Conversation]:
        """Get conversation summary by ID."""
        stmt = (
            select(ConversationModel)
            .where(ConversationModel.id == conversation_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._conversation_to_entity(model) if model else None

    async def list_messages(
        self, conversation_id: str, limit: int, before: Optional[datetime] = None
    ) -> List[Message]:
        """Newest messages created before the cursor, returned oldest first."""
        stmt = select(MessageModel).where(MessageModel.conversation_id == conversation_id)
        if before is not None:
            stmt = stmt.where(MessageModel.created_at < before)

        stmt = (
            stmt.order_by(MessageModel.created_at.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        newest_first = [self._message_to_entity(m) for m in result.scalars().all()]
        return list(reversed(newest_first))

    async def list_for_user(self, user_id: str, limit: int = 20) -> List[Conversation]:
        """Conversations of a user by latest activity, with unread counts."""
        stmt = (
            select(ConversationModel)
            .where(
                or_(
                    ConversationModel.participant_a == user_id,
                    ConversationModel.participant_b == user_id,
                )
            )
            .order_by(ConversationModel.last_message_at.desc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        conversations = [self._conversation_to_entity(m) for m in result.scalars().all()]
        if not conversations:
            return conversations

        unread_stmt = (
            select(MessageModel.conversation_id, func.count())
            .where(
                MessageModel.conversation_id.in_([c.id for c in conversations]),
                MessageModel.receiver_id == user_id,
                MessageModel.read.is_(False),
            )
            .group_by(MessageModel.conversation_id)
        )
        unread = dict((await self.db.execute(unread_stmt)).all())
        for conversation in conversations:
            conversation.unread_count = unread.get(conversation.id, 0)

        return conversations

    async def mark_read(self, conversation_id: str, reader_id: str) -> int:
        """Mark messages addressed to reader_id as read."""
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.conversation_id == conversation_id,
                MessageModel.receiver_id == reader_id,
                MessageModel.read.is_(False),
            )
            .values(read=True, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    def _conversation_to_entity(self, model: ConversationModel) -> Conversation:
        return Conversation(
            id=model.id,
            participants=[model.participant_a, model.participant_b],
            last_message=model.last_message,
            last_message_at=as_utc(model.last_message_at),
            last_sender_id=model.last_sender_id,
            created_at=as_utc(model.created_at),
        )

    def _message_to_entity(self, model: MessageModel) -> Message:
        return Message(
            id=model.id,
            conversation_id=model.conversation_id,
            sender_id=model.sender_id,
            receiver_id=model.receiver_id,
            content=model.content,
            type=MessageType(model.type),
            read=model.read,
            created_at=as_utc(model.created_at),
            job_id=model.job_id,
        )
