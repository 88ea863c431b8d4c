"""
Unit tests for ConversationRouter.
"""

from datetime import timedelta

import pytest

from conftest import HOUSEHOLD_ID, WORKER_ID
from src.domain.exceptions import NotFoundError, ValidationError
from src.domain.value_objects import MessageType


class TestConversationRouter:
    """Test cases for ConversationRouter."""

    @pytest.mark.asyncio
    async def test_both_directions_share_a_conversation(self, conversation_router):
        first = await conversation_router.send_message(HOUSEHOLD_ID, WORKER_ID, "Hello")
        reply = await conversation_router.send_message(WORKER_ID, HOUSEHOLD_ID, "Hi there")

        assert first.message.conversation_id == reply.message.conversation_id
        assert first.message.conversation_id == conversation_router.conversation_id_for(
            WORKER_ID, HOUSEHOLD_ID
        )

        conversations = await conversation_router.list_conversations(HOUSEHOLD_ID)
        assert len(conversations) == 1
        assert conversations[0].last_message == "Hi there"
        assert conversations[0].last_sender_id == WORKER_ID

    @pytest.mark.asyncio
    async def test_send_message_notifies_receiver(
        self, conversation_router, notification_repository
    ):
        result = await conversation_router.send_message(HOUSEHOLD_ID, WORKER_ID, "Can you come at 9?")

        assert result.warnings == []
        [notification] = await notification_repository.list_for_recipient(WORKER_ID)
        assert notification.description == "You have a new message: Can you come at 9?"
        assert notification.action_url == f"/messages/{result.message.conversation_id}"
        assert await notification_repository.count_unread(HOUSEHOLD_ID) == 0

    @pytest.mark.asyncio
    async def test_image_summary(self, conversation_router):
        result = await conversation_router.send_message(
            HOUSEHOLD_ID, WORKER_ID, "https://cdn/kitchen.png", MessageType.IMAGE
        )

        assert result.conversation.last_message == "[image]"

    @pytest.mark.asyncio
    async def test_invalid_messages(self, conversation_router):
        with pytest.raises(ValidationError):
            await conversation_router.send_message(HOUSEHOLD_ID, HOUSEHOLD_ID, "Note to self")
        with pytest.raises(ValidationError):
            await conversation_router.send_message(HOUSEHOLD_ID, WORKER_ID, "   ")
        with pytest.raises(ValidationError):
            await conversation_router.send_message("household_1", WORKER_ID, "Hello")

    @pytest.mark.asyncio
    async def test_list_messages_oldest_first_with_cursor(self, conversation_router):
        sent = []
        for text in ["one", "two", "three"]:
            sent.append((await conversation_router.send_message(HOUSEHOLD_ID, WORKER_ID, text)).message)
        conversation_id = sent[0].conversation_id

        page = await conversation_router.list_messages(conversation_id)
        assert [m.content for m in page] == ["one", "two", "three"]

        latest = await conversation_router.list_messages(conversation_id, limit=2)
        assert [m.content for m in latest] == ["two", "three"]

        older = await conversation_router.list_messages(
            conversation_id, limit=2, before=sent[2].created_at
        )
        assert [m.content for m in older] == ["one", "two"]

        none = await conversation_router.list_messages(
            conversation_id, before=sent[0].created_at - timedelta(seconds=1)
        )
        assert none == []

    @pytest.mark.asyncio
    async def test_list_messages_validation(self, conversation_router):
        with pytest.raises(ValidationError):
            await conversation_router.list_messages("")
        with pytest.raises(ValidationError):
            await conversation_router.list_messages("a_b", limit=0)

    @pytest.mark.asyncio
    async def test_unread_counts_and_mark_read(self, conversation_router):
        await conversation_router.send_message(HOUSEHOLD_ID, WORKER_ID, "one")
        result = await conversation_router.send_message(HOUSEHOLD_ID, WORKER_ID, "two")
        conversation_id = result.message.conversation_id

        [conversation] = await conversation_router.list_conversations(WORKER_ID)
        assert conversation.unread_count == 2
        [own] = await conversation_router.list_conversations(HOUSEHOLD_ID)
        assert own.unread_count == 0

        assert await conversation_router.mark_conversation_read(conversation_id, WORKER_ID) == 2
        assert await conversation_router.mark_conversation_read(conversation_id, WORKER_ID) == 0

    @pytest.mark.asyncio
    async def test_mark_read_checks_conversation_and_reader(self, conversation_router):
        result = await conversation_router.send_message(HOUSEHOLD_ID, WORKER_ID, "hello")

        with pytest.raises(NotFoundError):
            await conversation_router.mark_conversation_read("x_y", WORKER_ID)
        with pytest.raises(ValidationError):
            await conversation_router.mark_conversation_read(
                result.message.conversation_id, "outsider"
            )
