"""Messaging endpoints."""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query, status

from src.api.dependencies import ActorIdDep, ConversationRouterDep
from src.api.schemas.message import (
    ConversationListResponse,
    ConversationResponse,
    MarkConversationReadResponse,
    MessageListResponse,
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from src.domain.exceptions import ValidationError

router = APIRouter(tags=["messages"])


@router.post(
    "/messages", response_model=SendMessageResponse, status_code=status.HTTP_201_CREATED
)
async def send_message(
    body: SendMessageRequest,
    conversation_router: ConversationRouterDep,
    actor_id: ActorIdDep,
):
    """Send a message from the acting user."""
    result = await conversation_router.send_message(
        sender_id=actor_id,
        receiver_id=body.receiver_id,
        content=body.content,
        message_type=body.type,
        job_id=body.job_id,
    )
    return SendMessageResponse(
        message=MessageResponse.from_entity(result.message),
        conversation=ConversationResponse.from_entity(result.conversation, actor_id),
        warnings=SendMessageResponse.warnings_from(result.warnings),
    )


@router.get("/messages", response_model=MessageListResponse)
async def list_messages(
    conversation_router: ConversationRouterDep,
    conversation_id: Optional[str] = None,
    sender_id: Optional[str] = None,
    receiver_id: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    before: Optional[datetime] = None,
):
    """Messages of a conversation, by id or by its two participants."""
    if not conversation_id:
        if not sender_id or not receiver_id:
            raise ValidationError(
                "Either conversation_id or both sender_id and receiver_id are required"
            )
        conversation_id = conversation_router.conversation_id_for(sender_id, receiver_id)

    messages = await conversation_router.list_messages(
        conversation_id, limit=limit, before=before
    )
    return MessageListResponse(
        conversation_id=conversation_id,
        items=[MessageResponse.from_entity(m) for m in messages],
    )


@router.get("/conversations", response_model=ConversationListResponse)
async def list_conversations(
    conversation_router: ConversationRouterDep,
    user_id: str = Query(..., min_length=1),
    limit: int = Query(20, ge=1),
):
    conversations = await conversation_router.list_conversations(user_id, limit=limit)
    return ConversationListResponse(
        items=[ConversationResponse.from_entity(c, user_id) for c in conversations]
    )


@router.post(
    "/conversations/{conversation_id}/read",
    response_model=MarkConversationReadResponse,
)
async def mark_conversation_read(
    conversation_id: str,
    conversation_router: ConversationRouterDep,
    actor_id: ActorIdDep,
):
    """Mark the messages addressed to the acting user as read."""
    updated = await conversation_router.mark_conversation_read(conversation_id, actor_id)
    return MarkConversationReadResponse(conversation_id=conversation_id, updated=updated)
