"""
In-process entity store.
"""

import asyncio
from typing import Dict, List
from uuid import UUID

from src.application.interfaces.services import OutboxEvent
from src.domain.entities import Conversation, Job, Message, Notification


class InMemoryStore:
    """Shared state behind the in-memory repositories.

    All access goes through ``lock``; repositories yield to the event loop
    before each call so concurrent requests interleave as with real I/O.
    """

    def __init__(self):
        self.lock = asyncio.Lock()
        self.jobs: Dict[UUID, Job] = {}
        self.notifications: Dict[UUID, Notification] = {}
        self.conversations: Dict[str, Conversation] = {}
        self.messages: List[Message] = []
        self.outbox_events: Dict[UUID, OutboxEvent] = {}

    def clear(self) -> None:
        self.jobs.clear()
        self.notifications.clear()
        self.conversations.clear()
        self.messages.clear()
        self.outbox_events.clear()
