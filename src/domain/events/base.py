"""
Domain event base classes.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict
from uuid import UUID

from pydantic import TypeAdapter


class DomainEvent(ABC):
    """Signal emitted after a state-changing operation commits.

    Subclasses are dataclasses. ``source_id`` identifies the change that
    produced the event; replays of the same change carry the same value.
    """

    event_type: ClassVar[str] = ""

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Identifier of the change that produced the event."""

    @property
    def aggregate_id(self) -> str:
        return self.source_id

    def to_payload(self) -> Dict[str, Any]:
        """JSON-compatible representation used by the outbox."""
        return TypeAdapter(type(self)).dump_python(self, mode="json")

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "DomainEvent":
        return TypeAdapter(cls).validate_python(data)


class JobEvent(DomainEvent):
    """Event produced by a job transition; one per job version."""

    job_id: UUID
    version: int

    @property
    def source_id(self) -> str:
        return f"{self.job_id}:v{self.version}"

    @property
    def aggregate_id(self) -> str:
        return str(self.job_id)
