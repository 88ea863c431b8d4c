"""
Message type value object.
"""

from enum import Enum


class MessageType(str, Enum):
    """Kind of content carried by a chat message."""

    TEXT = "text"
    IMAGE = "image"
    FILE = "file"

    @property
    def preview_label(self) -> str:
        """Placeholder shown instead of raw content for non-text messages."""
        return {self.IMAGE: "[image]", self.FILE: "[file]"}.get(self, "")
