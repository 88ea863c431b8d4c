"""
Job benefits value object.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Benefits:
    """Extras a household offers on top of salary."""

    accommodation: bool = False
    meals: bool = False
    transportation: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "accommodation": self.accommodation,
            "meals": self.meals,
            "transportation": self.transportation,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Benefits":
        """Build from a stored dictionary; missing flags default to False."""
        data = data or {}
        return cls(
            accommodation=bool(data.get("accommodation", False)),
            meals=bool(data.get("meals", False)),
            transportation=bool(data.get("transportation", False)),
        )
