"""
Common API schemas.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.domain.exceptions import DispatchFailure


class BaseResponse(BaseModel):
    """Base response schema."""

    success: bool = True
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error body returned by the exception handlers."""

    error: str
    message: str
    type: str
    retriable: Optional[bool] = None


class WarningSchema(BaseModel):
    """Non-fatal problem reported next to a committed result."""

    type: str = "dispatch_failure"
    event_type: str
    source_id: str
    message: str
    queued_for_retry: bool = False

    @classmethod
    def from_failure(cls, failure: DispatchFailure) -> "WarningSchema":
        return cls(**failure.to_warning())


class WarningsMixin(BaseModel):
    """Mixin for responses that may carry dispatch warnings."""

    warnings: List[WarningSchema] = Field(default_factory=list)

    @staticmethod
    def warnings_from(failures: List[DispatchFailure]) -> List[WarningSchema]:
        return [WarningSchema.from_failure(f) for f in failures]


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
