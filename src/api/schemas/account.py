"""
Payment webhook and account administration schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import WarningsMixin


class PaymentWebhookRequest(BaseModel):
    """Callback from the payment provider."""

    payment_id: str = Field(..., min_length=1)
    worker_id: str = Field(..., min_length=1)
    amount: float
    household_name: Optional[str] = Field(None, max_length=255)
    status: str = Field("successful", description="Only successful payments notify")

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return v.strip().lower()


class UserStatusUpdateRequest(BaseModel):
    status: str = Field(..., min_length=1)
    reason: Optional[str] = Field(None, max_length=1000)


class AccountEventResponse(WarningsMixin):
    """Acknowledgement of a published account event."""

    success: bool = True
    event_type: Optional[str] = None
    source_id: Optional[str] = None
    message: Optional[str] = None
