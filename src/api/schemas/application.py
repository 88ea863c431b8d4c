"""
Job application API schemas.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from .common import WarningsMixin
from .job import ApplicationResponse


class ApplicationCreateRequest(BaseModel):
    """Worker's application; the worker is the acting user."""

    worker_name: str = Field(..., max_length=255)
    cover_letter: Optional[str] = Field(None, max_length=5000)
    proposed_rate: Optional[float] = Field(None, gt=0, allow_inf_nan=False)


class ApplicationSubmitResponse(WarningsMixin):
    """Stored application and any dispatch warnings."""

    application: ApplicationResponse


class ApplicationListResponse(BaseModel):
    items: List[ApplicationResponse]
