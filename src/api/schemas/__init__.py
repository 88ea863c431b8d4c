"""
API schemas for the household job marketplace.
"""

from .account import AccountEventResponse, PaymentWebhookRequest, UserStatusUpdateRequest
from .application import (
    ApplicationCreateRequest,
    ApplicationListResponse,
    ApplicationSubmitResponse,
)
from .common import BaseResponse, ErrorResponse, WarningSchema
from .job import (
    ApplicationResponse,
    AssignWorkerRequest,
    CancelJobRequest,
    EtaUpdateRequest,
    JobCreateRequest,
    JobListResponse,
    JobOperationResponse,
    JobResponse,
)
from .message import (
    ConversationListResponse,
    ConversationResponse,
    MessageListResponse,
    MessageResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from .notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
)

__all__ = [
    "AccountEventResponse",
    "ApplicationCreateRequest",
    "ApplicationListResponse",
    "ApplicationResponse",
    "ApplicationSubmitResponse",
    "AssignWorkerRequest",
    "BaseResponse",
    "CancelJobRequest",
    "ConversationListResponse",
    "ConversationResponse",
    "ErrorResponse",
    "EtaUpdateRequest",
    "JobCreateRequest",
    "JobListResponse",
    "JobOperationResponse",
    "JobResponse",
    "MarkReadRequest",
    "MarkReadResponse",
    "MessageListResponse",
    "MessageResponse",
    "NotificationListResponse",
    "NotificationResponse",
    "PaymentWebhookRequest",
    "SendMessageRequest",
    "SendMessageResponse",
    "UserStatusUpdateRequest",
    "WarningSchema",
]
