"""
Webhook endpoints for payment provider callbacks.
"""

from fastapi import APIRouter

from src.api.dependencies import AccountEventsDep
from src.api.schemas.account import AccountEventResponse, PaymentWebhookRequest
from src.config.logging import get_logger

router = APIRouter(prefix="/webhooks", tags=["webhooks"])
logger = get_logger(__name__)

SUCCESSFUL_PAYMENT_STATUSES = {"successful", "success", "completed"}


@router.post("/payments", response_model=AccountEventResponse)
async def payment_webhook(payload: PaymentWebhookRequest, account_events: AccountEventsDep):
    """Notify the worker of a confirmed payout; other statuses are acknowledged only."""
    logger.info(
        "Payment webhook received",
        payment_id=payload.payment_id,
        payment_status=payload.status,
    )

    if payload.status not in SUCCESSFUL_PAYMENT_STATUSES:
        return AccountEventResponse(message=f"Payment status '{payload.status}' ignored")

    result = await account_events.payment_completed(
        payment_id=payload.payment_id,
        worker_id=payload.worker_id,
        amount=payload.amount,
        household_name=payload.household_name,
    )
    return AccountEventResponse(
        event_type=result.event.event_type,
        source_id=result.event.source_id,
        warnings=AccountEventResponse.warnings_from(result.warnings),
    )
