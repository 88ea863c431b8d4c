"""
Admin routes for account management.
"""

from fastapi import APIRouter

from src.api.dependencies import AccountEventsDep, ActorIdDep
from src.api.schemas.account import AccountEventResponse, UserStatusUpdateRequest
from src.config.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.put("/users/{user_id}/status", response_model=AccountEventResponse)
async def update_user_status(
    user_id: str,
    body: UserStatusUpdateRequest,
    account_events: AccountEventsDep,
    actor_id: ActorIdDep,
):
    """Record an account status change and tell the user about it."""
    result = await account_events.user_status_changed(
        user_id, body.status, actor_id, reason=body.reason
    )
    return AccountEventResponse(
        event_type=result.event.event_type,
        source_id=result.event.source_id,
        warnings=AccountEventResponse.warnings_from(result.warnings),
    )
