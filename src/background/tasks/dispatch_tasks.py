"""
Celery tasks for notification redelivery and outbox maintenance.

Beat runs these in the Celery worker process. The API process can run
the same redelivery loop in-process through WorkerManager instead.
"""

import asyncio
from typing import Optional

from celery import current_app

from src.background.workers.outbox_worker import create_outbox_worker
from src.config.database import close_database_connections, get_async_session_factory
from src.config.logging import get_logger

logger = get_logger(__name__)


async def _redeliver(batch_size: Optional[int]) -> dict:
    try:
        async with get_async_session_factory()() as session:
            worker = create_outbox_worker(session=session)
            processed = await worker.process_pending_events(batch_size)
            return {"status": "success", "processed": processed, **worker.get_stats()}
    finally:
        # Each task runs its own event loop; pooled connections must not outlive it
        await close_database_connections()


async def _cleanup(days_old: Optional[int]) -> dict:
    try:
        async with get_async_session_factory()() as session:
            deleted = await create_outbox_worker(session=session).cleanup(days_old)
            return {"status": "success", "deleted": deleted}
    finally:
        await close_database_connections()


@current_app.task(bind=True, max_retries=3, name="redeliver_dispatches_task")
def redeliver_dispatches_task(self, batch_size: Optional[int] = None):
    """Replay parked notification dispatches."""
    logger.info(
        "Starting dispatch redelivery task",
        attempt=self.request.retries + 1,
        max_retries=self.max_retries,
    )
    try:
        return asyncio.run(_redeliver(batch_size))
    except Exception as e:
        logger.error("Dispatch redelivery task failed", error=str(e), exc_info=True)
        raise self.retry(exc=e, countdown=60 * (2**self.request.retries))


@current_app.task(bind=True, max_retries=2, name="cleanup_outbox_events_task")
def cleanup_outbox_events_task(self, days_old: Optional[int] = None):
    """Delete completed outbox events past the retention window."""
    try:
        return asyncio.run(_cleanup(days_old))
    except Exception as e:
        logger.error("Outbox cleanup task failed", error=str(e), exc_info=True)
        raise self.retry(exc=e, countdown=300)
