"""
Worker management and coordination.
"""

import asyncio
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.background.workers.outbox_worker import OutboxWorker, create_outbox_worker
from src.config.database import get_async_session_factory
from src.config.logging import get_logger
from src.config.settings import settings
from src.infrastructure.memory import InMemoryStore

logger = get_logger(__name__)


class WorkerManager:
    """Runs the in-process outbox worker next to the API."""

    def __init__(self, store: Optional[InMemoryStore] = None):
        self.store = store
        self.outbox_worker: Optional[OutboxWorker] = None
        self._session: Optional[AsyncSession] = None
        self.worker_tasks: Dict[str, asyncio.Task] = {}
        self.is_running = False

    def _get_outbox_worker(self) -> OutboxWorker:
        """Lazy initialization of outbox worker."""
        if self.outbox_worker is None:
            if self.store is None:
                # The worker keeps its own session apart from request sessions
                self._session = get_async_session_factory()()
            self.outbox_worker = create_outbox_worker(session=self._session, store=self.store)
        return self.outbox_worker

    async def start_all_workers(self):
        logger.info("Starting all background workers")
        outbox_worker = self._get_outbox_worker()
        self.worker_tasks["outbox"] = asyncio.create_task(
            outbox_worker.start_continuous_processing(
                interval_seconds=settings.BACKGROUND_WORKER_OUTBOX_INTERVAL_SECONDS
            )
        )
        self.is_running = True
        logger.info("All background workers started successfully")

    async def stop_all_workers(self):
        logger.info("Stopping all background workers")
        if self.outbox_worker:
            self.outbox_worker.stop_continuous_processing()

        for task in self.worker_tasks.values():
            if not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    pass

        self.worker_tasks.clear()
        if self._session is not None:
            await self._session.close()
            self._session = None
        self.is_running = False
        logger.info("All background workers stopped successfully")

    def get_health_status(self) -> Dict[str, Any]:
        """Get health status of all workers."""
        return {
            "status": "healthy" if self.is_running else "stopped",
            "workers": {
                "outbox": {
                    "status": "running"
                    if self.outbox_worker and self.outbox_worker.is_running
                    else "stopped",
                    "stats": self.outbox_worker.get_stats() if self.outbox_worker else {},
                },
            },
        }


__all__ = ["OutboxWorker", "WorkerManager", "create_outbox_worker"]
