"""
Health check implementations for the application.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.logging import get_logger
from src.config.settings import settings

logger = get_logger(__name__)


class HealthChecker:
    """Health checker for application components."""

    def __init__(self, db_session: Optional[AsyncSession] = None):
        self.db_session = db_session
        self.checks: Dict[str, Callable[[], Awaitable[Dict[str, Any]]]] = {
            "store": self._check_store,
        }

    async def run_health_checks(self) -> Dict[str, Any]:
        """Run all health checks."""
        results = {}

        for check_name, check_func in self.checks.items():
            try:
                results[check_name] = await asyncio.wait_for(
                    check_func(), timeout=settings.HEALTH_CHECK_TIMEOUT
                )
            except Exception as e:
                logger.error("Health check failed", check_name=check_name, error=str(e))
                results[check_name] = {"status": "error", "error": str(e)}

        return results

    async def _check_store(self) -> Dict[str, Any]:
        """Check the entity store."""
        if self.db_session is None:
            return {"status": "healthy", "backend": "memory"}

        start_time = time.perf_counter()
        result = await self.db_session.execute(text("SELECT 1"))
        result.scalar()

        return {
            "status": "healthy",
            "backend": "sql",
            "response_time_ms": round((time.perf_counter() - start_time) * 1000, 2),
        }

    async def check_readiness(self) -> bool:
        """Check if the service is ready to receive traffic."""
        results = await self.run_health_checks()
        return all(check.get("status") == "healthy" for check in results.values())

    async def get_overall_health(self) -> Dict[str, Any]:
        """Get overall application health status."""
        results = await self.run_health_checks()
        healthy = all(check.get("status") == "healthy" for check in results.values())

        return {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "services": results,
        }
