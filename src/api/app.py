"""
FastAPI application factory.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import use_in_memory_store
from src.api.middleware import LoggingMiddleware, add_error_handlers
from src.api.routes import (
    admin_router,
    health_router,
    jobs_router,
    messages_router,
    notifications_router,
    webhooks_router,
)
from src.background.workers import WorkerManager
from src.config.database import close_database_connections
from src.config.logging import get_logger
from src.config.settings import settings
from src.infrastructure.memory import InMemoryStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start background workers when enabled; release connections on shutdown."""
    logger.info(
        "Application startup",
        environment=settings.ENVIRONMENT,
        store_backend=settings.STORE_BACKEND,
    )

    worker_manager = None
    if settings.ENABLE_BACKGROUND_WORKERS:
        worker_manager = WorkerManager(store=getattr(app.state, "memory_store", None))
        await worker_manager.start_all_workers()
    app.state.worker_manager = worker_manager

    try:
        yield
    finally:
        if worker_manager is not None:
            await worker_manager.stop_all_workers()
        await close_database_connections()
        logger.info("Application shutdown")


def create_app(store: Optional[InMemoryStore] = None) -> FastAPI:
    """Create and configure FastAPI application.

    Passing a store, or setting STORE_BACKEND=memory, serves every
    repository from process memory instead of the database.
    """

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Job lifecycle and notification service for household jobs",
        openapi_url=f"{settings.API_PREFIX}/openapi.json" if settings.DEBUG else None,
        docs_url=f"{settings.API_PREFIX}/docs" if settings.DEBUG else None,
        redoc_url=f"{settings.API_PREFIX}/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    add_error_handlers(app)
    LoggingMiddleware(app)

    if store is not None or settings.STORE_BACKEND == "memory":
        use_in_memory_store(app, store)

    for router in (
        health_router,
        jobs_router,
        notifications_router,
        messages_router,
        webhooks_router,
        admin_router,
    ):
        app.include_router(router, prefix=settings.API_PREFIX)

    return app
