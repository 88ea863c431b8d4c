"""
Error handling for the API.

Domain errors map to client errors; anything else is logged and
returned as a generic 500 without internals.
"""

import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from src.config.logging import get_logger
from src.domain.exceptions import (
    ConflictError,
    DuplicateApplicationError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from src.infrastructure.monitoring.metrics import record_error

logger = get_logger(__name__)


def _error(status_code: int, error: str, message: str, error_type: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "type": error_type, **extra},
    )


def _describe(errors) -> str:
    parts = []
    for error in errors:
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return "; ".join(parts) or "Invalid request"


def add_error_handlers(app: FastAPI) -> None:
    """Add custom error handlers to FastAPI app."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.warning("Validation error", error=str(exc), path=request.url.path)
        return _error(400, "Validation Error", str(exc), "validation_error")

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(
        request: Request, exc: RequestValidationError
    ):
        message = _describe(exc.errors())
        logger.warning("Request validation error", error=message, path=request.url.path)
        return _error(400, "Validation Error", message, "validation_error")

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
        logger.info(
            "Invalid transition",
            error=str(exc),
            current_status=exc.current_status,
            path=request.url.path,
        )
        return _error(
            400,
            "Invalid Transition",
            str(exc),
            "invalid_transition",
            current_status=exc.current_status,
            required_statuses=exc.required_statuses,
        )

    @app.exception_handler(DuplicateApplicationError)
    async def duplicate_application_handler(
        request: Request, exc: DuplicateApplicationError
    ):
        logger.info(
            "Duplicate application",
            job_id=exc.job_id,
            worker_id=exc.worker_id,
            path=request.url.path,
        )
        return _error(400, "Duplicate Application", str(exc), "duplicate_application")

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(404, "Not Found", str(exc), "not_found")

    @app.exception_handler(ConflictError)
    async def conflict_handler(request: Request, exc: ConflictError):
        logger.info("Concurrent update conflict", job_id=exc.job_id, path=request.url.path)
        return _error(409, "Conflict", str(exc), "conflict", retriable=exc.retriable)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error", error=str(exc), path=request.url.path)
        record_error(type(exc).__name__, "database")
        return _error(500, "Database Error", "A database error occurred", "database_error")

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return _error(exc.status_code, "HTTP Error", str(exc.detail), "http_error")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            path=request.url.path,
            traceback=traceback.format_exc(),
        )
        record_error(type(exc).__name__, "api")
        return _error(
            500, "Internal Server Error", "An unexpected error occurred", "internal_error"
        )
