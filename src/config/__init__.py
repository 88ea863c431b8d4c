"""
Configuration package.
"""

from .database import (
    close_database_connections,
    create_engine,
    get_async_session_factory,
    get_database_url,
    get_db_session,
)
from .logging import configure_logging, get_logger
from .settings import settings

__all__ = [
    "settings",
    # Database
    "get_database_url",
    "create_engine",
    "get_async_session_factory",
    "get_db_session",
    "close_database_connections",
    # Logging
    "configure_logging",
    "get_logger",
]
