"""
Application settings using Pydantic BaseSettings.
"""

from typing import List, Optional, Union

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "Household Services Marketplace"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    # API Configuration
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_PREFIX: str = "/api/v1"
    CORS_ORIGINS: Union[str, List[str]] = "*"
    ACTOR_HEADER: str = "X-Actor-Id"

    # Store
    STORE_BACKEND: str = "sql"

    # Database
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_SERVER: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    DATABASE_URL: Optional[str] = None
    DATABASE_POOL_SIZE: int = 10
    DATABASE_MAX_OVERFLOW: int = 20
    DATABASE_ECHO: bool = False
    DATABASE_POOL_TIMEOUT: int = 30
    DATABASE_POOL_RECYCLE: int = 3600

    # Celery / Redis broker
    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    CELERY_RESULT_BACKEND: str = "redis://localhost:6379/0"
    CELERY_TASK_REJECT_ON_WORKER_LOST: bool = True
    CELERY_TASK_TIME_LIMIT: int = 600  # 10 minutes
    CELERY_TASK_SOFT_TIME_LIMIT: int = 480  # 8 minutes

    # Job lifecycle
    ETA_CLOCK_SKEW_SECONDS: int = 60
    JOB_LIST_MAX_LIMIT: int = 100

    # Messaging
    MESSAGE_PAGE_DEFAULT_LIMIT: int = 50
    MESSAGE_PREVIEW_LENGTH: int = 50

    # Notification dispatch
    DISPATCH_MAX_RETRIES: int = 3
    OUTBOX_BATCH_SIZE: int = 50
    OUTBOX_RETRY_BASE_DELAY_MINUTES: int = 5
    OUTBOX_CLEANUP_DAYS: int = 7

    # Monitoring
    HEALTH_CHECK_TIMEOUT: int = 5

    # Background Workers and Tasks Configuration
    ENABLE_BACKGROUND_WORKERS: bool = False
    BACKGROUND_WORKER_OUTBOX_INTERVAL_SECONDS: int = 30

    # Celery Beat Scheduler Configuration
    CELERY_REDELIVER_DISPATCHES_INTERVAL_SECONDS: int = 120  # 2 minutes
    CELERY_CLEANUP_OUTBOX_EVENTS_INTERVAL_HOURS: int = 12  # 12 hours

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [i.strip() for i in v.split(",")]
        elif isinstance(v, list):
            return v
        return ["*"]

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], info: ValidationInfo) -> str:
        if isinstance(v, str):
            return v
        # Build from individual components if DATABASE_URL is not provided
        values = info.data
        user = values.get("POSTGRES_USER") or "marketplace_user"
        password = values.get("POSTGRES_PASSWORD") or "marketplace_pass"
        host = values.get("POSTGRES_SERVER") or "localhost"
        db = values.get("POSTGRES_DB") or "marketplace"
        return f"postgresql+asyncpg://{user}:{password}@{host}:5432/{db}"

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        if v not in ["development", "staging", "production", "test"]:
            raise ValueError(
                "Environment must be one of: development, staging, production, test"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("STORE_BACKEND")
    @classmethod
    def validate_store_backend(cls, v: str) -> str:
        if v not in ["sql", "memory"]:
            raise ValueError("Store backend must be one of: sql, memory")
        return v

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
        "validate_default": True,
    }


# Global settings instance
settings = Settings()
