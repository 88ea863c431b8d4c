"""
Celery application configuration and setup.
"""

from celery import Celery
from celery.schedules import crontab

from src.config.settings import settings

celery_app = Celery(
    "household_jobs",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["src.background.tasks.dispatch_tasks"],
)

celery_app.conf.update(
    task_routes={
        "redeliver_dispatches_task": {"queue": "dispatch"},
        "cleanup_outbox_events_task": {"queue": "maintenance"},
    },
    # Worker configuration
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,
    worker_hijack_root_logger=False,
    # Task configuration
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=3600,
    task_default_queue="default",
    task_soft_time_limit=settings.CELERY_TASK_SOFT_TIME_LIMIT,
    task_time_limit=settings.CELERY_TASK_TIME_LIMIT,
    task_acks_late=False,
    task_reject_on_worker_lost=settings.CELERY_TASK_REJECT_ON_WORKER_LOST,
    beat_schedule={
        "redeliver-dispatches": {
            "task": "redeliver_dispatches_task",
            "schedule": float(settings.CELERY_REDELIVER_DISPATCHES_INTERVAL_SECONDS),
            "options": {"queue": "dispatch"},
        },
        "cleanup-outbox-events": {
            "task": "cleanup_outbox_events_task",
            "schedule": crontab(
                minute=0,
                hour=f"*/{settings.CELERY_CLEANUP_OUTBOX_EVENTS_INTERVAL_HOURS}",
            ),
            "options": {"queue": "maintenance"},
        },
    },
)

if __name__ == "__main__":
    celery_app.start()
