"""
Prometheus metrics for system monitoring.
"""

import os

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)

from src.config.logging import get_logger

logger = get_logger(__name__)

registry = CollectorRegistry()
prometheus_multiproc_dir = os.getenv("PROMETHEUS_MULTIPROC_DIR")

if prometheus_multiproc_dir:
    if os.path.isdir(prometheus_multiproc_dir) and os.access(
        prometheus_multiproc_dir, os.W_OK
    ):
        multiprocess.MultiProcessCollector(registry)
    else:
        logger.warning(
            "PROMETHEUS_MULTIPROC_DIR is not a writable directory, "
            "using single process registry",
            path=prometheus_multiproc_dir,
        )


def get_registry():
    """Get the current registry."""
    return registry


def _get_metric(metric_class, *args, **kwargs):
    return metric_class(*args, **kwargs, registry=get_registry())


# Lifecycle metrics
JOB_TRANSITIONS = _get_metric(
    Counter,
    "job_transitions_total",
    "Total number of committed job lifecycle operations",
    ["operation", "status"],
)

LIFECYCLE_REJECTIONS = _get_metric(
    Counter,
    "lifecycle_rejections_total",
    "Total number of rejected lifecycle operations",
    ["operation", "error_type"],
)

APPLICATIONS_SUBMITTED = _get_metric(
    Counter,
    "applications_submitted_total",
    "Total number of job applications submitted",
)

# Dispatch metrics
NOTIFICATIONS_WRITTEN = _get_metric(
    Counter,
    "notifications_written_total",
    "Notification writes by outcome (created or duplicate)",
    ["type", "outcome"],
)

DISPATCH_FAILURES = _get_metric(
    Counter,
    "dispatch_failures_total",
    "Total number of events whose dispatch failed",
    ["event_type"],
)

MESSAGES_SENT = _get_metric(
    Counter,
    "messages_sent_total",
    "Total number of chat messages sent",
    ["message_type"],
)

# Worker metrics
WORKER_TASKS_PROCESSED = _get_metric(
    Counter,
    "worker_tasks_processed_total",
    "Total number of tasks processed by workers",
    ["worker_type", "task_type", "status"],
)

# API metrics
API_REQUESTS = _get_metric(
    Counter,
    "api_requests_total",
    "Total number of API requests",
    ["method", "endpoint", "status_code"],
)

API_REQUEST_DURATION = _get_metric(
    Histogram,
    "api_request_duration_seconds",
    "Time spent processing API requests",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
)

ERRORS_TOTAL = _get_metric(
    Counter,
    "errors_total",
    "Total number of errors",
    ["error_type", "component"],
)


def record_job_transition(operation: str, status: str):
    """Record a committed lifecycle operation."""
    JOB_TRANSITIONS.labels(operation=operation, status=status).inc()


def record_lifecycle_rejection(operation: str, error_type: str):
    """Record a lifecycle operation rejected by validation, rules or a race."""
    LIFECYCLE_REJECTIONS.labels(operation=operation, error_type=error_type).inc()


def record_application_submitted():
    APPLICATIONS_SUBMITTED.inc()


def record_notification_write(notification_type: str, created: bool):
    """Record a notification insert and whether it was deduplicated."""
    NOTIFICATIONS_WRITTEN.labels(
        type=notification_type, outcome="created" if created else "duplicate"
    ).inc()


def record_dispatch_failure(event_type: str):
    DISPATCH_FAILURES.labels(event_type=event_type).inc()


def record_message_sent(message_type: str):
    MESSAGES_SENT.labels(message_type=message_type).inc()


def record_worker_task(worker_type: str, task_type: str, status: str):
    """Record worker task processing metric."""
    WORKER_TASKS_PROCESSED.labels(
        worker_type=worker_type, task_type=task_type, status=status
    ).inc()


def record_api_request(method: str, endpoint: str, status_code: int, duration: float):
    """Record API request count and latency."""
    API_REQUESTS.labels(method=method, endpoint=endpoint, status_code=status_code).inc()
    API_REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)


def record_error(error_type: str, component: str):
    """Record error metric."""
    ERRORS_TOTAL.labels(error_type=error_type, component=component).inc()


def get_metrics():
    """Get all metrics in Prometheus format."""
    return generate_latest(registry)


def get_metrics_content_type():
    """Get the content type for metrics."""
    return CONTENT_TYPE_LATEST
