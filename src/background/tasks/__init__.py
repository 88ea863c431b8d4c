"""
Background tasks package.
"""

from .dispatch_tasks import cleanup_outbox_events_task, redeliver_dispatches_task

__all__ = [
    "cleanup_outbox_events_task",
    "redeliver_dispatches_task",
]
