"""
Domain exceptions package.
"""

from .dispatch_error import DispatchFailure
from .lifecycle_error import (
    ApplicationsClosedError,
    ConflictError,
    DuplicateApplicationError,
    InvalidTransitionError,
    LifecycleError,
    NotFoundError,
)
from .validation_error import ValidationError

__all__ = [
    "ApplicationsClosedError",
    "ConflictError",
    "DispatchFailure",
    "DuplicateApplicationError",
    "InvalidTransitionError",
    "LifecycleError",
    "NotFoundError",
    "ValidationError",
]
