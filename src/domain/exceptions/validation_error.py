"""
Validation-related domain exceptions.
"""


class ValidationError(Exception):
    """Raised when input is malformed or out of range. Not retriable."""

    pass
