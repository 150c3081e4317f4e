"""
Application error taxonomy.

Every error the core raises on purpose derives from ``AppError`` and carries
the HTTP status code the API layer should answer with.
"""

from typing import Optional


class AppError(Exception):
    """Base class for expected, user-facing errors."""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(AppError):
    """A referenced quote or notification does not exist."""

    status_code = 404


class ValidationError(AppError):
    """Malformed input that cannot be clamped to a safe default."""

    status_code = 400


class BatchWriteError(AppError):
    """An atomic batch write was rejected; nothing from the batch was stored."""

    status_code = 500
