# src/taskodoro/errors.py

"""
Core error taxonomy.

All errors are raised synchronously before any state is touched, so a caller
that catches one can assume nothing changed.
"""

from __future__ import annotations


class CoreError(Exception):
    """Base class for rejections the caller should present to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CoreError):
    """Missing or empty required input."""


class NotFound(CoreError):
    """Referenced task id does not exist."""


class Forbidden(CoreError):
    """Ownership mismatch on a mutating task operation."""


class InvalidState(CoreError):
    """Pomodoro operation not allowed in the current timer state."""
