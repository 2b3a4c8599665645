"""
Error types for Tempo Planner.

Persistence failures are the only errors the productivity core surfaces;
everything else it does is total over well-formed input.
"""

from typing import Optional


class TempoError(Exception):
    """Base class for all Tempo Planner errors."""


class PersistenceError(TempoError):
    """
    A read or write against the backing store failed.

    Attributes:
        operation: Short description of what was being attempted
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation

    def __str__(self) -> str:
        message = super().__str__()
        if self.operation:
            return f"{self.operation}: {message}"
        return message
