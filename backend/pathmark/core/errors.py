"""
Error taxonomy for the tag store and background jobs.

Store operations raise these instead of leaking SQLAlchemy exceptions so
that callers can tell a missing row from a failed statement.
"""

from typing import Any, Dict, Optional


class PathmarkError(Exception):
    """Base exception for all pathmark errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class NotFoundError(PathmarkError):
    """Raised when a single-row lookup returned nothing."""

    def __init__(self, entity: str, **criteria: Any):
        super().__init__(f"{entity} not found", criteria)
        self.entity = entity


class QueryFailure(PathmarkError):
    """Raised when a read or write against the store failed."""

    def __init__(self, message: str, statement: Optional[str] = None, **kwargs: Any):
        details = {"statement": statement[:200] if statement else None, **kwargs}
        super().__init__(message, details)


class DecodeFailure(PathmarkError):
    """Raised when a stored row cannot be converted into a domain entity."""

    def __init__(self, entity: str, row: Any = None, reason: Optional[str] = None):
        super().__init__(f"Cannot decode {entity} row", {"reason": reason, "row": row})
        self.entity = entity


class ChannelClosed(PathmarkError):
    """Raised when the task channel has been closed for good."""

    def __init__(self, message: str = "Task channel is closed"):
        super().__init__(message)
