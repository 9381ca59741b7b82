"""
Custom exceptions for the application.
"""
from typing import Optional


class LingoCardsException(Exception):
    """Base exception for all LingoCards application exceptions."""
    pass


class ValidationError(LingoCardsException):
    """Raised when validation fails."""
    pass


class NotFoundError(LingoCardsException):
    """Raised when a requested resource is not found."""
    pass


class ConflictError(LingoCardsException):
    """Raised when there's a conflict (e.g., a concurrent update)."""
    pass


class GoneError(LingoCardsException):
    """Raised when a resource existed but can no longer be recovered."""
    pass


class RateLimitError(LingoCardsException):
    """Raised when a caller exceeds its request budget."""

    def __init__(self, message: str, retry_after: Optional[int] = None):
        super().__init__(message)
        self.retry_after = retry_after
