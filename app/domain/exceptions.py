"""
Domain-level exceptions for the typeahead core.

Provider failures and cancellations are recovered at the orchestration
boundary and never reach rendering code as exceptions.
"""

from typing import Optional


class DomainException(Exception):
    """Base exception for all domain-level errors."""
    pass


class ValidationError(DomainException):
    """Raised when domain validation rules are violated."""
    pass


class ConfigurationError(DomainException):
    """Raised when configuration is invalid or missing."""
    pass


class ProviderError(DomainException):
    """Raised when an asynchronous suggestion source fails."""

    def __init__(self, query: str, message: str, cause: Optional[BaseException] = None):
        self.query = query
        self.cause = cause

        detail = f"Suggestion provider failed for query '{query}': {message}"
        if cause is not None:
            detail += f" ({type(cause).__name__})"

        super().__init__(detail)


class QueryCancelledError(DomainException):
    """Raised by a provider whose call was superseded by a newer query."""

    def __init__(self, query: str):
        self.query = query
        super().__init__(f"Suggestion request for '{query}' was cancelled")


__all__ = [
    "DomainException",
    "ValidationError",
    "ConfigurationError",
    "ProviderError",
    "QueryCancelledError",
]
