"""Exception hierarchy for the f1rag pipeline."""

from typing import Any


class F1RagError(Exception):
    """Base exception for all f1rag errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidInputError(F1RagError, ValueError):
    """Raised for empty or malformed arguments. Never retried."""


class BackendUnavailableError(F1RagError, ConnectionError):
    """Raised when an embedding, vector or generation backend cannot be reached."""


class RagProcessingError(F1RagError):
    """Raised when the orchestrated query pipeline fails.

    The originating exception is kept on ``cause`` (and chained via
    ``raise ... from``) so callers can diagnose the failure.
    """

    def __init__(self, message: str, cause: BaseException | None = None, **kwargs):
        self.cause = cause
        super().__init__(message, **kwargs)


class EmbeddingError(RagProcessingError):
    """Raised when the query cannot be embedded even after fallback."""


class QueryCancelledError(F1RagError):
    """Raised when the caller cancels a query before its turn is recorded."""
