"""Domain error kinds shared by services, repositories and the API layer.

Each error carries an HTTP status used by the exception handlers in
src/app/api/errors.py to render the failure envelope.
"""

from __future__ import annotations


class ContentRebirthError(Exception):
    """Base class for all application errors."""

    status_code: int = 500
    error: str = "Internal error"

    def __init__(self, message: str = "", *, details: dict | None = None) -> None:
        super().__init__(message or self.error)
        self.message = message or self.error
        self.details = details or {}


class ValidationError(ContentRebirthError):
    """Required input missing or malformed. Raised before any external call."""

    status_code = 400
    error = "Validation failed"


class NotFoundError(ContentRebirthError):
    """Lookup by id or external id returned nothing."""

    status_code = 404
    error = "Not found"


class ProviderError(ContentRebirthError):
    """AI or transcription provider failed, timed out, or returned nothing usable.

    Args:
        message: Upstream error message, surfaced to the caller.
        provider: Provider name ("meetstream", "llm").
        upstream_status: HTTP status from the provider, if any.
    """

    status_code = 502
    error = "Provider request failed"

    def __init__(
        self,
        message: str = "",
        *,
        provider: str = "",
        upstream_status: int | None = None,
        details: dict | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.provider = provider
        self.upstream_status = upstream_status


class PersistenceError(ContentRebirthError):
    """Store read or write failed. Surfaced generically."""

    status_code = 500
    error = "Failed to persist data"
