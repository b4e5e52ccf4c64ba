"""Exception hierarchy for the Stability client.

Every error raised by this package derives from ``StabilityError`` so callers
can catch the whole family with one clause. Network failures are the
exception: connection, TLS and timeout errors surface as the underlying
``httpx`` exceptions, unchanged.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from stability_client.api.models import ApiErrorBody


class StabilityError(Exception):
    """Base class for all client errors."""

    pass


class ConfigurationError(StabilityError):
    """Raised when the client cannot be assembled.

    Examples: the API key environment variable is missing, a request was
    built without a path, or an unsupported HTTP method was requested.
    """

    pass


class ImageBuilderError(StabilityError, ValueError):
    """Raised when a generation parameter or parameter combination is invalid.

    Attributes:
        value: The offending value, or None for missing/conflicting fields
    """

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class ApiError(StabilityError):
    """Raised when the API answers with a status other than 200.

    Attributes:
        status_code: HTTP status returned by the API
        error: Structured error body, when the response carried one
        body: Raw response text
    """

    def __init__(self, status_code: int, error: ApiErrorBody | None = None, body: str = ""):
        self.status_code = status_code
        self.error = error
        self.body = body
        if error is not None:
            detail = f"{error.name}: {error.message} (id={error.id})"
        else:
            detail = body or "<empty body>"
        super().__init__(f"API request failed with status {status_code}: {detail}")


class DecodeError(StabilityError):
    """Raised when a response body or an artifact payload cannot be decoded."""

    pass
