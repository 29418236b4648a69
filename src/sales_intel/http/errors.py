"""Classified API errors raised by :class:`~sales_intel.http.client.ResilientHttpClient`.

The client never lets a raw transport exception escape. Every failure is
mapped onto one of the kinds below so handlers can branch on it.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """The failure modes an outbound API call can end in."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    MALFORMED_RESPONSE = "malformed_response"
    TIMEOUT = "timeout"
    NETWORK_FAILURE = "network_failure"


_RETRYABLE = frozenset({
    ErrorKind.RATE_LIMIT,
    ErrorKind.SERVER_ERROR,
    ErrorKind.TIMEOUT,
    ErrorKind.NETWORK_FAILURE,
})


class ClassifiedApiError(Exception):
    """Base error for all classified API failures."""

    kind: ErrorKind

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def retryable(self) -> bool:
        """Whether a caller may sensibly retry the same request later."""
        return self.kind in _RETRYABLE


class AuthError(ClassifiedApiError):
    """The backend rejected the credential (HTTP 401)."""

    kind = ErrorKind.AUTH

    def __init__(self) -> None:
        super().__init__("Authentication failed. Please check your API key", status_code=401)


class RateLimitError(ClassifiedApiError):
    """The backend is throttling us (HTTP 429)."""

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, retry_after_seconds: int) -> None:
        self.retry_after_seconds = retry_after_seconds
        super().__init__(
            f"Rate limit exceeded. Please wait {retry_after_seconds} seconds",
            status_code=429,
        )


class NotFoundError(ClassifiedApiError):
    """The endpoint or resource does not exist on the backend (HTTP 404)."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Endpoint not found: {url}", status_code=404)


class ServerError(ClassifiedApiError):
    """Any other non-success status code."""

    kind = ErrorKind.SERVER_ERROR

    def __init__(self, status_code: int) -> None:
        super().__init__(f"API request failed ({status_code})", status_code=status_code)


class MalformedResponseError(ClassifiedApiError):
    """A success status with a body that is not usable JSON."""

    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, message: str, preview: str = "", *, status_code: int | None = None) -> None:
        self.preview = preview
        super().__init__(message, status_code=status_code)


class RequestTimeoutError(ClassifiedApiError):
    """No response arrived within the configured timeout."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, timeout_ms: int) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(f"Request timeout after {timeout_ms}ms")


class NetworkFailureError(ClassifiedApiError):
    """Connection refused, DNS failure, TLS error and the like."""

    kind = ErrorKind.NETWORK_FAILURE

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Network failure: {detail}")
