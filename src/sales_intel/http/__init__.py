"""Outbound HTTP layer: resilient API client and classified errors."""

from sales_intel.http.client import ClientConfig, ConnectionStatus, ResilientHttpClient
from sales_intel.http.errors import (
    AuthError,
    ClassifiedApiError,
    ErrorKind,
    MalformedResponseError,
    NetworkFailureError,
    NotFoundError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
)

__all__ = [
    "AuthError",
    "ClassifiedApiError",
    "ClientConfig",
    "ConnectionStatus",
    "ErrorKind",
    "MalformedResponseError",
    "NetworkFailureError",
    "NotFoundError",
    "RateLimitError",
    "RequestTimeoutError",
    "ResilientHttpClient",
    "ServerError",
]
