"""Tests for classified API errors."""

from __future__ import annotations

import pytest

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


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            AuthError(),
            RateLimitError(10),
            NotFoundError("https://x/y"),
            ServerError(500),
            MalformedResponseError("bad"),
            RequestTimeoutError(100),
            NetworkFailureError("dns"),
        ],
    )
    def test_all_are_classified(self, error: ClassifiedApiError) -> None:
        assert isinstance(error, ClassifiedApiError)
        assert isinstance(error.kind, ErrorKind)
        assert str(error) == error.message

    def test_every_kind_has_a_subclass(self) -> None:
        kinds = {cls.kind for cls in ClassifiedApiError.__subclasses__()}
        assert kinds == set(ErrorKind)


class TestRetryable:
    def test_transient_kinds(self) -> None:
        assert RateLimitError(5).retryable
        assert ServerError(502).retryable
        assert RequestTimeoutError(100).retryable
        assert NetworkFailureError("reset").retryable

    def test_permanent_kinds(self) -> None:
        assert not AuthError().retryable
        assert not NotFoundError("u").retryable
        assert not MalformedResponseError("html").retryable


class TestMessages:
    def test_auth(self) -> None:
        assert "API key" in str(AuthError())

    def test_rate_limit_mentions_wait(self) -> None:
        error = RateLimitError(45)
        assert error.retry_after_seconds == 45
        assert "45 seconds" in str(error)

    def test_timeout(self) -> None:
        assert str(RequestTimeoutError(10000)) == "Request timeout after 10000ms"

    def test_malformed_keeps_preview(self) -> None:
        error = MalformedResponseError("bad", "<html>", status_code=200)
        assert error.preview == "<html>"
        assert error.status_code == 200
