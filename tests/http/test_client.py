"""Tests for ResilientHttpClient using httpx.MockTransport."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

import httpx
import pytest

from sales_intel.http.client import USER_AGENT, ClientConfig, ResilientHttpClient
from sales_intel.http.errors import (
    AuthError,
    ErrorKind,
    MalformedResponseError,
    NetworkFailureError,
    NotFoundError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
)

BASE_URL = "https://api.example.com/api/mcp"


def _client(
    handler: Callable[[httpx.Request], Any],
    *,
    credential: str = "secret",
    timeout_ms: int = 10_000,
    logger: Any = None,
) -> ResilientHttpClient:
    config = ClientConfig(base_url=BASE_URL, credential=credential, timeout_ms=timeout_ms)
    return ResilientHttpClient(config, transport=httpx.MockTransport(handler), logger=logger)


def _ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"ok": True})


class TestRequestComposition:
    async def test_posts_json_to_base_url_plus_endpoint(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"results": []})

        async with _client(handler) as client:
            payload = await client.request("/find_sales_content", {"query": "fraud"})

        assert payload == {"results": []}
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == f"{BASE_URL}/find_sales_content"
        assert json.loads(request.content) == {"query": "fraud"}

    async def test_endpoint_is_appended_verbatim(self) -> None:
        async with _client(_ok) as client:
            assert client.url_for("/standalone-plays") == f"{BASE_URL}/standalone-plays"
            assert client.url_for("x") == f"{BASE_URL}x"

    async def test_standard_headers(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        async with _client(handler) as client:
            await client.request("/health")

        headers = seen[0].headers
        assert headers["content-type"] == "application/json"
        assert headers["accept"] == "application/json"
        assert headers["user-agent"] == USER_AGENT
        assert USER_AGENT == "sales-intelligence-mcp/1.0.0"

    async def test_request_outside_context_raises(self) -> None:
        client = _client(_ok)
        with pytest.raises(RuntimeError, match="async context manager"):
            await client.request("/health")


class TestAuthorizationHeader:
    @pytest.mark.parametrize(
        ("credential", "expected"),
        [
            ("abc123", "Bearer abc123"),
            ("Bearer xyz", "Bearer xyz"),
            ("MCP-Key k1", "MCP-Key k1"),
        ],
    )
    async def test_scheme_handling(self, credential: str, expected: str) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        async with _client(handler, credential=credential) as client:
            await client.request("/health")

        assert seen[0].headers["authorization"] == expected

    def test_header_without_request(self) -> None:
        assert _client(_ok, credential="Bearer xyz").authorization_header() == "Bearer xyz"


class TestStatusMapping:
    async def test_401_is_auth(self) -> None:
        async with _client(lambda r: httpx.Response(401, json={"error": "no"})) as client:
            with pytest.raises(AuthError) as info:
                await client.request("/find_sales_content", {})
        assert info.value.kind is ErrorKind.AUTH
        assert info.value.status_code == 401
        assert not info.value.retryable

    async def test_429_uses_retry_after(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, headers={"retry-after": "45"}, json={})

        async with _client(handler) as client:
            with pytest.raises(RateLimitError) as info:
                await client.request("/find_sales_content", {})
        assert info.value.retry_after_seconds == 45
        assert info.value.retryable

    async def test_429_defaults_to_sixty_seconds(self) -> None:
        async with _client(lambda r: httpx.Response(429, json={})) as client:
            with pytest.raises(RateLimitError) as info:
                await client.request("/find_sales_content", {})
        assert info.value.retry_after_seconds == 60

    async def test_429_non_numeric_retry_after(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, headers={"retry-after": "soon"}, json={})

        async with _client(handler) as client:
            with pytest.raises(RateLimitError) as info:
                await client.request("/find_sales_content", {})
        assert info.value.retry_after_seconds == 60

    async def test_404_is_not_found(self) -> None:
        async with _client(lambda r: httpx.Response(404, text="missing")) as client:
            with pytest.raises(NotFoundError) as info:
                await client.request("/nope", {})
        assert info.value.url == f"{BASE_URL}/nope"
        assert info.value.kind is ErrorKind.NOT_FOUND

    @pytest.mark.parametrize("status", [400, 500, 502, 503])
    async def test_other_status_is_server_error(self, status: int) -> None:
        async with _client(lambda r: httpx.Response(status, text="boom")) as client:
            with pytest.raises(ServerError) as info:
                await client.request("/find_sales_content", {})
        assert info.value.status_code == status
        assert str(status) in str(info.value)

    async def test_failure_is_logged_with_url_and_status(self) -> None:
        logger = MagicMock()
        async with _client(lambda r: httpx.Response(500, text="x" * 1000), logger=logger) as client:
            with pytest.raises(ServerError):
                await client.request("/find_sales_content", {})

        args = logger.error.call_args[0]
        assert f"{BASE_URL}/find_sales_content" in args
        assert 500 in args
        preview = args[-1]
        assert len(preview) <= 200


class TestBodyClassification:
    async def test_html_body_is_malformed_without_parsing(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                text="  <!DOCTYPE html><html><body>Login</body></html>",
                headers={"content-type": "application/json"},
            )

        async with _client(handler) as client:
            with patch("sales_intel.http.client.json.loads") as loads:
                with pytest.raises(MalformedResponseError) as info:
                    await client.request("/find_sales_content", {})
            loads.assert_not_called()

        assert "HTML" in str(info.value)
        assert info.value.preview.startswith("<!DOCTYPE html>")
        assert info.value.kind is ErrorKind.MALFORMED_RESPONSE

    async def test_html_tag_marker_is_case_insensitive(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<HTML><body/></HTML>", headers={"content-type": "text/html"})

        async with _client(handler) as client:
            with pytest.raises(MalformedResponseError, match="HTML"):
                await client.request("/find_sales_content", {})

    async def test_redirect_to_login_page_is_malformed(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/login":
                return httpx.Response(
                    200, text="<!DOCTYPE html><html>Sign in</html>", headers={"content-type": "text/html"}
                )
            return httpx.Response(302, headers={"location": "https://api.example.com/login"})

        async with _client(handler) as client:
            with pytest.raises(MalformedResponseError, match="HTML") as info:
                await client.request("/find_sales_content", {})

        assert info.value.status_code == 200

    async def test_non_json_content_type(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="plain words", headers={"content-type": "text/plain"})

        async with _client(handler) as client:
            with pytest.raises(MalformedResponseError, match="content type"):
                await client.request("/find_sales_content", {})

    async def test_invalid_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="{not json", headers={"content-type": "application/json"})

        async with _client(handler) as client:
            with pytest.raises(MalformedResponseError, match="invalid JSON") as info:
                await client.request("/find_sales_content", {})
        assert info.value.preview == "{not json"

    async def test_json_media_type_with_charset(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                text='{"a": 1}',
                headers={"content-type": "application/json; charset=utf-8"},
            )

        async with _client(handler) as client:
            assert await client.request("/x", {}) == {"a": 1}


class TestTransportFailures:
    async def test_connect_error_is_network_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(NetworkFailureError, match="refused") as info:
                await client.request("/find_sales_content", {})
        assert info.value.retryable

    async def test_timeout_aborts_near_deadline(self) -> None:
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        started = time.monotonic()
        async with _client(slow, timeout_ms=50) as client:
            with pytest.raises(RequestTimeoutError) as info:
                await client.request("/find_sales_content", {})
        elapsed = time.monotonic() - started

        assert info.value.timeout_ms == 50
        assert "50ms" in str(info.value)
        assert elapsed < 2

    async def test_deadline_above_httpx_default_is_honoured(self) -> None:
        async def silent(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
            await reader.read()
            writer.close()

        server = await asyncio.start_server(silent, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        config = ClientConfig(base_url=f"http://127.0.0.1:{port}", credential="k", timeout_ms=5_600)
        try:
            started = time.monotonic()
            async with ResilientHttpClient(config) as client:
                with pytest.raises(RequestTimeoutError):
                    await client.request("/find_sales_content", {})
            elapsed = time.monotonic() - started
        finally:
            server.close()

        assert 5.4 <= elapsed < 8

    async def test_httpx_phase_timeouts_disabled(self) -> None:
        async with _client(_ok, timeout_ms=30_000) as client:
            assert client._http().timeout == httpx.Timeout(None)

    async def test_httpx_timeout_is_classified_as_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("read timed out", request=request)

        async with _client(handler, timeout_ms=1234) as client:
            with pytest.raises(RequestTimeoutError, match="1234ms"):
                await client.request("/find_sales_content", {})


class TestCheckConnection:
    async def test_connected(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json={"status": "ok"})

        async with _client(handler) as client:
            status = await client.check_connection()

        assert status.connected
        assert status.base_url == BASE_URL
        assert status.error is None
        assert seen == [f"{BASE_URL}/health"]

    async def test_failure_never_raises(self) -> None:
        async with _client(lambda r: httpx.Response(503, text="down")) as client:
            status = await client.check_connection()

        assert not status.connected
        assert status.error is not None
        assert "503" in status.error
