"""ResilientHttpClient: one base URL, fixed timeout, classified failures."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from sales_intel import SERVER_NAME, __version__
from sales_intel.http.errors import (
    AuthError,
    ClassifiedApiError,
    MalformedResponseError,
    NetworkFailureError,
    NotFoundError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
)
from sales_intel.utils.telemetry import ATTR_HTTP_STATUS, ATTR_HTTP_URL, get_tracer

_tracer = get_tracer(__name__)

DEFAULT_SCHEME = "Bearer"
KNOWN_SCHEMES = ("Bearer ", "MCP-Key ")
DEFAULT_RETRY_AFTER = 60
PREVIEW_CHARS = 200
USER_AGENT = f"{SERVER_NAME}/{__version__}"

_HTML_MARKERS = ("<!doctype", "<html")


class ClientConfig(BaseModel):
    """Connection settings for the backend API.

    ``base_url`` must already include any shared path prefix
    (e.g. ``https://host/api/mcp``); endpoints are appended verbatim.
    """

    model_config = ConfigDict(frozen=True)

    base_url: str
    credential: str
    timeout_ms: int = 10_000


class ConnectionStatus(BaseModel):
    """Result of :meth:`ResilientHttpClient.check_connection`."""

    connected: bool
    base_url: str
    version: str = __version__
    error: str | None = None


class ResilientHttpClient:
    """POSTs JSON to a single backend and classifies every failure.

    Usage::

        async with ResilientHttpClient(config) as client:
            payload = await client.request("/find_sales_content", {"query": "..."})

    No retries are performed; callers inspect the raised
    :class:`~sales_intel.http.errors.ClassifiedApiError` to decide.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._log = logger if logger is not None else logging.getLogger(__name__)
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> ResilientHttpClient:
        # asyncio.wait_for owns the total deadline; httpx per-phase timeouts stay off.
        self._client = httpx.AsyncClient(
            transport=self._transport,
            timeout=None,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *_: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "ResilientHttpClient must be used as an async context manager"
            raise RuntimeError(msg)
        return self._client

    def url_for(self, endpoint: str) -> str:
        """Compose the target URL. No normalisation of path segments."""
        return f"{self._config.base_url}{endpoint}"

    def authorization_header(self) -> str:
        credential = self._config.credential
        if credential.startswith(KNOWN_SCHEMES):
            return credential
        return f"{DEFAULT_SCHEME} {credential}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": self.authorization_header(),
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    async def request(self, endpoint: str, body: dict[str, Any] | None = None) -> Any:
        """POST *body* as JSON to ``base_url + endpoint`` and return the parsed JSON.

        Raises
        ------
        ClassifiedApiError
            One of the subclasses in :mod:`sales_intel.http.errors`.
        """
        url = self.url_for(endpoint)
        self._log.debug("API request starting: %s", url)

        with _tracer.start_as_current_span("sales_intel.http.request") as span:
            span.set_attribute(ATTR_HTTP_URL, url)
            response = await self._send(url, body or {})
            span.set_attribute(ATTR_HTTP_STATUS, response.status_code)
            return self._classify(url, response)

    async def _send(self, url: str, body: dict[str, Any]) -> httpx.Response:
        timeout_s = self._config.timeout_ms / 1000
        try:
            return await asyncio.wait_for(
                self._http().post(url, json=body, headers=self._headers()),
                timeout=timeout_s,
            )
        except (TimeoutError, httpx.TimeoutException) as exc:
            self._log.error("API request timed out after %dms: %s", self._config.timeout_ms, url)
            raise RequestTimeoutError(self._config.timeout_ms) from exc
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as exc:
            self._log.error("API request failed: %s (url=%s)", exc, url)
            raise NetworkFailureError(str(exc) or type(exc).__name__) from exc

    def _classify(self, url: str, response: httpx.Response) -> Any:
        status = response.status_code
        if not response.is_success:
            error = self._status_error(url, response)
            self._log.error(
                "API request failed: %s (url=%s status=%d body=%r)",
                error.message,
                url,
                status,
                _preview(response.text),
            )
            raise error

        text = response.text
        preview = _preview(text)
        if text.lstrip().lower().startswith(_HTML_MARKERS):
            self._log.error("API returned HTML instead of JSON (url=%s status=%d)", url, status)
            msg = (
                "API returned an HTML page instead of JSON. The endpoint is likely wrong, "
                "the request was redirected to a login page, or the server is misconfigured"
            )
            raise MalformedResponseError(msg, preview, status_code=status)

        content_type = response.headers.get("content-type", "")
        if "json" not in content_type.lower():
            self._log.error(
                "API returned non-JSON content type %r (url=%s body=%r)", content_type, url, preview
            )
            msg = f"API returned unexpected content type: {content_type or 'none'}"
            raise MalformedResponseError(msg, preview, status_code=status)

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            self._log.error("API returned invalid JSON: %s (url=%s body=%r)", exc, url, preview)
            msg = f"API returned invalid JSON: {exc.msg}"
            raise MalformedResponseError(msg, preview, status_code=status) from exc

    @staticmethod
    def _status_error(url: str, response: httpx.Response) -> ClassifiedApiError:
        status = response.status_code
        if status == 401:
            return AuthError()
        if status == 429:
            return RateLimitError(_retry_after(response.headers.get("retry-after")))
        if status == 404:
            return NotFoundError(url)
        return ServerError(status)

    async def check_connection(self) -> ConnectionStatus:
        """Probe ``/health``; never raises."""
        try:
            await self.request("/health", {})
        except ClassifiedApiError as exc:
            return ConnectionStatus(connected=False, base_url=self._config.base_url, error=str(exc))
        return ConnectionStatus(connected=True, base_url=self._config.base_url)


def _retry_after(value: str | None) -> int:
    if value is None:
        return DEFAULT_RETRY_AFTER
    try:
        return int(value.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER


def _preview(text: str, max_len: int = PREVIEW_CHARS) -> str:
    text = text.strip()
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
