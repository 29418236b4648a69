"""Fixtures for tool tests: a real client over httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from sales_intel.http.client import ClientConfig, ResilientHttpClient

API_BASE = "https://sales.example.com/api/mcp"


@pytest.fixture
def make_client() -> Callable[[Callable[[httpx.Request], Any]], ResilientHttpClient]:
    """Build a client whose requests are answered by *handler*; enter it with ``async with``."""

    def factory(handler: Callable[[httpx.Request], Any]) -> ResilientHttpClient:
        config = ClientConfig(base_url=API_BASE, credential="test-key", timeout_ms=2000)
        return ResilientHttpClient(config, transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def text_envelope() -> Callable[[Any], dict[str, Any]]:
    """Wrap a payload the way the backend does: JSON text inside an MCP content list."""

    def wrap(payload: Any) -> dict[str, Any]:
        return {"content": [{"type": "text", "text": json.dumps(payload)}]}

    return wrap
