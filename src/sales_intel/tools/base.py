"""Shared tool plumbing: the fetch outcome tri-state and common renderers.

A handler's data-fetch step returns one of::

    Ok(data)                 # the API answered with usable data
    Degraded(data, reason)   # no API or API failed; data comes from a fallback
    Failed(error)            # API failed and there is no fallback

so that fallback decisions are explicit branches in the handler.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import ValidationError

from sales_intel.http.errors import ClassifiedApiError, MalformedResponseError

if TYPE_CHECKING:
    from sales_intel.http.client import ResilientHttpClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_API_REASON = "No API configured"


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T


@dataclass(frozen=True)
class Degraded(Generic[T]):
    data: T
    reason: str
    error: ClassifiedApiError | None = None
    url: str | None = None


@dataclass(frozen=True)
class Failed:
    error: ClassifiedApiError
    url: str


FetchOutcome = Ok[T] | Degraded[T] | Failed


async def fetch_outcome(
    client: ResilientHttpClient | None,
    endpoint: str,
    body: dict[str, Any],
    *,
    parse: Callable[[Any], T],
    fallback: Callable[[], T] | None = None,
) -> FetchOutcome[T]:
    """Call *endpoint* and classify the result into the fetch tri-state.

    *parse* turns the JSON payload into domain data; a ``ValueError``,
    ``KeyError`` or ``TypeError`` from it means the payload is not shaped
    the way this tool expects and counts as a malformed response.

    Without a *client* the outcome is ``Degraded`` with fallback data.
    Callers with no fallback must handle ``client is None`` themselves.
    """
    if client is None:
        if fallback is None:
            msg = f"No API client configured and no fallback for {endpoint}"
            raise RuntimeError(msg)
        return Degraded(fallback(), NO_API_REASON)

    url = client.url_for(endpoint)
    try:
        payload = await client.request(endpoint, body)
        try:
            data = parse(payload)
        except (ValueError, KeyError, TypeError, IndexError, AttributeError) as exc:
            detail = exc.errors()[0]["msg"] if isinstance(exc, ValidationError) else str(exc)
            msg = f"Unexpected response format from {endpoint}: {detail}"
            raise MalformedResponseError(msg, repr(payload)[:200]) from exc
    except ClassifiedApiError as exc:
        if fallback is None:
            return Failed(exc, url)
        logger.warning("Falling back to demo data for %s: %s (%s)", endpoint, exc, exc.kind.value)
        return Degraded(fallback(), str(exc), exc, url)
    return Ok(data)


def unwrap_text_payload(payload: Any) -> Any:
    """Return the JSON embedded in an MCP-style ``{content: [{type, text}]}`` payload.

    Payloads without that envelope are returned unchanged.
    """
    if isinstance(payload, dict) and isinstance(payload.get("content"), list):
        content = payload["content"]
        if not content:
            msg = "empty content list"
            raise ValueError(msg)
        text = content[0]["text"]
        return json.loads(text)
    return payload


def render_degraded_notice(outcome: Degraded[Any], *, title: str = "API Connection Error") -> str:
    """Explain why demo data is shown. Empty when running in demo mode."""
    if outcome.error is None:
        return ""
    lines = [
        f"# {title}",
        "",
        "Failed to get data from the sales intelligence API:",
        f"- **URL**: {outcome.url or 'unknown'}",
        f"- **Error**: {outcome.error.message}",
        f"- **Kind**: {outcome.error.kind.value}",
        f"- **Status**: {outcome.error.status_code or 'Unknown'}",
    ]
    if outcome.error.retryable:
        lines.append("- **Retry**: this failure is transient; retrying later may succeed")
    lines += ["", "Falling back to demo data...", "", ""]
    return "\n".join(lines)


def plural(count: int, word: str, suffix: str = "s") -> str:
    return f"{count} {word}{'' if count == 1 else suffix}"


def filter_summary(pairs: list[tuple[str, str | None]]) -> str:
    """``"solution: X, segment: Y"`` for the pairs that have a value."""
    return ", ".join(f"{label}: {value}" for label, value in pairs if value)
