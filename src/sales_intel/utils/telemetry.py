"""OpenTelemetry tracing helpers.

``get_tracer()`` returns a no-op tracer unless :func:`configure_telemetry`
has been called, so instrumented code costs nothing by default.

Usage::

    from sales_intel.utils.telemetry import get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("sales_intel.tool.execute") as span:
        span.set_attribute(ATTR_TOOL_NAME, "find_sales_content")

Spans are exported to **stderr**: stdout belongs to the JSON-RPC stream.
"""

from __future__ import annotations

import sys
from typing import Any

from opentelemetry import trace

from sales_intel import __version__

ATTR_TOOL_NAME = "sales_intel.tool.name"
ATTR_TOOL_OUTCOME = "sales_intel.tool.outcome"
ATTR_RPC_METHOD = "sales_intel.rpc.method"
ATTR_HTTP_URL = "sales_intel.http.url"
ATTR_HTTP_STATUS = "sales_intel.http.status"
ATTR_ERROR_KIND = "sales_intel.error.kind"

_INSTRUMENTATION_NAME = "sales_intel"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "sales-intelligence-mcp",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider (requires ``sales-intel[otel]``).

    Console spans are written to stderr; *otlp_endpoint*, when given, adds a
    batched OTLP/gRPC exporter.

    Raises
    ------
    ImportError
        If ``opentelemetry-sdk`` (or, for OTLP, ``opentelemetry-exporter-otlp``)
        is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = "opentelemetry-sdk is required for tracing; install sales-intel[otel]"
        raise ImportError(msg) from exc

    processors = [
        *([_console_processor()] if export_to_console else []),
        *([_otlp_processor(otlp_endpoint)] if otlp_endpoint else []),
    ]

    resource = Resource.create({"service.name": service_name, "service.version": __version__})  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
    provider = TracerProvider(resource=resource)  # pyright: ignore[reportUnknownVariableType]
    for processor in processors:
        provider.add_span_processor(processor)  # pyright: ignore[reportUnknownMemberType]
    trace.set_tracer_provider(provider)  # pyright: ignore[reportUnknownArgumentType]


def _console_processor() -> Any:
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor  # pyright: ignore[reportMissingImports,reportUnknownVariableType]

    return SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr))


def _otlp_processor(endpoint: str) -> Any:
    from opentelemetry.sdk.trace.export import BatchSpanProcessor  # pyright: ignore[reportMissingImports,reportUnknownVariableType]

    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = "opentelemetry-exporter-otlp is required for OTLP export; install sales-intel[otel]"
        raise ImportError(msg) from exc

    return BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint))
