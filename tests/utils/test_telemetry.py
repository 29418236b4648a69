"""Tests for OpenTelemetry tracing helpers."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from opentelemetry import trace

from sales_intel.utils.telemetry import (
    _INSTRUMENTATION_NAME,
    ATTR_ERROR_KIND,
    ATTR_HTTP_STATUS,
    ATTR_HTTP_URL,
    ATTR_RPC_METHOD,
    ATTR_TOOL_NAME,
    ATTR_TOOL_OUTCOME,
    configure_telemetry,
    get_tracer,
)


class TestGetTracer:
    def test_returns_tracer(self) -> None:
        assert isinstance(get_tracer("test.module"), trace.Tracer)

    def test_default_name(self) -> None:
        assert isinstance(get_tracer(), trace.Tracer)

    def test_noop_span(self) -> None:
        """Without the SDK configured, spans accept attributes and do nothing."""
        with get_tracer("test.noop").start_as_current_span("sales_intel.tool.execute") as span:
            span.set_attribute(ATTR_TOOL_NAME, "find_sales_content")


class TestConfigureTelemetry:
    def test_raises_without_sdk(self) -> None:
        with patch.dict("sys.modules", {"opentelemetry.sdk.resources": None}):
            with pytest.raises(ImportError, match="opentelemetry-sdk"):
                configure_telemetry()

    def test_installs_provider_with_service_name(self) -> None:
        try:
            from opentelemetry.sdk.trace import TracerProvider
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch("sales_intel.utils.telemetry.trace.set_tracer_provider") as set_provider:
            configure_telemetry(service_name="test-svc", export_to_console=True)

        provider = set_provider.call_args[0][0]
        assert isinstance(provider, TracerProvider)
        assert provider.resource.attributes["service.name"] == "test-svc"
        assert provider.resource.attributes["service.version"] == "1.0.0"

    def test_otlp_raises_without_exporter(self) -> None:
        try:
            import opentelemetry.sdk.trace  # noqa: F401
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch.dict(
            "sys.modules",
            {"opentelemetry.exporter.otlp.proto.grpc.trace_exporter": None},
        ):
            with pytest.raises(ImportError, match="opentelemetry-exporter-otlp"):
                configure_telemetry(export_to_console=False, otlp_endpoint="http://localhost:4317")


class TestAttributeConstants:
    @pytest.mark.parametrize(
        "name",
        [ATTR_TOOL_NAME, ATTR_TOOL_OUTCOME, ATTR_RPC_METHOD, ATTR_HTTP_URL, ATTR_HTTP_STATUS, ATTR_ERROR_KIND],
    )
    def test_constants_are_namespaced(self, name: str) -> None:
        assert name.startswith("sales_intel.")

    def test_instrumentation_name(self) -> None:
        assert _INSTRUMENTATION_NAME == "sales_intel"
