"""Tests for OpenTelemetry tracing helpers."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from opentelemetry import trace

from medusa_mcp.utils.telemetry import ATTR_TOOL_NAME, configure_telemetry, get_tracer


class TestGetTracer:
    def test_returns_tracer(self) -> None:
        assert isinstance(get_tracer("test.module"), trace.Tracer)
        assert isinstance(get_tracer(), trace.Tracer)

    def test_noop_span_accepts_attributes(self) -> None:
        tracer = get_tracer("test.noop")
        with tracer.start_as_current_span("mcp.tools/call") as span:
            span.set_attribute(ATTR_TOOL_NAME, "manage_medusa_admin_orders")


class TestConfigureTelemetry:
    def test_raises_without_sdk(self) -> None:
        with patch.dict("sys.modules", {"opentelemetry.sdk.resources": None}):
            with pytest.raises(ImportError, match="opentelemetry-sdk"):
                configure_telemetry()

    def test_installs_provider_with_console_exporter(self) -> None:
        pytest.importorskip("opentelemetry.sdk.trace")
        from opentelemetry.sdk.trace import TracerProvider

        with patch.object(trace, "set_tracer_provider") as set_provider:
            configure_telemetry(service_name="test-svc", export_to_console=True)

        (provider,), _ = set_provider.call_args
        assert isinstance(provider, TracerProvider)
        assert provider.resource.attributes["service.name"] == "test-svc"

    def test_otlp_raises_without_exporter(self) -> None:
        pytest.importorskip("opentelemetry.sdk.trace")
        modules = {"opentelemetry.exporter.otlp.proto.grpc.trace_exporter": None}
        with patch.dict("sys.modules", modules), patch.object(trace, "set_tracer_provider"):
            with pytest.raises(ImportError, match="opentelemetry-exporter-otlp"):
                configure_telemetry(otlp_endpoint="http://localhost:4317")
