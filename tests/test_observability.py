"""
Unit Tests for Observability Module

Tests the OpenTelemetry integration with focus on:
1. Graceful degradation (NoOpTracer when disabled)
2. Configuration loading from environment
3. Span attribute helpers

STAFF ENGINEER PATTERNS:
------------------------
1. Environment variable handling tested with patch.dict
2. Singletons reset around every test
3. Zero-overhead when disabled
"""

import pytest
from unittest.mock import patch, MagicMock

from authz_rag_pipeline import observability
from authz_rag_pipeline.observability.config import (
    TracingConfig,
    get_config,
    reset_config,
)
from authz_rag_pipeline.observability.tracer import (
    NoOpTracer,
    NoOpSpan,
    OTelSpan,
    get_tracer,
    reset_tracer,
)
from authz_rag_pipeline.observability.attributes import (
    AUTHZ_PERMISSION,
    AUTHZ_PRINCIPAL,
    AUTHZ_RESOURCE_TYPE,
    RETRIEVAL_COLLECTION_SIZE,
    filter_query_attributes,
)


@pytest.fixture(autouse=True)
def _reset_singletons():
    reset_config()
    reset_tracer()
    yield
    reset_config()
    reset_tracer()


# ---------------------------------------------------------------------------
# CONFIG TESTS
# ---------------------------------------------------------------------------


class TestTracingConfig:
    """Test configuration loading."""

    def test_config_defaults(self):
        """Config should have sensible defaults when env vars not set."""
        with patch.dict("os.environ", {}, clear=True):
            config = TracingConfig.from_env()

            assert config.enabled is False
            assert config.service_name == "authz-rag-pipeline"
            assert config.collector_endpoint is None
            # Query text stays off spans unless explicitly enabled
            assert config.capture_query_text is False

    @pytest.mark.parametrize("value", ["true", "1", "yes", "TRUE"])
    def test_config_enabled_values(self, value):
        with patch.dict("os.environ", {"AUTHZ_TRACING_ENABLED": value}):
            assert TracingConfig.from_env().enabled is True

    @pytest.mark.parametrize("value", ["false", "0", "no", ""])
    def test_config_disabled_values(self, value):
        with patch.dict("os.environ", {"AUTHZ_TRACING_ENABLED": value}):
            assert TracingConfig.from_env().enabled is False

    def test_config_service_name_and_endpoint(self):
        env = {
            "AUTHZ_TRACING_SERVICE_NAME": "rag-api",
            "OTEL_EXPORTER_OTLP_ENDPOINT": "http://collector:4318/v1/traces",
        }
        with patch.dict("os.environ", env):
            config = TracingConfig.from_env()

            assert config.service_name == "rag-api"
            assert config.collector_endpoint == "http://collector:4318/v1/traces"

    def test_empty_endpoint_is_none(self):
        with patch.dict("os.environ", {"OTEL_EXPORTER_OTLP_ENDPOINT": ""}):
            assert TracingConfig.from_env().collector_endpoint is None

    def test_get_config_singleton(self):
        """get_config should return same instance."""
        assert get_config() is get_config()


# ---------------------------------------------------------------------------
# NOOP TRACER TESTS
# ---------------------------------------------------------------------------


class TestNoOpTracer:
    """Test NoOpTracer for graceful degradation."""

    def test_noop_tracer_creates_spans(self):
        with NoOpTracer().start_span("test_span", attributes={"k": "v"}) as span:
            assert isinstance(span, NoOpSpan)

    def test_noop_span_accepts_everything(self):
        with NoOpTracer().start_span("test_span") as span:
            # These should not raise
            span.set_attribute("key", "value")
            span.set_attribute("number", 42)
            span.set_attributes({"a": 1, "b": [1, 2]})
            span.add_event("authz.check", {"authz.resource": "document:doc1"})
            span.set_status("error", "boom")
            span.record_exception(ValueError("boom"))

    def test_noop_span_does_not_swallow_exceptions(self):
        with pytest.raises(ValueError):
            with NoOpTracer().start_span("test_span"):
                raise ValueError("boom")


# ---------------------------------------------------------------------------
# GET_TRACER TESTS
# ---------------------------------------------------------------------------


class TestGetTracer:
    """Test tracer factory."""

    def test_disabled_returns_noop(self):
        with patch.dict("os.environ", {"AUTHZ_TRACING_ENABLED": "false"}):
            assert isinstance(get_tracer(), NoOpTracer)

    def test_enabled_without_provider_returns_noop(self):
        """Tracing enabled but init_tracing never ran: still no-op."""
        with patch.dict("os.environ", {"AUTHZ_TRACING_ENABLED": "true"}):
            with patch(
                "authz_rag_pipeline.observability.tracer.trace.get_tracer_provider",
                return_value=MagicMock(),
            ):
                assert isinstance(get_tracer(), NoOpTracer)

    def test_tracer_is_cached(self):
        with patch.dict("os.environ", {"AUTHZ_TRACING_ENABLED": "false"}):
            assert get_tracer() is get_tracer()


class TestOTelSpan:
    """Test the OTel span wrapper maps our status strings."""

    def test_status_mapping(self):
        from opentelemetry.trace import StatusCode

        inner = MagicMock()
        span = OTelSpan(inner)

        span.set_status("ok")
        span.set_status("error", "denied")

        assert inner.set_status.call_args_list[0].args == (StatusCode.OK, None)
        assert inner.set_status.call_args_list[1].args == (StatusCode.ERROR, "denied")

    def test_attribute_and_exception_passthrough(self):
        inner = MagicMock()
        span = OTelSpan(inner)
        error = RuntimeError("x")

        span.set_attribute("authz.principal", "emilia")
        span.record_exception(error)

        inner.set_attribute.assert_called_once_with("authz.principal", "emilia")
        inner.record_exception.assert_called_once_with(error)

    def test_event_and_bulk_attributes(self):
        inner = MagicMock()
        span = OTelSpan(inner)

        span.set_attributes({"authz.check_count": 3})
        span.add_event("authz.check")

        inner.set_attributes.assert_called_once_with({"authz.check_count": 3})
        inner.add_event.assert_called_once_with("authz.check", attributes={})


# ---------------------------------------------------------------------------
# INIT TRACING TESTS
# ---------------------------------------------------------------------------


class TestInitTracing:
    """Test tracing initialization."""

    def test_disabled_config_does_nothing(self):
        assert observability.init_tracing(TracingConfig(enabled=False)) is False

    def test_shutdown_without_init_is_safe(self):
        observability.shutdown_tracing()


# ---------------------------------------------------------------------------
# ATTRIBUTE HELPERS
# ---------------------------------------------------------------------------


class TestAttributeHelpers:
    """Test span attribute helpers."""

    def test_filter_query_attributes(self):
        attrs = filter_query_attributes(
            principal="emilia",
            permission="read",
            resource_type="document",
            collection_size=3,
        )

        assert attrs == {
            AUTHZ_PRINCIPAL: "emilia",
            AUTHZ_PERMISSION: "read",
            AUTHZ_RESOURCE_TYPE: "document",
            RETRIEVAL_COLLECTION_SIZE: 3,
        }

    def test_attribute_names_namespaced(self):
        assert AUTHZ_PRINCIPAL.startswith("authz.")
        assert RETRIEVAL_COLLECTION_SIZE.startswith("retrieval.")
