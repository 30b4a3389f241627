"""
Observability Module - OpenTelemetry Integration

Provides tracing for filter queries and eval runs.

USAGE:
------
# At application startup:
from authz_rag_pipeline.observability import init_tracing

init_tracing()  # No-op unless AUTHZ_TRACING_ENABLED=true

# In code that needs tracing:
from authz_rag_pipeline.observability import get_tracer

tracer = get_tracer()
with tracer.start_span("my_operation", attributes={"key": "value"}) as span:
    # ... do work ...
    span.set_attribute("result", "success")
"""

from __future__ import annotations

import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from authz_rag_pipeline.observability.config import (
    TracingConfig,
    get_config,
    reset_config,
)
from authz_rag_pipeline.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)
from authz_rag_pipeline.observability.attributes import (
    # Authz
    AUTHZ_PRINCIPAL,
    AUTHZ_PERMISSION,
    AUTHZ_RESOURCE_TYPE,
    AUTHZ_CHECK_COUNT,
    AUTHZ_DENIED_COUNT,
    AUTHZ_UNRESOLVED_COUNT,
    AUTHZ_FAILED_RESOURCE,
    AUTHZ_CHECK_EVENT,
    AUTHZ_RESOURCE,
    AUTHZ_PERMISSIONSHIP,
    # Retrieval
    RETRIEVAL_QUERY_TEXT,
    RETRIEVAL_COLLECTION_SIZE,
    RETRIEVAL_CANDIDATE_COUNT,
    RETRIEVAL_ALLOWED_COUNT,
    RETRIEVAL_ALLOWED_DOC_IDS,
    # Eval
    EVAL_GATE_NAME,
    EVAL_GATE_STATUS,
    EVAL_CASE_ID,
    EVAL_CASE_PASSED,
    # Helpers
    filter_query_attributes,
)

logger = logging.getLogger(__name__)

_tracing_initialized = False


def init_tracing(config: TracingConfig | None = None) -> bool:
    """
    Initialize OpenTelemetry tracing.

    This should be called once at application startup. Spans go to an
    OTLP/HTTP collector when one is configured, otherwise to the console.

    Args:
        config: Optional config (uses env vars if not provided)

    Returns:
        True if tracing was initialized, False if disabled or failed
    """
    global _tracing_initialized
    if _tracing_initialized:
        return True

    config = config or get_config()

    if not config.enabled:
        logger.debug("Tracing disabled")
        return False

    try:
        if config.collector_endpoint:
            from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

            exporter = OTLPSpanExporter(endpoint=config.collector_endpoint)
            logger.info(f"Exporting spans to: {config.collector_endpoint}")
        else:
            exporter = ConsoleSpanExporter()
            logger.info("Exporting spans to console")

        provider = TracerProvider(resource=Resource.create({SERVICE_NAME: config.service_name}))
        provider.add_span_processor(BatchSpanProcessor(exporter))
        trace.set_tracer_provider(provider)

        reset_tracer()
        _tracing_initialized = True
        return True

    except Exception as e:
        logger.error(f"Failed to initialize tracing: {e}")
        return False


def shutdown_tracing() -> None:
    """Flush spans and reset tracing state."""
    global _tracing_initialized

    if not _tracing_initialized:
        return

    try:
        provider = trace.get_tracer_provider()
        if hasattr(provider, "shutdown"):
            provider.shutdown()
    except Exception as e:
        logger.warning(f"Error shutting down tracing: {e}")

    reset_tracer()
    reset_config()
    _tracing_initialized = False


__all__ = [
    # Initialization
    "init_tracing",
    "shutdown_tracing",
    # Config
    "TracingConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
    # Attributes - Authz
    "AUTHZ_PRINCIPAL",
    "AUTHZ_PERMISSION",
    "AUTHZ_RESOURCE_TYPE",
    "AUTHZ_CHECK_COUNT",
    "AUTHZ_DENIED_COUNT",
    "AUTHZ_UNRESOLVED_COUNT",
    "AUTHZ_FAILED_RESOURCE",
    "AUTHZ_CHECK_EVENT",
    "AUTHZ_RESOURCE",
    "AUTHZ_PERMISSIONSHIP",
    # Attributes - Retrieval
    "RETRIEVAL_QUERY_TEXT",
    "RETRIEVAL_COLLECTION_SIZE",
    "RETRIEVAL_CANDIDATE_COUNT",
    "RETRIEVAL_ALLOWED_COUNT",
    "RETRIEVAL_ALLOWED_DOC_IDS",
    # Attributes - Eval
    "EVAL_GATE_NAME",
    "EVAL_GATE_STATUS",
    "EVAL_CASE_ID",
    "EVAL_CASE_PASSED",
    # Helpers
    "filter_query_attributes",
]
