"""
Tracer Factory and NoOp Implementations

get_tracer() hands out either an OpenTelemetry-backed tracer or a
NoOpTracer. Callers only ever see the protocols below, so filter and eval
code is identical whether or not tracing is switched on.

Spans carry per-query counters as attributes and one event per permission
check, which is enough to reconstruct why a document was or was not
returned without logging document text.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Protocol

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import StatusCode


# ---------------------------------------------------------------------------
# PROTOCOLS
# ---------------------------------------------------------------------------


class SpanProtocol(Protocol):
    """What instrumented code may do with a span."""

    def set_attribute(self, key: str, value: Any) -> None:
        ...

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        ...

    def add_event(self, name: str, attributes: Mapping[str, Any] | None = None) -> None:
        ...

    def set_status(self, status: str, description: str | None = None) -> None:
        """Set span status ("ok" or "error")."""
        ...

    def record_exception(self, exception: BaseException) -> None:
        ...


class TracerProtocol(Protocol):
    """Protocol for tracer operations."""

    @contextmanager
    def start_span(self, name: str, attributes: Mapping[str, Any] | None = None) -> Iterator[SpanProtocol]:
        """Start a new span as context manager."""
        ...


# ---------------------------------------------------------------------------
# NOOP IMPLEMENTATIONS
# ---------------------------------------------------------------------------


class NoOpSpan:
    """Span that discards everything."""

    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        pass

    def add_event(self, name: str, attributes: Mapping[str, Any] | None = None) -> None:
        pass

    def set_status(self, status: str, description: str | None = None) -> None:
        pass

    def record_exception(self, exception: BaseException) -> None:
        pass


class NoOpTracer:
    """Tracer used when tracing is disabled."""

    @contextmanager
    def start_span(self, name: str, attributes: Mapping[str, Any] | None = None) -> Iterator[NoOpSpan]:
        yield NoOpSpan()


# ---------------------------------------------------------------------------
# OPENTELEMETRY ADAPTERS
# ---------------------------------------------------------------------------


_STATUS_CODES = {"ok": StatusCode.OK, "error": StatusCode.ERROR}


class OTelSpan:
    """Adapts an OpenTelemetry span to SpanProtocol."""

    def __init__(self, span: Any):
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        self._span.set_attributes(dict(attributes))

    def add_event(self, name: str, attributes: Mapping[str, Any] | None = None) -> None:
        self._span.add_event(name, attributes=dict(attributes or {}))

    def set_status(self, status: str, description: str | None = None) -> None:
        self._span.set_status(_STATUS_CODES.get(status, StatusCode.ERROR), description)

    def record_exception(self, exception: BaseException) -> None:
        self._span.record_exception(exception)


class OTelTracer:
    """Adapts an OpenTelemetry tracer to TracerProtocol."""

    def __init__(self, tracer: Any):
        self._tracer = tracer

    @contextmanager
    def start_span(self, name: str, attributes: Mapping[str, Any] | None = None) -> Iterator[OTelSpan]:
        # Callers record failures themselves, once, with the failing resource
        with self._tracer.start_as_current_span(
            name,
            attributes=dict(attributes or {}),
            record_exception=False,
            set_status_on_exception=False,
        ) as span:
            yield OTelSpan(span)


# ---------------------------------------------------------------------------
# FACTORY
# ---------------------------------------------------------------------------


_tracer: TracerProtocol | None = None


def _build_tracer(service_name: str) -> TracerProtocol:
    from authz_rag_pipeline.observability.config import get_config

    if not get_config().enabled:
        return NoOpTracer()

    # init_tracing() installs an SDK provider; without one spans go nowhere
    if not isinstance(trace.get_tracer_provider(), TracerProvider):
        return NoOpTracer()

    return OTelTracer(trace.get_tracer(service_name))


def get_tracer(service_name: str = "authz-rag-pipeline") -> TracerProtocol:
    """
    Get the process-wide tracer, building it on first use.

    Args:
        service_name: Instrumentation scope name (used on first call only)
    """
    global _tracer
    if _tracer is None:
        _tracer = _build_tracer(service_name)
    return _tracer


def reset_tracer() -> None:
    """Forget the cached tracer (after init_tracing, and in tests)."""
    global _tracer
    _tracer = None
