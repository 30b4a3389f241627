"""
OpenTelemetry Tracing Configuration

Loads tracing settings from environment variables.
"""

import os
from dataclasses import dataclass


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "false").lower() in ("true", "1", "yes")


@dataclass
class TracingConfig:
    """Configuration for OpenTelemetry tracing.

    Environment Variables:
        AUTHZ_TRACING_ENABLED: Enable tracing (default: false)
        AUTHZ_TRACING_SERVICE_NAME: Service name on spans (default: authz-rag-pipeline)
        OTEL_EXPORTER_OTLP_ENDPOINT: OTLP/HTTP collector (optional, console if empty)
        AUTHZ_TRACING_CAPTURE_QUERY_TEXT: Put raw query text on spans (default: false)

    PRIVACY WARNING:
        Query text is user input and may itself be sensitive. It is only
        recorded when AUTHZ_TRACING_CAPTURE_QUERY_TEXT is explicitly enabled.
    """

    enabled: bool = False
    service_name: str = "authz-rag-pipeline"
    collector_endpoint: str | None = None
    capture_query_text: bool = False

    @classmethod
    def from_env(cls) -> "TracingConfig":
        return cls(
            enabled=_env_flag("AUTHZ_TRACING_ENABLED"),
            service_name=os.environ.get("AUTHZ_TRACING_SERVICE_NAME", "authz-rag-pipeline"),
            collector_endpoint=os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT") or None,
            capture_query_text=_env_flag("AUTHZ_TRACING_CAPTURE_QUERY_TEXT"),
        )


# Loaded on first get_config()
_config: TracingConfig | None = None


def get_config() -> TracingConfig:
    """Get the global tracing config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = TracingConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None
