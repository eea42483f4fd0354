"""Observability utilities for the ReAct agent.

- @observe decorator for automatic span creation
- OpenTelemetry setup with an optional OTLP/HTTP exporter
- Token usage tracking and aggregation
"""

from .observe import observe


# Lazy imports keep the SDK and exporter off the import path until tracing is wanted
def setup_telemetry(*args, **kwargs):
    """Set up OpenTelemetry tracing."""
    from .otel_setup import setup_telemetry as _setup_telemetry
    return _setup_telemetry(*args, **kwargs)


def get_tracer(*args, **kwargs):
    """Get OpenTelemetry tracer."""
    from .otel_setup import get_tracer as _get_tracer
    return _get_tracer(*args, **kwargs)


__all__ = ["observe", "setup_telemetry", "get_tracer"]
