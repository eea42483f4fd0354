"""OpenTelemetry setup for the ReAct agent."""

from __future__ import annotations

import os
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

DEFAULT_SERVICE_NAME = "react-agent"


def setup_telemetry(service_name: str = DEFAULT_SERVICE_NAME) -> trace.Tracer:
    """Install a tracer provider and, when configured, an OTLP/HTTP exporter.

    Environment variables:
        - OTEL_SERVICE_NAME overrides ``service_name``
        - OTEL_EXPORTER_OTLP_ENDPOINT enables export; without it spans stay in-process
        - OTEL_EXPORTER_OTLP_HEADERS is read by the exporter itself

    Returns:
        Tracer ready for use
    """
    resource = Resource.create({SERVICE_NAME: os.getenv("OTEL_SERVICE_NAME", service_name)})
    trace_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(trace_provider)

    exporter = _create_otel_exporter()
    if exporter:
        trace_provider.add_span_processor(BatchSpanProcessor(exporter))

    return trace.get_tracer(service_name)


def _create_otel_exporter() -> Optional[OTLPSpanExporter]:
    # OTLPSpanExporter() reads OTEL_EXPORTER_OTLP_* env vars automatically
    if not os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT"):
        return None
    return OTLPSpanExporter()


def get_tracer(service_name: str = DEFAULT_SERVICE_NAME) -> trace.Tracer:
    """Get a tracer, setting up telemetry if needed."""
    if isinstance(trace.get_tracer_provider(), trace.ProxyTracerProvider):
        setup_telemetry(service_name)
    return trace.get_tracer(service_name)
