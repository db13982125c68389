"""OpenTelemetry bootstrap for the registry service."""

from __future__ import annotations

import os
import threading

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

_ENDPOINT_VARS = ("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", "OTEL_EXPORTER_OTLP_ENDPOINT")

_lock = threading.Lock()
_enabled: bool | None = None


def _otlp_endpoint() -> str | None:
    for name in _ENDPOINT_VARS:
        value = (os.getenv(name) or "").strip()
        if value:
            return value
    return None


def configure_tracing(*, service_name: str) -> bool:
    """Install an OTLP span exporter when an endpoint is configured.

    Returns whether tracing is enabled. Only the first call has an effect.
    ``OTEL_TRACES_EXPORTER=none`` disables tracing outright; naming any
    other exporter without an endpoint is a configuration error.
    """
    global _enabled
    with _lock:
        if _enabled is not None:
            return _enabled

        exporter = (os.getenv("OTEL_TRACES_EXPORTER") or "").strip().lower()
        endpoint = _otlp_endpoint()
        if exporter == "none" or (endpoint is None and not exporter):
            _enabled = False
            return False
        if endpoint is None:
            raise RuntimeError(
                f"OTEL_TRACES_EXPORTER={exporter!r} needs an OTLP endpoint; set "
                f"{' or '.join(_ENDPOINT_VARS)}, or OTEL_TRACES_EXPORTER=none",
            )

        name = (os.getenv("OTEL_SERVICE_NAME") or service_name).strip()
        if not name:
            raise RuntimeError("tracing requires a non-empty service name")

        provider = TracerProvider(resource=Resource.create({"service.name": name}))
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
        trace.set_tracer_provider(provider)
        _enabled = True
        return True


__all__ = ["configure_tracing"]
