"""OpenTelemetry setup for the portal.

Spans come from the @traced service methods and from FastAPI
instrumentation. Exporter is chosen by TELEMETRY_EXPORTER: console for
development, otlp for a gRPC collector, none to sample without exporting.
Telemetry never blocks startup: setup failures are logged and the portal
runs untraced.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SpanExporter,
)
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

if TYPE_CHECKING:
    from portal.core.config import Settings

logger = logging.getLogger(__name__)

EXPORTERS = ("console", "otlp", "none")
# Probes hit health every few seconds; their spans are noise.
UNTRACED_URLS = "/api/v1/health"


def build_exporter(kind: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Return the span exporter for kind, or None for 'none'.

    'otlp' without an endpoint and unknown kinds fall back to console.
    """
    if kind == "none":
        return None
    if kind == "otlp":
        if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint, insecure=otlp_endpoint.startswith("http://")
            )
        logger.warning("TELEMETRY_EXPORTER is otlp but no endpoint is set; using console")
    elif kind not in EXPORTERS:
        logger.warning("Unknown telemetry exporter %r; using console", kind)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Owns the tracer provider for the life of the process."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        exporter: str = "console",
        otlp_endpoint: str | None = None,
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.exporter = exporter
        self.otlp_endpoint = otlp_endpoint
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> TelemetryConfig:
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            exporter=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )

    def setup_telemetry(self) -> TracerProvider | None:
        """Install the global tracer provider; None if setup failed."""
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(self.sample_rate),
            )
            exporter = build_exporter(self.exporter, self.otlp_endpoint)
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception:
            logger.exception("Telemetry setup failed; continuing without tracing")
            return None
        self.tracer_provider = provider
        logger.info(
            "Tracing enabled for %s %s (exporter=%s, sample_rate=%s)",
            self.service_name,
            self.service_version,
            self.exporter,
            self.sample_rate,
        )
        return provider

    def instrument(self, app: FastAPI) -> None:
        """Trace requests and stamp trace ids onto log records."""
        if self.tracer_provider is None:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app, tracer_provider=self.tracer_provider, excluded_urls=UNTRACED_URLS
            )
            LoggingInstrumentor().instrument(
                tracer_provider=self.tracer_provider, set_logging_format=True
            )
        except Exception:
            logger.exception("Telemetry instrumentation failed")

    def shutdown(self) -> None:
        """Flush pending spans (the bulk import spans can be long)."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Telemetry shutdown failed")
        self.tracer_provider = None


_telemetry: TelemetryConfig | None = None
_telemetry_lock = threading.RLock()


def get_telemetry() -> TelemetryConfig | None:
    with _telemetry_lock:
        return _telemetry


def set_telemetry(telemetry: TelemetryConfig | None) -> None:
    global _telemetry
    with _telemetry_lock:
        _telemetry = telemetry
