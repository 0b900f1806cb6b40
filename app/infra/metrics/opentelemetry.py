from __future__ import annotations

"""OpenTelemetry bootstrap helpers

Spans are created by the services through ``trace.get_tracer``; until
:func:`configure_tracing` installs a provider they are no-ops.
"""

import inspect
import threading
from typing import TYPE_CHECKING, Awaitable, Callable

from opentelemetry import propagate, trace
from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased
from opentelemetry.semconv.attributes.service_attributes import SERVICE_NAME, SERVICE_VERSION
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from app.core.config import AppBaseSettings, settings as global_settings
from app.core.logging import logger

if TYPE_CHECKING:
    from fastapi import FastAPI
    from opentelemetry.sdk.trace.export import SpanExporter

_TRACER_CONFIGURED = False
_INSTRUMENTED_APPS: set[int] = set()


def configure_tracing(
    *,
    exporter: "SpanExporter | None" = None,
    service_name: str | None = None,
    settings: AppBaseSettings | None = None,
) -> Callable[[], None] | None:
    """Configure the global tracer provider and return a shutdown hook.

    The function is idempotent: subsequent calls reuse the existing provider.
    """
    global _TRACER_CONFIGURED
    if _TRACER_CONFIGURED:
        return lambda: None

    cfg = settings or global_settings
    if not cfg.TRACING_ENABLED:
        return None

    resource = Resource.create(
        {
            SERVICE_NAME: service_name or cfg.APP_NAME,
            SERVICE_VERSION: cfg.VERSION,
            "deployment.environment": cfg.ENVIRONMENT,
        }
    )

    provider = TracerProvider(
        resource=resource,
        sampler=ParentBased(TraceIdRatioBased(cfg.TRACING_SAMPLE_RATIO)),
    )

    if exporter is None:
        exporter = OTLPSpanExporter(
            endpoint=str(cfg.OTLP_ENDPOINT),
            headers=dict(cfg.OTLP_HEADERS),
            timeout=cfg.OTLP_TIMEOUT_SECONDS,
        )

    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    propagate.set_global_textmap(CompositePropagator([TraceContextTextMapPropagator(), W3CBaggagePropagator()]))

    _TRACER_CONFIGURED = True
    logger.bind(event="tracing", endpoint=str(cfg.OTLP_ENDPOINT)).info("Tracing configured")

    def _shutdown() -> None:
        global _TRACER_CONFIGURED
        provider.shutdown()
        _TRACER_CONFIGURED = False

    return _shutdown


def _instrument_fastapi(app: "FastAPI") -> Callable[[], None]:
    if id(app) in _INSTRUMENTED_APPS:
        return lambda: None

    FastAPIInstrumentor.instrument_app(app)
    _INSTRUMENTED_APPS.add(id(app))

    def _uninstrument() -> None:
        try:
            FastAPIInstrumentor.uninstrument_app(app)
        finally:
            _INSTRUMENTED_APPS.discard(id(app))

    return _uninstrument


class ObservabilityController:
    """Coordinates telemetry setup across the application."""

    def __init__(self, settings: AppBaseSettings) -> None:
        self._settings = settings
        self._shutdown_callbacks: list[Callable[[], None] | Callable[[], Awaitable[None]]] = []
        self._configured = False
        self._lock = threading.Lock()

    def startup(self, app: "FastAPI | None" = None) -> None:
        with self._lock:
            if self._configured or not self._settings.TRACING_ENABLED:
                return

            shutdown = configure_tracing(settings=self._settings)
            if shutdown:
                self._shutdown_callbacks.append(shutdown)

            if app is not None:
                self._shutdown_callbacks.append(_instrument_fastapi(app))

            self._configured = True

    async def shutdown(self) -> None:
        while self._shutdown_callbacks:
            callback = self._shutdown_callbacks.pop()
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:  # pragma: no cover - shutdown must reach every callback
                logger.exception("Observability shutdown error")

        self._configured = False


__all__ = ["configure_tracing", "ObservabilityController"]
