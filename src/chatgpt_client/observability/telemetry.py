"""
telemetry.py

PURPOSE: Opt-in OpenTelemetry tracing for requests made by the client.
DEPENDENCIES: opentelemetry-api, opentelemetry-sdk, opentelemetry-exporter-otlp (all optional)

ARCHITECTURE NOTES:
Modules grab a tracer at import time with get_tracer(__name__). Until
init_telemetry() has run with tracing enabled (and the otel packages are
importable), every span is a no-op, so library users pay nothing unless
they opt in.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chatgpt_client.config import OpenTelemetrySettings

logger = logging.getLogger(__name__)

_initialized = False
_tracer_provider: object | None = None


@runtime_checkable
class Span(Protocol):
    """The slice of the otel span API the client uses."""

    def __enter__(self) -> Span: ...
    def __exit__(self, *args: object) -> None: ...
    def set_attribute(self, key: str, value: object) -> None: ...
    def record_exception(self, exception: BaseException) -> None: ...


@runtime_checkable
class Tracer(Protocol):
    def start_as_current_span(self, name: str, **kwargs: object) -> Span: ...


class NoOpSpan:
    """Span that records nothing."""

    def __enter__(self) -> Span:
        return self

    def __exit__(self, *args: object) -> None:
        pass

    def set_attribute(self, key: str, value: object) -> None:  # noqa: ARG002
        pass

    def record_exception(self, exception: BaseException) -> None:  # noqa: ARG002
        pass


class NoOpTracer:
    def start_as_current_span(
        self,
        name: str,  # noqa: ARG002
        **kwargs: object,  # noqa: ARG002
    ) -> Span:
        return NoOpSpan()


class LazyTracer:
    """
    Tracer handle that resolves the real tracer when a span is started.

    Lets modules create their tracer before init_telemetry() runs.
    """

    def __init__(self, name: str) -> None:
        self._name = name

    def _resolve(self) -> Tracer:
        if not _initialized or _tracer_provider is None:
            return NoOpTracer()

        try:
            from opentelemetry import trace

            return trace.get_tracer(self._name)  # type: ignore[return-value]
        except ImportError:
            return NoOpTracer()

    def start_as_current_span(self, name: str, **kwargs: object) -> Span:
        return self._resolve().start_as_current_span(name, **kwargs)


def init_telemetry(settings: OpenTelemetrySettings) -> bool:
    """
    Set up tracing from settings.

    Safe to call when the otel packages are missing; tracing then stays
    off. Repeated calls are ignored.

    Returns:
        True if spans will be exported
    """
    global _initialized, _tracer_provider

    if _initialized:
        logger.debug("Telemetry already initialized")
        return _tracer_provider is not None

    _initialized = True

    if not settings.enabled:
        logger.debug("Telemetry disabled")
        return False

    try:
        from opentelemetry import trace
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
    except ImportError:
        logger.warning(
            "OpenTelemetry packages not installed. "
            "Install with: pip install chatgpt-client[observability]"
        )
        return False

    provider = TracerProvider(resource=Resource.create({"service.name": settings.service_name}))

    if settings.endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

            provider.add_span_processor(
                BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.endpoint))
            )
            logger.info(f"OTLP exporter configured: {settings.endpoint}")
        except ImportError:
            logger.warning("OTLP exporter not available, falling back to console")
            provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
    else:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer_provider = provider

    logger.info(f"Telemetry initialized: service={settings.service_name}")
    return True


def get_tracer(name: str) -> Tracer:
    """Return a lazily resolved tracer for a module (pass __name__)."""
    return LazyTracer(name)


def shutdown_telemetry() -> None:
    """Flush pending spans and reset. Safe to call when never initialized."""
    global _initialized, _tracer_provider

    if _tracer_provider is not None:
        shutdown = getattr(_tracer_provider, "shutdown", None)
        if callable(shutdown):
            shutdown()
            logger.debug("Telemetry shutdown complete")

    _tracer_provider = None
    _initialized = False
