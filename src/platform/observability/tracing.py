"""
OpenTelemetry tracing configuration.

Provides:
- Tracer provider with OTLP export (Jaeger/Tempo) when an endpoint is configured
- Auto-instrumentation for FastAPI and SQLAlchemy

Use cases open their own spans through `trace.get_tracer(__name__)`; until
setup() installs a provider those spans are no-ops.
"""

from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import DEPLOYMENT_ENVIRONMENT, SERVICE_NAME, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from src.platform.config.core_setting import settings


class TracingConfig:
    """
    Usage:
        tracing = TracingConfig()
        tracing.setup()
        tracing.instrument_sqlalchemy(engine=database.engine)
    """

    def __init__(
        self,
        *,
        service_name: str | None = None,
        otlp_endpoint: str | None = None,
        enable_console: bool | None = None,
    ) -> None:
        self.service_name = service_name or settings.SERVICE_NAME
        self.otlp_endpoint = otlp_endpoint or settings.OTEL_EXPORTER_OTLP_ENDPOINT
        self.enable_console = (
            settings.OTEL_CONSOLE_EXPORT if enable_console is None else enable_console
        )
        self._provider: TracerProvider | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.otlp_endpoint or self.enable_console)

    def _span_processors(self) -> list[SpanProcessor]:
        processors: list[SpanProcessor] = []
        if self.otlp_endpoint:
            processors.append(BatchSpanProcessor(OTLPSpanExporter(endpoint=self.otlp_endpoint)))
        if self.enable_console:
            processors.append(BatchSpanProcessor(ConsoleSpanExporter()))
        return processors

    def setup(self) -> None:
        """Install the SDK tracer provider; nothing happens without an exporter."""
        if not self.enabled:
            return

        resource = Resource(
            attributes={
                SERVICE_NAME: self.service_name,
                DEPLOYMENT_ENVIRONMENT: settings.DEPLOY_ENV,
            }
        )
        # Sampling decisions are left to the collector
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)
        for processor in self._span_processors():
            self._provider.add_span_processor(processor)
        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        # AsyncEngine is instrumented through the sync engine it wraps
        SQLAlchemyInstrumentor().instrument(engine=getattr(engine, 'sync_engine', engine))

    def shutdown(self) -> None:
        if self._provider:
            self._provider.shutdown()
