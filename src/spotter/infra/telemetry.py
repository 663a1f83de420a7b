"""OpenTelemetry bootstrap: tracing initialisation and span names.

When ``TracingConfig.enabled`` is set a ``TracerProvider`` with an OTLP
HTTP exporter is installed and FastAPI, httpx (the OpenAI SDK's
transport) and SQLAlchemy are auto-instrumented.  Otherwise the module
is a no-op and ``tracer`` produces non-recording spans.

``init_telemetry`` runs in the app factory (it adds ASGI middleware, which
must happen before the app starts).  ``build_telemetry`` is a lifespan
dependency that ``Depends(build_db)`` from the leaf module
``spotter.infra.db_engine`` so the engine exists before SQLAlchemy is
instrumented.
"""

from __future__ import annotations

import base64
import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, FastAPI
from opentelemetry import trace

from spotter.configs.system import TracingConfig
from spotter.infra.db_engine import build_db
from spotter.infra.lifespan import get_app

logger = logging.getLogger(__name__)

_otel_enabled = False

tracer = trace.get_tracer("spotter")

# ---------------------------------------------------------------------------
# Span names
# ---------------------------------------------------------------------------

SPAN_CHAT_PREPARE = "chat.prepare"
SPAN_EMBEDDING_EMBED = "embedding.embed"
SPAN_MEMORY_QUERY = "memory.query"
SPAN_MEMORY_UPSERT = "memory.upsert"
SPAN_INTENTION_CLASSIFY = "intention.classify"
SPAN_RESPONSE_GENERATE = "response.generate"
SPAN_SSE_STREAM = "sse.stream"

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_CHAT_MESSAGE_COUNT = "chat.message_count"
ATTR_CHAT_FALLBACK_STAGE = "chat.fallback_stage"

ATTR_EMBEDDING_MODEL = "embedding.model"
ATTR_EMBEDDING_TEXT_LEN = "embedding.text_len"

ATTR_MEMORY_TOP_K = "memory.top_k"
ATTR_MEMORY_RESULT_COUNT = "memory.result_count"
ATTR_MEMORY_RECORD_COUNT = "memory.record_count"

ATTR_INTENTION_TYPE = "intention.type"
ATTR_RESPONSE_STRATEGY = "response.strategy"

ATTR_SSE_ERROR_CODE = "sse.error_code"
ATTR_SSE_EVENT_COUNTS = "sse.event_counts"


def init_telemetry(
    app: object | None = None,
    settings: TracingConfig | None = None,
) -> None:
    """Install the OTEL ``TracerProvider`` and auto-instrumentations.

    No-op when *settings* is ``None`` or tracing is disabled.
    """
    global _otel_enabled  # noqa: PLW0603

    if settings is None or not settings.enabled:
        logger.info("OpenTelemetry tracing disabled.")
        return

    if not settings.endpoint:
        logger.warning(
            "Tracing enabled but no endpoint configured; "
            "skipping OpenTelemetry setup."
        )
        return

    from opentelemetry.exporter.otlp.proto.http.trace_exporter import (
        OTLPSpanExporter,
    )
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create({"service.name": settings.service_name})
    sampler = ParentBased(root=TraceIdRatioBased(settings.sample_rate))
    provider = TracerProvider(resource=resource, sampler=sampler)

    headers: dict[str, str] = {}
    if settings.username and settings.password:
        credentials = f"{settings.username}:{settings.password}"
        encoded = base64.b64encode(credentials.encode()).decode()
        headers["Authorization"] = f"Basic {encoded}"

    exporter = OTLPSpanExporter(endpoint=settings.endpoint, headers=headers)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    if app is not None:
        from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor

        FastAPIInstrumentor.instrument_app(
            app, excluded_urls=",".join(settings.excluded_urls)
        )

    from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor

    HTTPXClientInstrumentor().instrument()

    _otel_enabled = True
    logger.info(
        "OpenTelemetry tracing initialised (service=%s).", settings.service_name
    )


def instrument_sqlalchemy(engine: object) -> None:
    """Instrument a SQLAlchemy engine for DB spans (no-op when disabled)."""
    if not _otel_enabled:
        return

    from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

    sync_engine = getattr(engine, "sync_engine", engine)
    SQLAlchemyInstrumentor().instrument(engine=sync_engine)
    logger.info("SQLAlchemy engine instrumented for OTEL tracing.")


# ---------------------------------------------------------------------------
# Lifespan dependency
# ---------------------------------------------------------------------------


async def build_telemetry(
    app: Annotated[FastAPI, Depends(get_app)],
    _db: Annotated[None, Depends(build_db)],
) -> AsyncGenerator[None, None]:
    """Instrument the SQLAlchemy engine created by ``build_db``."""
    instrument_sqlalchemy(app.state.engine)
    yield
