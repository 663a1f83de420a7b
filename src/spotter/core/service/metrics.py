"""Prometheus metrics for the Spotter application.

Business metrics that complement the HTTP metrics provided by
``prometheus-fastapi-instrumentator``.  All metrics use the ``spotter_``
prefix.
"""

import logging

from fastapi import FastAPI
from prometheus_client import Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from spotter.configs.config import AppConfig

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Request pipeline
# ---------------------------------------------------------------------------

CHAT_REQUESTS_TOTAL = Counter(
    "spotter_chat_requests_total",
    "Chat requests by the response strategy that served them",
    ["intention"],  # question | hostile_message | random
)

PIPELINE_FALLBACKS_TOTAL = Counter(
    "spotter_pipeline_fallbacks_total",
    "Requests that fell back to the random-message strategy",
    ["stage"],  # embed | retrieve | classify
)

# ---------------------------------------------------------------------------
# Embedding / memory
# ---------------------------------------------------------------------------

EMBEDDING_LATENCY_SECONDS = Histogram(
    "spotter_embedding_latency_seconds",
    "Latency of embedding API calls",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

MEMORY_QUERY_LATENCY_SECONDS = Histogram(
    "spotter_memory_query_latency_seconds",
    "Latency of nearest-neighbour queries against the memory store",
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1, 2),
)

MEMORY_MATCHES_RETURNED = Histogram(
    "spotter_memory_matches_returned",
    "Past messages spliced into the transcript per request",
    buckets=(0, 1, 2, 3, 5, 10),
)

MEMORY_WRITE_FAILURES_TOTAL = Counter(
    "spotter_memory_write_failures_total",
    "Messages that could not be stored in the memory store",
)

# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------

CHAT_STREAMS_ACTIVE = Gauge(
    "spotter_chat_streams_active",
    "Number of streamed chat responses currently in progress",
)

SSE_STREAM_OUTCOMES_TOTAL = Counter(
    "spotter_sse_stream_outcomes_total",
    "Streamed responses by outcome code",
    ["code"],  # ok | MODEL_UNREACHABLE | REQUEST_TIMEOUT | ...
)

CHAT_STREAM_DURATION_SECONDS = Histogram(
    "spotter_chat_stream_duration_seconds",
    "End-to-end duration of a streamed chat response",
    buckets=(0.5, 1, 2, 5, 10, 30, 60, 120),
)


# ---------------------------------------------------------------------------
# HTTP instrumentation
# ---------------------------------------------------------------------------


def instrument_app(app: FastAPI, config: AppConfig) -> None:
    """Attach HTTP metrics middleware and the ``/metrics`` endpoint.

    Must run before the application starts serving (middleware cannot be
    added afterwards).
    """
    Instrumentator(
        should_instrument_requests_inprogress=True,
        excluded_handlers=config.tracing.excluded_urls,
    ).instrument(app).expose(app, endpoint="/metrics")

    logger.info("Prometheus metrics initialised")
