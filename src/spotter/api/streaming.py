"""SSE streaming with timeout enforcement, error boundary and metrics.

Wraps an async generator of domain ``StreamEvent`` objects into SSE
frames.  Business-logic generators stay free of SSE formatting and
exception handling.
"""

import asyncio
import json
import logging
import time
from collections import Counter as EventCounter
from collections.abc import AsyncGenerator
from datetime import timedelta

from openai import APIConnectionError

from spotter.core.service.metrics import (
    CHAT_STREAM_DURATION_SECONDS,
    CHAT_STREAMS_ACTIVE,
    SSE_STREAM_OUTCOMES_TOTAL,
)
from spotter.core.service.models import ErrorEvent, StreamEvent
from spotter.infra.telemetry import (
    ATTR_SSE_ERROR_CODE,
    ATTR_SSE_EVENT_COUNTS,
    SPAN_SSE_STREAM,
    tracer,
)

from .models import format_error_sse, format_sse

logger = logging.getLogger(__name__)


async def sse_stream(
    events: AsyncGenerator[StreamEvent, None],
    *,
    request_timeout: timedelta,
    send_traceback: bool = False,
) -> AsyncGenerator[str, None]:
    """Format domain events as SSE with a timeout and error handling.

    Parameters
    ----------
    events:
        Async generator of ``StreamEvent`` instances.
    request_timeout:
        Wall-clock timeout for the whole stream.
    send_traceback:
        Put the traceback of unexpected errors into the error event.

    Yields
    ------
    SSE-formatted strings (``data: {...}\\n\\n``).
    """
    with tracer.start_as_current_span(SPAN_SSE_STREAM) as span:
        code = "ok"
        event_counts: EventCounter[str] = EventCounter()
        CHAT_STREAMS_ACTIVE.inc()
        start = time.monotonic()
        try:
            async with asyncio.timeout(request_timeout.total_seconds()):
                async for event in events:
                    event_counts[event.type] += 1
                    yield format_sse(event)

        except APIConnectionError:
            code = "MODEL_UNREACHABLE"
            logger.warning("LLM provider unreachable.")
            yield format_sse(
                ErrorEvent(
                    message="Model is temporarily unavailable. Please try again later.",
                    code=code,
                )
            )
        except TimeoutError:
            code = "REQUEST_TIMEOUT"
            logger.warning("Request timed out after %s.", request_timeout)
            yield format_sse(ErrorEvent(message="Request timed out.", code=code))
        except asyncio.CancelledError:
            code = "CANCELLED"
            raise
        except Exception as e:
            code = "PROCESSING_ERROR"
            span.record_exception(e)
            logger.warning("Unexpected error in SSE stream", exc_info=True)
            yield format_error_sse(e, send_traceback=send_traceback)
        finally:
            span.set_attribute(ATTR_SSE_ERROR_CODE, code)
            span.set_attribute(ATTR_SSE_EVENT_COUNTS, json.dumps(event_counts))
            SSE_STREAM_OUTCOMES_TOTAL.labels(code=code).inc()
            CHAT_STREAMS_ACTIVE.dec()
            CHAT_STREAM_DURATION_SECONDS.observe(time.monotonic() - start)
