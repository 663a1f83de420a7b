"""Chat API endpoint."""

import asyncio
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from spotter.core.service.models import (
    ContentEvent,
    ErrorEvent,
    IntentionEvent,
    IntentionType,
    StreamEvent,
)

from .deps import APIConfigDep, ChatServiceDep
from .models import ChatRequest, ChatResponse
from .streaming import sse_stream

logger = logging.getLogger(__name__)

STREAMING_RESPONSE_MEDIA_TYPE = "text/event-stream"
STREAMING_RESPONSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat", response_model=None)
async def chat(
    chat_request: ChatRequest,
    chat_service: ChatServiceDep,
    api_config: APIConfigDep,
    stream: bool = Query(default=True, description="Stream SSE events"),
) -> StreamingResponse | ChatResponse:
    """Reply to the last message of the posted transcript.

    By default the reply is a stream of Server-Sent Events, each a JSON
    object:
    - intention: the response strategy selected for this message
    - content: streamed text tokens
    - error: error information (ends the stream)

    With ``?stream=false`` the content is collected and returned as a
    single JSON ``ChatResponse``.
    """
    events = chat_service.stream_response(chat_request.chat)
    if stream:
        return StreamingResponse(
            sse_stream(
                events,
                request_timeout=api_config.request_timeout,
                send_traceback=api_config.send_traceback,
            ),
            media_type=STREAMING_RESPONSE_MEDIA_TYPE,
            headers=STREAMING_RESPONSE_HEADERS,
        )
    async with asyncio.timeout(api_config.request_timeout.total_seconds()):
        return await collect_response(events)


async def collect_response(
    events: AsyncGenerator[StreamEvent, None],
) -> ChatResponse:
    """Drain *events* into a ``ChatResponse``.

    Errors propagate to the exception handlers in ``api.exceptions``.
    """
    parts: list[str] = []
    intention: IntentionType | None = None
    async for event in events:
        if isinstance(event, IntentionEvent):
            intention = event.intention
        elif isinstance(event, ContentEvent):
            parts.append(event.content)
        elif isinstance(event, ErrorEvent):
            logger.warning("Chat service reported an error: %s", event.message)
    return ChatResponse(response="".join(parts), intention=intention)
