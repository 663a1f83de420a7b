"""Pydantic models for the chat API and SSE formatting helpers."""

from traceback import format_exception

from pydantic import BaseModel, Field

from spotter.core.service.models import (
    Chat,
    ErrorEvent,
    IntentionType,
    StreamEvent,
)


class ChatRequest(BaseModel):
    """Request model for the chat endpoint."""

    chat: Chat = Field(description="Full conversation transcript, oldest first")


class ChatResponse(BaseModel):
    """Non-streaming response model."""

    response: str = Field(description="Complete response text")
    intention: IntentionType | None = Field(
        default=None, description="Strategy that produced the response"
    )


def format_sse(event: StreamEvent) -> str:
    """Serialise one domain event as an SSE ``data:`` frame."""
    return f"data: {event.model_dump_json()}\n\n"


def format_error_sse(exc: BaseException, *, send_traceback: bool = False) -> str:
    if send_traceback:
        message = "".join(format_exception(exc))
    else:
        message = "An error occurred while generating the response."
    return format_sse(ErrorEvent(message=message, code="PROCESSING_ERROR"))
