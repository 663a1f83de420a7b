"""Domain stream events emitted by the chat service."""

from typing import Literal

from pydantic import BaseModel, Field

from .constants import IntentionType

__all__ = ["ContentEvent", "ErrorEvent", "IntentionEvent", "StreamEvent"]


class IntentionEvent(BaseModel):
    """Response strategy chosen for this request."""

    type: Literal["intention"] = "intention"
    intention: IntentionType = Field(description="Classified intention")
    fallback: bool = Field(
        default=False,
        description="True when classification was skipped after a failure",
    )


class ContentEvent(BaseModel):
    """User-facing streamed text tokens."""

    type: Literal["content"] = "content"
    content: str = Field(description="Text token content")
    message_id: str | None = Field(
        default=None,
        description="Provider message ID (e.g. OpenAI chatcmpl-xxx)",
    )


class ErrorEvent(BaseModel):
    """Stream-level error event."""

    type: Literal["error"] = "error"
    message: str = Field(description="Error message")
    code: str | None = Field(default=None, description="Error code")


StreamEvent = IntentionEvent | ContentEvent | ErrorEvent
