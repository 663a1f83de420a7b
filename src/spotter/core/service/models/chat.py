"""Chat transcript and intention models."""

from pydantic import BaseModel, Field, field_validator

from .constants import INTENTION_RANDOM, ROLE_ASSISTANT, IntentionType, Role

__all__ = ["Chat", "Intention", "Message"]


class Message(BaseModel):
    """A single message in the conversation."""

    role: Role = Field(description="Message sender role")
    content: str = Field(description="Message content")


class Chat(BaseModel):
    """Ordered transcript of a conversation, oldest message first."""

    messages: list[Message] = Field(
        min_length=1, description="Conversation messages, oldest first"
    )

    @field_validator("messages")
    @classmethod
    def _last_message_has_text(cls, messages: list[Message]) -> list[Message]:
        if not messages[-1].content.strip():
            raise ValueError("the last message must not be empty")
        return messages

    @property
    def last_message(self) -> Message:
        return self.messages[-1]

    def recent(self, count: int) -> "Chat":
        """Return a chat holding only the last *count* messages."""
        if len(self.messages) <= count:
            return self
        return Chat.model_construct(messages=list(self.messages[-count:]))

    def with_history(self, texts: list[str]) -> "Chat":
        """Return a new chat with *texts* prepended as assistant turns.

        Retrieved texts keep their given order and come before every
        original message, whose order is unchanged.
        """
        history = [Message(role=ROLE_ASSISTANT, content=t) for t in texts]
        return Chat.model_construct(messages=history + list(self.messages))


class Intention(BaseModel):
    """The classified purpose of the user's latest message."""

    type: IntentionType = Field(
        default=INTENTION_RANDOM, description="Selected response strategy"
    )
