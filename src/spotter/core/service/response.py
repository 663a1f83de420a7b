"""Response generators: one reply strategy per intention.

Each generator renders its own system prompt from the assistant identity,
prepends it to the transcript and streams the model reply as
``ContentEvent``s.  The model is whatever ``Runnable`` the
caller provides; in production that is the primary provider with the
secondary provider attached via ``with_fallbacks``.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator

from langchain_core.messages import BaseMessageChunk
from langchain_core.runnables import Runnable

from spotter.configs.config import AppConfig
from spotter.infra.telemetry import (
    ATTR_CHAT_MESSAGE_COUNT,
    ATTR_RESPONSE_STRATEGY,
    SPAN_RESPONSE_GENERATE,
    tracer,
)

from .models import (
    INTENTION_HOSTILE_MESSAGE,
    INTENTION_QUESTION,
    INTENTION_RANDOM,
    Chat,
    ContentEvent,
    IntentionType,
)
from .prompt import build_messages

logger = logging.getLogger(__name__)


class ResponseGenerator(ABC):
    """Base generator; subclasses pick the intention and prompt template."""

    intention: IntentionType

    def __init__(self, llm: Runnable, config: AppConfig) -> None:
        self._llm = llm
        self._config = config

    @abstractmethod
    def _template(self) -> str:
        """Return the system prompt template for this strategy."""

    def system_prompt(self) -> str:
        return self._config.prompt.render(self._template(), self._config.identity)

    async def stream(self, chat: Chat) -> AsyncGenerator[ContentEvent, None]:
        """Stream the model's reply to *chat* token by token."""
        messages = build_messages(self.system_prompt(), chat)
        with tracer.start_as_current_span(SPAN_RESPONSE_GENERATE) as span:
            span.set_attribute(ATTR_RESPONSE_STRATEGY, self.intention)
            span.set_attribute(ATTR_CHAT_MESSAGE_COUNT, len(messages))
            logger.debug(
                "Generating %s response from %d message(s)",
                self.intention,
                len(messages),
            )
            async for chunk in self._llm.astream(messages):
                event = _chunk_to_event(chunk)
                if event is not None:
                    yield event


def _chunk_to_event(chunk: object) -> ContentEvent | None:
    if not isinstance(chunk, BaseMessageChunk):
        return None
    if not isinstance(chunk.content, str) or not chunk.content:
        return None
    return ContentEvent(content=chunk.content, message_id=chunk.id)


class QuestionResponder(ResponseGenerator):
    intention = INTENTION_QUESTION

    def _template(self) -> str:
        return self._config.prompt.question_prompt


class HostileMessageResponder(ResponseGenerator):
    intention = INTENTION_HOSTILE_MESSAGE

    def _template(self) -> str:
        return self._config.prompt.hostile_message_prompt


class RandomMessageResponder(ResponseGenerator):
    intention = INTENTION_RANDOM

    def _template(self) -> str:
        return self._config.prompt.random_message_prompt


RESPONDERS: dict[str, type[ResponseGenerator]] = {
    cls.intention: cls
    for cls in (QuestionResponder, HostileMessageResponder, RandomMessageResponder)
}
