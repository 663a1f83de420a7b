"""Memory-augmented chat service (the request handler).

Per request::

    embed last message → query memory (top-k) → prepend recalled texts
    → remember last message → classify intention → stream matching responder

Any failure before a responder is chosen (embedding, retrieval,
classification) is logged and the request is served by the random-message
responder instead.  Storing the new message is best effort: a failed write
is logged and the request carries on.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Mapping
from typing import Protocol

from spotter.configs.config import AppConfig
from spotter.core.service.metrics import (
    CHAT_REQUESTS_TOTAL,
    MEMORY_MATCHES_RETURNED,
    MEMORY_WRITE_FAILURES_TOTAL,
    PIPELINE_FALLBACKS_TOTAL,
)
from spotter.infra.db.memory import MemoryMatch, MemoryRecord, build_memory_record
from spotter.infra.telemetry import (
    ATTR_CHAT_FALLBACK_STAGE,
    ATTR_CHAT_MESSAGE_COUNT,
    SPAN_CHAT_PREPARE,
    tracer,
)

from .intention import IntentionClassifier
from .models import (
    INTENTION_RANDOM,
    STAGE_CLASSIFY,
    STAGE_EMBED,
    STAGE_RETRIEVE,
    Chat,
    ChatService,
    Intention,
    IntentionEvent,
    StreamEvent,
)
from .response import ResponseGenerator

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    async def embed(self, text: str) -> list[float]: ...


class MemoryStore(Protocol):
    async def query(self, vector: list[float], top_k: int) -> list[MemoryMatch]: ...

    async def upsert(self, records: list[MemoryRecord]) -> None: ...


class MemoryChatService(ChatService):
    """Chat service that recalls related past messages before replying."""

    chat_service_name = "memory"

    def __init__(
        self,
        embedder: Embedder,
        memory: MemoryStore,
        classifier: IntentionClassifier,
        responders: Mapping[str, ResponseGenerator],
        config: AppConfig,
    ) -> None:
        self._embedder = embedder
        self._memory = memory
        self._classifier = classifier
        self._responders = responders
        self._memory_config = config.memory
        self._max_context_messages = config.chat.max_context_messages

    # ------------------------------------------------------------------
    # Preparation: recall, remember, classify
    # ------------------------------------------------------------------

    async def prepare(self, chat: Chat) -> tuple[Chat, Intention, bool]:
        """Return ``(chat with recalled history, intention, fell_back)``.

        The transcript is cut to the most recent ``max_context_messages``
        before recalled history is prepended, so recalled turns are never
        trimmed away.  Never raises for provider or storage failures; on
        failure the chat is returned as far as it was enriched, with a
        ``random`` intention and ``fell_back=True``.
        """
        stage = STAGE_EMBED
        chat = chat.recent(self._max_context_messages)
        current = chat
        with tracer.start_as_current_span(SPAN_CHAT_PREPARE) as span:
            span.set_attribute(ATTR_CHAT_MESSAGE_COUNT, len(chat.messages))
            try:
                text = chat.last_message.content
                vector = await self._embedder.embed(text)

                stage = STAGE_RETRIEVE
                matches = await self._memory.query(vector, self._memory_config.top_k)
                history = [m.text for m in matches if m.text]
                MEMORY_MATCHES_RETURNED.observe(len(history))
                current = chat.with_history(history)
                logger.info("Recalled %d past message(s)", len(history))

                await self._remember(text, vector)

                stage = STAGE_CLASSIFY
                intention = await self._classifier.classify(current)
            except Exception:
                logger.warning(
                    "Chat pipeline failed at %s stage; "
                    "falling back to the random-message responder",
                    stage,
                    exc_info=True,
                )
                span.set_attribute(ATTR_CHAT_FALLBACK_STAGE, stage)
                PIPELINE_FALLBACKS_TOTAL.labels(stage=stage).inc()
                return current, Intention(type=INTENTION_RANDOM), True

        logger.info("Classified intention: %s", intention.type)
        return current, intention, False

    async def _remember(self, text: str, vector: list[float]) -> None:
        record = build_memory_record(
            text, vector, prefix=self._memory_config.id_prefix
        )
        try:
            await self._memory.upsert([record])
        except Exception:
            logger.warning(
                "Failed to store message %s in memory", record.id, exc_info=True
            )
            MEMORY_WRITE_FAILURES_TOTAL.inc()

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------

    async def stream_response(self, chat: Chat) -> AsyncGenerator[StreamEvent, None]:
        current, intention, fell_back = await self.prepare(chat)
        CHAT_REQUESTS_TOTAL.labels(intention=intention.type).inc()
        yield IntentionEvent(intention=intention.type, fallback=fell_back)

        responder = self._responders[intention.type]
        async for event in responder.stream(current):
            yield event
