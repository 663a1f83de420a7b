"""EmbeddingClient: turns text into a fixed-length vector.

Single method: ``embed(text) -> list[float]``.  Storing and searching
vectors is the caller's job via ``MemoryRepository``.
"""

from __future__ import annotations

import logging
import time

import openai

from spotter.configs.system import EmbeddingConfig
from spotter.core.service.metrics import EMBEDDING_LATENCY_SECONDS
from spotter.infra.telemetry import (
    ATTR_EMBEDDING_MODEL,
    ATTR_EMBEDDING_TEXT_LEN,
    SPAN_EMBEDDING_EMBED,
    tracer,
)
from spotter.infra.tokens import truncate_to_tokens

logger = logging.getLogger(__name__)


class EmbeddingDimensionMismatch(ValueError):
    """The endpoint returned a vector of an unexpected size."""


class EmbeddingClient:
    """Wraps one ``embeddings.create`` call per text."""

    def __init__(
        self,
        config: EmbeddingConfig,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        self._config = config
        self._openai = client or openai.AsyncOpenAI(
            base_url=config.endpoint,
            api_key=config.api_key or "unused",
            max_retries=0,
        )

    @property
    def model_name(self) -> str:
        return self._config.model_name

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for *text*.

        Input is truncated to ``max_input_tokens`` before the API call.
        Provider errors propagate.
        """
        text = truncate_to_tokens(text, self._config.max_input_tokens)
        with tracer.start_as_current_span(SPAN_EMBEDDING_EMBED) as span:
            span.set_attribute(ATTR_EMBEDDING_MODEL, self._config.model_name)
            span.set_attribute(ATTR_EMBEDDING_TEXT_LEN, len(text))
            logger.debug(
                "Embedding text (model=%s, len=%d)",
                self._config.model_name,
                len(text),
            )
            start = time.monotonic()
            response = await self._openai.embeddings.create(
                input=text,
                model=self._config.model_name,
            )
            EMBEDDING_LATENCY_SECONDS.observe(time.monotonic() - start)

        embedding = response.data[0].embedding
        # Some local model servers (e.g. vLLM) wrap the vector in an
        # extra list, returning [[…]] instead of the standard flat [… ].
        if embedding and isinstance(embedding[0], list):
            embedding = embedding[0]
        if len(embedding) != self._config.dimensions:
            raise EmbeddingDimensionMismatch(
                f"{self._config.model_name} returned {len(embedding)} "
                f"dimensions, expected {self._config.dimensions}"
            )
        return embedding

    async def close(self) -> None:
        await self._openai.close()
