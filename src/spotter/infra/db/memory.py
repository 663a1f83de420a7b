"""Conversational memory store: upsert and nearest-neighbour query.

``MemoryRepository`` is the vector store client used by the chat
handler.  Vectors live in ``chat_memories`` (pgvector); the original
message text is kept as metadata in the ``extra`` JSONB column.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spotter.core.service.metrics import MEMORY_QUERY_LATENCY_SECONDS
from spotter.infra.id_utils import generate_timestamped_id
from spotter.infra.telemetry import (
    ATTR_MEMORY_RECORD_COUNT,
    ATTR_MEMORY_RESULT_COUNT,
    ATTR_MEMORY_TOP_K,
    SPAN_MEMORY_QUERY,
    SPAN_MEMORY_UPSERT,
    tracer,
)

from .models import EXTRA_TEXT, ChatMemory

logger = logging.getLogger(__name__)

DEFAULT_ID_PREFIX = "msg"


@dataclass(frozen=True)
class MemoryRecord:
    """A vector to store, with the text it was computed from."""

    id: str
    values: list[float]
    text: str


@dataclass(frozen=True)
class MemoryMatch:
    """A stored vector returned by a similarity query."""

    id: str
    score: float
    text: str | None


def build_memory_record(
    text: str,
    values: list[float],
    prefix: str = DEFAULT_ID_PREFIX,
    now_ms: int | None = None,
) -> MemoryRecord:
    """Wrap *text* and its embedding in a record with a fresh unique ID."""
    return MemoryRecord(
        id=generate_timestamped_id(prefix, now_ms),
        values=list(values),
        text=text,
    )


class MemoryRepository:
    """Async wrapper around ``chat_memories`` for one embedding model."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        model_name: str,
    ) -> None:
        self._session_factory = session_factory
        self._model_name = model_name

    async def upsert(self, records: Sequence[MemoryRecord]) -> None:
        """Insert *records*, replacing rows that share an ID."""
        if not records:
            return
        with tracer.start_as_current_span(SPAN_MEMORY_UPSERT) as span:
            span.set_attribute(ATTR_MEMORY_RECORD_COUNT, len(records))
            stmt = pg_insert(ChatMemory).values(
                [
                    {
                        "id": r.id,
                        "embedding": r.values,
                        "model_name": self._model_name,
                        "extra": {EXTRA_TEXT: r.text},
                    }
                    for r in records
                ]
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[ChatMemory.id],
                set_={
                    "embedding": stmt.excluded.embedding,
                    "model_name": stmt.excluded.model_name,
                    "extra": stmt.excluded.extra,
                },
            )
            async with self._session_factory() as session:
                await session.execute(stmt)
                await session.commit()
            logger.debug("Stored %d memory record(s)", len(records))

    async def query(self, vector: list[float], top_k: int) -> list[MemoryMatch]:
        """Return up to *top_k* stored messages closest to *vector*.

        Ordered by cosine similarity, highest first;
        ``score = 1 - cosine_distance``.
        """
        with tracer.start_as_current_span(SPAN_MEMORY_QUERY) as span:
            span.set_attribute(ATTR_MEMORY_TOP_K, top_k)
            distance = ChatMemory.embedding.cosine_distance(vector)
            stmt = (
                select(ChatMemory.id, ChatMemory.extra, distance.label("distance"))
                .where(ChatMemory.model_name == self._model_name)
                .order_by(distance)
                .limit(top_k)
            )

            start = time.monotonic()
            async with self._session_factory() as session:
                rows = (await session.execute(stmt)).all()
            MEMORY_QUERY_LATENCY_SECONDS.observe(time.monotonic() - start)

            span.set_attribute(ATTR_MEMORY_RESULT_COUNT, len(rows))
            return [
                MemoryMatch(
                    id=row.id,
                    score=1.0 - float(row.distance),
                    text=(row.extra or {}).get(EXTRA_TEXT),
                )
                for row in rows
            ]
