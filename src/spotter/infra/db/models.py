"""SQLAlchemy ORM models for the conversational memory store.

Tables are managed by Alembic migrations.  The naming convention on
``Base.metadata`` keeps constraint names deterministic for
``--autogenerate`` diffs.
"""

from datetime import datetime
from typing import Any

from pgvector.sqlalchemy import Vector
from sqlalchemy import DateTime, Index, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Shared declarative base with an explicit naming convention."""


Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


EMBEDDING_DIMENSIONS = 1536
"""Must match ``EmbeddingConfig.dimensions``.  Changing it requires an
alembic migration altering ``chat_memories.embedding``."""

# Keys of the ``extra`` JSONB column
EXTRA_TEXT = "text"


class ChatMemory(Base):
    """One remembered user message and its embedding.

    The message text lives in the ``extra`` JSONB column (as ``text``)
    next to the vector, so rows written by other tools with a different
    payload are still readable; such rows simply carry no text.
    """

    __tablename__ = "chat_memories"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    embedding: Mapped[list[float]] = mapped_column(
        Vector(EMBEDDING_DIMENSIONS),
        nullable=False,
    )
    model_name: Mapped[str] = mapped_column(String, nullable=False)
    extra: Mapped[dict[str, Any]] = mapped_column(
        JSONB,
        nullable=False,
        server_default="{}",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (Index("ix_chat_memories_model_name", "model_name"),)

    def __repr__(self) -> str:
        return f"<ChatMemory(id={self.id!r}, model_name={self.model_name!r})>"
