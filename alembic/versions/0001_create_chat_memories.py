"""create chat_memories table

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from pgvector.sqlalchemy import Vector
from sqlalchemy import text
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# text-embedding-ada-002
EMBEDDING_DIMENSIONS = 1536


def upgrade() -> None:
    op.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))

    op.create_table(
        "chat_memories",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("embedding", Vector(EMBEDDING_DIMENSIONS), nullable=False),
        sa.Column("model_name", sa.String(), nullable=False),
        sa.Column(
            "extra",
            JSONB(),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_chat_memories"),
    )
    op.create_index(
        "ix_chat_memories_model_name", "chat_memories", ["model_name"]
    )

    # HNSW index for cosine similarity search
    op.execute(
        text(
            "CREATE INDEX ix_chat_memories_embedding_hnsw "
            "ON chat_memories "
            "USING hnsw (embedding vector_cosine_ops)"
        )
    )


def downgrade() -> None:
    op.execute(text("DROP INDEX IF EXISTS ix_chat_memories_embedding_hnsw"))
    op.drop_index("ix_chat_memories_model_name", table_name="chat_memories")
    op.drop_table("chat_memories")
