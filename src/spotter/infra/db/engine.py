"""Per-request repository factories built on the shared session factory."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spotter.configs.config import AppConfig, get_app_config
from spotter.infra.db_engine import get_session_factory

from .memory import MemoryRepository


def get_memory_repository(
    sf: Annotated[
        async_sessionmaker[AsyncSession],
        Depends(get_session_factory),
    ],
    config: Annotated[AppConfig, Depends(get_app_config)],
) -> MemoryRepository:
    """Return the memory store for the configured embedding model."""
    return MemoryRepository(sf, config.embedding.model_name)
