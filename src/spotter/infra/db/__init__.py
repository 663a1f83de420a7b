"""Async PostgreSQL infrastructure (ORM models, memory store)."""

from .engine import get_memory_repository
from .memory import MemoryMatch, MemoryRecord, MemoryRepository, build_memory_record
from .models import EMBEDDING_DIMENSIONS, Base, ChatMemory

__all__ = [
    "Base",
    "build_memory_record",
    "ChatMemory",
    "EMBEDDING_DIMENSIONS",
    "get_memory_repository",
    "MemoryMatch",
    "MemoryRecord",
    "MemoryRepository",
]
