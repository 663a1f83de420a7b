"""Embedding client for the OpenAI-compatible embeddings endpoint."""

from .client import EmbeddingClient

__all__ = ["EmbeddingClient"]
