"""Unit tests for EmbeddingClient with a stubbed OpenAI client."""

from types import SimpleNamespace

import pytest

from spotter.configs.system import EmbeddingConfig
from spotter.core.embedding.client import EmbeddingClient, EmbeddingDimensionMismatch


class FakeEmbeddings:
    def __init__(self, embedding):
        self.embedding = embedding
        self.calls: list[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(data=[SimpleNamespace(embedding=self.embedding)])


class FakeOpenAI:
    def __init__(self, embedding):
        self.embeddings = FakeEmbeddings(embedding)
        self.closed = False

    async def close(self):
        self.closed = True


def make_client(embedding, **overrides):
    config = EmbeddingConfig(dimensions=3, **overrides)
    fake = FakeOpenAI(embedding)
    return EmbeddingClient(config, client=fake), fake


class TestEmbeddingClient:
    @pytest.mark.asyncio
    async def test_embed_returns_vector(self):
        client, fake = make_client([0.1, 0.2, 0.3])

        assert await client.embed("leg day") == [0.1, 0.2, 0.3]
        assert fake.embeddings.calls == [
            {"input": "leg day", "model": "text-embedding-ada-002"}
        ]

    @pytest.mark.asyncio
    async def test_nested_vector_is_unwrapped(self):
        client, _ = make_client([[0.1, 0.2, 0.3]])
        assert await client.embed("x") == [0.1, 0.2, 0.3]

    @pytest.mark.asyncio
    async def test_dimension_mismatch_raises(self):
        client, _ = make_client([0.1, 0.2])
        with pytest.raises(EmbeddingDimensionMismatch):
            await client.embed("x")

    @pytest.mark.asyncio
    async def test_long_input_is_truncated(self):
        client, fake = make_client([0.1, 0.2, 0.3], max_input_tokens=2)

        await client.embed("abcdefghijklmnop")

        assert len(fake.embeddings.calls[0]["input"]) < len("abcdefghijklmnop")

    @pytest.mark.asyncio
    async def test_close(self):
        client, fake = make_client([0.1, 0.2, 0.3])
        await client.close()
        assert fake.closed

    def test_model_name(self):
        client, _ = make_client([0.0])
        assert client.model_name == "text-embedding-ada-002"
