"""Unit tests for the memory-augmented chat service."""

import pytest

from spotter.configs.config import AppConfig
from spotter.core.service.chat_service import MemoryChatService
from spotter.core.service.models import (
    INTENTION_HOSTILE_MESSAGE,
    INTENTION_QUESTION,
    INTENTION_RANDOM,
    ROLE_ASSISTANT,
    VALID_INTENTIONS,
    Chat,
    ContentEvent,
    Intention,
    IntentionEvent,
    Message,
)
from spotter.infra.db.memory import MemoryMatch

VECTOR = [0.1, 0.2, 0.3]

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeEmbedder:
    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.error:
            raise self.error
        return VECTOR


class FakeMemory:
    def __init__(
        self,
        texts: list[str | None] = (),
        query_error: Exception | None = None,
        upsert_error: Exception | None = None,
    ):
        self.matches = [
            MemoryMatch(id=f"msg-{i}", score=1.0 - i / 10, text=t)
            for i, t in enumerate(texts)
        ]
        self.query_error = query_error
        self.upsert_error = upsert_error
        self.queries: list[tuple[list[float], int]] = []
        self.upserted: list = []

    async def query(self, vector, top_k):
        self.queries.append((vector, top_k))
        if self.query_error:
            raise self.query_error
        return self.matches

    async def upsert(self, records):
        if self.upsert_error:
            raise self.upsert_error
        self.upserted.extend(records)


class FakeClassifier:
    def __init__(self, intention: str = INTENTION_QUESTION, error=None):
        self.intention = intention
        self.error = error
        self.seen: list[Chat] = []

    async def classify(self, chat: Chat) -> Intention:
        self.seen.append(chat)
        if self.error:
            raise self.error
        return Intention(type=self.intention)


class RecordingResponder:
    def __init__(self, intention: str):
        self.intention = intention
        self.chats: list[Chat] = []

    async def stream(self, chat: Chat):
        self.chats.append(chat)
        yield ContentEvent(content=f"{self.intention} reply")


def make_service(embedder=None, memory=None, classifier=None):
    responders = {i: RecordingResponder(i) for i in VALID_INTENTIONS}
    service = MemoryChatService(
        embedder=embedder or FakeEmbedder(),
        memory=memory or FakeMemory(),
        classifier=classifier or FakeClassifier(),
        responders=responders,
        config=AppConfig(),
    )
    return service, responders


def make_chat(*contents: str) -> Chat:
    roles = ["user", "assistant"]
    return Chat(
        messages=[
            Message(role=roles[i % 2], content=c) for i, c in enumerate(contents)
        ]
    )


async def collect(service, chat):
    return [event async for event in service.stream_response(chat)]


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------


class TestMemoryChatService:
    @pytest.mark.asyncio
    async def test_recalled_texts_are_prepended_in_order(self):
        memory = FakeMemory(texts=["squats twice a week", "knee pain"])
        classifier = FakeClassifier()
        service, responders = make_service(memory=memory, classifier=classifier)
        chat = make_chat("hi", "hello!", "how often should I squat?")

        await collect(service, chat)

        seen = responders[INTENTION_QUESTION].chats[0]
        assert [m.content for m in seen.messages] == [
            "squats twice a week",
            "knee pain",
            "hi",
            "hello!",
            "how often should I squat?",
        ]
        assert [m.role for m in seen.messages[:2]] == [ROLE_ASSISTANT] * 2
        assert classifier.seen[0].messages == seen.messages

    @pytest.mark.asyncio
    async def test_embeds_last_message_and_queries_top_k(self):
        embedder = FakeEmbedder()
        memory = FakeMemory()
        service, _ = make_service(embedder=embedder, memory=memory)

        await collect(service, make_chat("first", "second", "latest"))

        assert embedder.calls == ["latest"]
        assert memory.queries == [(VECTOR, AppConfig().memory.top_k)]

    @pytest.mark.asyncio
    async def test_stores_last_message_with_its_vector(self):
        memory = FakeMemory()
        service, _ = make_service(memory=memory)

        await collect(service, make_chat("deadlift form tips?"))

        assert len(memory.upserted) == 1
        record = memory.upserted[0]
        assert record.text == "deadlift form tips?"
        assert record.values == VECTOR
        assert record.id.startswith("msg-")

    @pytest.mark.asyncio
    async def test_empty_recalled_texts_are_skipped(self):
        memory = FakeMemory(texts=["kept", None, "", "also kept"])
        service, responders = make_service(memory=memory)

        await collect(service, make_chat("question?"))

        seen = responders[INTENTION_QUESTION].chats[0]
        assert [m.content for m in seen.messages] == ["kept", "also kept", "question?"]

    @pytest.mark.asyncio
    async def test_long_transcript_keeps_recalled_history(self):
        config = AppConfig()
        count = config.chat.max_context_messages
        contents = [f"m{i}" for i in range(count + 10)]
        memory = FakeMemory(texts=["recalled-1", "recalled-2"])
        embedder = FakeEmbedder()
        service, responders = make_service(embedder=embedder, memory=memory)

        await collect(service, make_chat(*contents))

        seen = [m.content for m in responders[INTENTION_QUESTION].chats[0].messages]
        assert seen == ["recalled-1", "recalled-2"] + contents[-count:]
        assert embedder.calls == [contents[-1]]

    @pytest.mark.asyncio
    async def test_input_chat_is_not_mutated(self):
        service, _ = make_service(memory=FakeMemory(texts=["old"]))
        chat = make_chat("hello")

        await collect(service, chat)

        assert [m.content for m in chat.messages] == ["hello"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "intention",
        [INTENTION_QUESTION, INTENTION_HOSTILE_MESSAGE, INTENTION_RANDOM],
    )
    async def test_intention_selects_responder(self, intention):
        service, responders = make_service(classifier=FakeClassifier(intention))

        events = await collect(service, make_chat("message"))

        assert events[0] == IntentionEvent(intention=intention, fallback=False)
        assert events[1:] == [ContentEvent(content=f"{intention} reply")]
        for name, responder in responders.items():
            assert len(responder.chats) == (1 if name == intention else 0)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFallbacks:
    @pytest.mark.asyncio
    async def test_embedding_failure_falls_back_to_random(self):
        memory = FakeMemory(texts=["never seen"])
        service, responders = make_service(
            embedder=FakeEmbedder(error=RuntimeError("embeddings down")),
            memory=memory,
        )
        chat = make_chat("hello")

        events = await collect(service, chat)

        assert events[0] == IntentionEvent(intention=INTENTION_RANDOM, fallback=True)
        assert memory.queries == []
        assert memory.upserted == []
        assert responders[INTENTION_RANDOM].chats == [chat]

    @pytest.mark.asyncio
    async def test_query_failure_falls_back_with_original_chat(self):
        classifier = FakeClassifier()
        service, responders = make_service(
            memory=FakeMemory(query_error=ConnectionError("db down")),
            classifier=classifier,
        )
        chat = make_chat("hello")

        events = await collect(service, chat)

        assert events[0].fallback is True
        assert classifier.seen == []
        assert responders[INTENTION_RANDOM].chats == [chat]

    @pytest.mark.asyncio
    async def test_classification_failure_keeps_recalled_history(self):
        service, responders = make_service(
            memory=FakeMemory(texts=["recalled"]),
            classifier=FakeClassifier(error=RuntimeError("llm down")),
        )

        events = await collect(service, make_chat("hello"))

        assert events[0] == IntentionEvent(intention=INTENTION_RANDOM, fallback=True)
        seen = responders[INTENTION_RANDOM].chats[0]
        assert [m.content for m in seen.messages] == ["recalled", "hello"]

    @pytest.mark.asyncio
    async def test_storage_failure_does_not_block_reply(self):
        service, responders = make_service(
            memory=FakeMemory(texts=["recalled"], upsert_error=RuntimeError("full")),
            classifier=FakeClassifier(INTENTION_HOSTILE_MESSAGE),
        )

        events = await collect(service, make_chat("you are useless"))

        assert events[0] == IntentionEvent(
            intention=INTENTION_HOSTILE_MESSAGE, fallback=False
        )
        assert events[1].content == "hostile_message reply"
        assert len(responders[INTENTION_HOSTILE_MESSAGE].chats) == 1

    @pytest.mark.asyncio
    async def test_every_stage_failing_still_replies(self):
        service, _ = make_service(
            embedder=FakeEmbedder(error=RuntimeError("a")),
            memory=FakeMemory(
                query_error=RuntimeError("b"), upsert_error=RuntimeError("c")
            ),
            classifier=FakeClassifier(error=RuntimeError("d")),
        )

        events = await collect(service, make_chat("anything"))

        assert [e.type for e in events] == ["intention", "content"]

    @pytest.mark.asyncio
    async def test_prepare_reports_fallback(self):
        service, _ = make_service(
            classifier=FakeClassifier(error=RuntimeError("down"))
        )

        _, intention, fell_back = await service.prepare(make_chat("hey"))

        assert intention.type == INTENTION_RANDOM
        assert fell_back is True
