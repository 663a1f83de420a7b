"""Unit tests for the per-intention response generators."""

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import HumanMessage, SystemMessage

from spotter.configs.config import AppConfig
from spotter.core.service.models import (
    VALID_INTENTIONS,
    Chat,
    ContentEvent,
    Message,
)
from spotter.core.service.prompt import build_messages, format_transcript
from spotter.core.service.response import (
    RESPONDERS,
    HostileMessageResponder,
    QuestionResponder,
    RandomMessageResponder,
    ResponseGenerator,
)


def _chat(*contents: str) -> Chat:
    return Chat(messages=[Message(role="user", content=c) for c in contents])


class TestResponders:
    def test_every_intention_has_a_responder(self):
        assert set(RESPONDERS) == VALID_INTENTIONS

    def test_base_generator_is_abstract(self):
        with pytest.raises(TypeError):
            ResponseGenerator(FakeListChatModel(responses=["x"]), AppConfig())

    def test_every_responder_declares_its_intention(self):
        for intention, cls in RESPONDERS.items():
            assert cls.intention == intention

    def test_system_prompts_differ_per_strategy(self):
        llm = FakeListChatModel(responses=["x"])
        config = AppConfig()
        prompts = {
            cls(llm, config).system_prompt()
            for cls in (QuestionResponder, HostileMessageResponder, RandomMessageResponder)
        }
        assert len(prompts) == 3

    def test_system_prompt_uses_identity(self):
        config = AppConfig()
        prompt = QuestionResponder(FakeListChatModel(responses=["x"]), config).system_prompt()
        assert config.identity.ai_name in prompt
        assert config.identity.owner_name in prompt
        assert "{" not in prompt

    @pytest.mark.asyncio
    async def test_stream_yields_content_events(self):
        llm = FakeListChatModel(responses=["Three sets of eight."])
        responder = QuestionResponder(llm, AppConfig())

        events = [e async for e in responder.stream(_chat("How many sets?"))]

        assert events
        assert all(isinstance(e, ContentEvent) for e in events)
        assert "".join(e.content for e in events) == "Three sets of eight."

    @pytest.mark.asyncio
    async def test_stream_uses_fallback_model_when_primary_fails(self):
        primary = FakeListChatModel(responses=["never"], error_on_chunk_number=0)
        secondary = FakeListChatModel(responses=["from the fallback"])
        responder = RandomMessageResponder(
            primary.with_fallbacks([secondary]), AppConfig()
        )

        events = [e async for e in responder.stream(_chat("hello"))]

        assert "".join(e.content for e in events) == "from the fallback"


class TestPromptHelpers:
    def test_build_messages_puts_system_prompt_first(self):
        messages = build_messages("be nice", _chat("a", "b"))
        assert isinstance(messages[0], SystemMessage)
        assert messages[0].content == "be nice"
        assert [m.content for m in messages[1:]] == ["a", "b"]
        assert all(isinstance(m, HumanMessage) for m in messages[1:])

    def test_build_messages_keeps_recalled_history_of_long_chat(self):
        config = AppConfig()
        count = config.chat.max_context_messages
        chat = _chat(*(f"m{i}" for i in range(count))).with_history(
            ["recalled-1", "recalled-2"]
        )

        contents = [m.content for m in build_messages("sys", chat)]

        assert contents[:3] == ["sys", "recalled-1", "recalled-2"]
        assert len(contents) == count + 3

    def test_format_transcript(self):
        chat = Chat(
            messages=[
                Message(role="assistant", content="Hi!"),
                Message(role="user", content="Hello"),
            ]
        )
        assert format_transcript(chat) == "assistant: Hi!\nuser: Hello"
