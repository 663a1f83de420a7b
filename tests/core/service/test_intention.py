"""Unit tests for intention parsing and classification."""

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from spotter.configs.identity import IdentityConfig
from spotter.configs.prompt import PromptConfig
from spotter.core.service.intention import IntentionClassifier, parse_intention_label
from spotter.core.service.models import (
    INTENTION_HOSTILE_MESSAGE,
    INTENTION_QUESTION,
    INTENTION_RANDOM,
    Chat,
    Message,
)


class TestParseIntentionLabel:
    @pytest.mark.parametrize(
        "reply, expected",
        [
            ("question", INTENTION_QUESTION),
            ("hostile_message", INTENTION_HOSTILE_MESSAGE),
            ("random", INTENTION_RANDOM),
            ("  Question.  ", INTENTION_QUESTION),
            ("Label: Hostile message.", INTENTION_HOSTILE_MESSAGE),
            ("HOSTILE", INTENTION_HOSTILE_MESSAGE),
            ("questions", INTENTION_QUESTION),
            ("other", INTENTION_RANDOM),
            ("question\nThe user asks about squats.", INTENTION_QUESTION),
        ],
    )
    def test_known_labels(self, reply, expected):
        assert parse_intention_label(reply) == expected

    @pytest.mark.parametrize(
        "reply", ["", "   ", "I am not sure", "greeting", "\n\n"]
    )
    def test_unrecognised_reply_is_random(self, reply):
        assert parse_intention_label(reply) == INTENTION_RANDOM


class FailingModel:
    async def ainvoke(self, messages):
        raise RuntimeError("provider down")


class TestIntentionClassifier:
    def _chat(self) -> Chat:
        return Chat(messages=[Message(role="user", content="How many sets?")])

    @pytest.mark.asyncio
    async def test_classify_maps_model_reply(self):
        llm = FakeListChatModel(responses=["question"])
        classifier = IntentionClassifier(llm, PromptConfig(), IdentityConfig())

        intention = await classifier.classify(self._chat())

        assert intention.type == INTENTION_QUESTION

    @pytest.mark.asyncio
    async def test_free_text_reply_becomes_random(self):
        llm = FakeListChatModel(responses=["The user is chatting."])
        classifier = IntentionClassifier(llm, PromptConfig(), IdentityConfig())

        intention = await classifier.classify(self._chat())

        assert intention.type == INTENTION_RANDOM

    @pytest.mark.asyncio
    async def test_provider_error_propagates(self):
        classifier = IntentionClassifier(
            FailingModel(), PromptConfig(), IdentityConfig()
        )

        with pytest.raises(RuntimeError, match="provider down"):
            await classifier.classify(self._chat())
