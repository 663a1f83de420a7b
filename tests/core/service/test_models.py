"""Unit tests for the chat transcript and event models."""

import pytest
from pydantic import ValidationError

from spotter.core.service.models import (
    EVENT_TYPE_CONTENT,
    EVENT_TYPE_ERROR,
    EVENT_TYPE_INTENTION,
    INTENTION_RANDOM,
    ROLE_ASSISTANT,
    Chat,
    ContentEvent,
    ErrorEvent,
    Intention,
    IntentionEvent,
    Message,
)


class TestChat:
    def test_requires_at_least_one_message(self):
        with pytest.raises(ValidationError):
            Chat(messages=[])

    def test_last_message_must_have_text(self):
        with pytest.raises(ValidationError):
            Chat(
                messages=[
                    Message(role="user", content="hi"),
                    Message(role="user", content="   "),
                ]
            )

    def test_unknown_role_rejected(self):
        with pytest.raises(ValidationError):
            Message(role="robot", content="beep")

    def test_last_message(self):
        chat = Chat(
            messages=[
                Message(role="user", content="a"),
                Message(role="assistant", content="b"),
            ]
        )
        assert chat.last_message.content == "b"

    def test_recent_keeps_last_messages(self):
        chat = Chat(
            messages=[Message(role="user", content=str(i)) for i in range(5)]
        )

        assert [m.content for m in chat.recent(2).messages] == ["3", "4"]
        assert chat.recent(5) is chat
        assert len(chat.messages) == 5

    def test_with_history_prepends_in_order(self):
        chat = Chat(
            messages=[
                Message(role="user", content="one"),
                Message(role="assistant", content="two"),
                Message(role="user", content="three"),
            ]
        )

        enriched = chat.with_history(["old-1", "old-2"])

        assert [m.content for m in enriched.messages] == [
            "old-1",
            "old-2",
            "one",
            "two",
            "three",
        ]
        assert enriched.messages[0].role == ROLE_ASSISTANT
        assert enriched.last_message.content == "three"
        assert len(chat.messages) == 3

    def test_with_no_history_keeps_messages(self):
        chat = Chat(messages=[Message(role="user", content="solo")])
        assert chat.with_history([]).messages == chat.messages


class TestEvents:
    def test_default_intention_is_random(self):
        assert Intention().type == INTENTION_RANDOM

    def test_event_types_match_constants(self):
        assert IntentionEvent(intention="question").type == EVENT_TYPE_INTENTION
        assert ContentEvent(content="x").type == EVENT_TYPE_CONTENT
        assert ErrorEvent(message="m").type == EVENT_TYPE_ERROR

    def test_intention_event_rejects_unknown_label(self):
        with pytest.raises(ValidationError):
            IntentionEvent(intention="smalltalk")

    def test_content_event_serialisation(self):
        event = ContentEvent(content="Hi", message_id="chatcmpl-1")
        assert event.model_dump() == {
            "type": "content",
            "content": "Hi",
            "message_id": "chatcmpl-1",
        }
