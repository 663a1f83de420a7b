"""Role, intention and event type constants."""

from typing import Literal

# ---------------------------------------------------------------------------
# Conversational roles
# ---------------------------------------------------------------------------

ROLE_USER: Literal["user"] = "user"
ROLE_ASSISTANT: Literal["assistant"] = "assistant"
ROLE_SYSTEM: Literal["system"] = "system"

Role = Literal["user", "assistant", "system"]

# ---------------------------------------------------------------------------
# Intentions (one response strategy each)
# ---------------------------------------------------------------------------

INTENTION_QUESTION: Literal["question"] = "question"
INTENTION_HOSTILE_MESSAGE: Literal["hostile_message"] = "hostile_message"
INTENTION_RANDOM: Literal["random"] = "random"

IntentionType = Literal["question", "hostile_message", "random"]

VALID_INTENTIONS = frozenset(
    {
        INTENTION_QUESTION,
        INTENTION_HOSTILE_MESSAGE,
        INTENTION_RANDOM,
    }
)

# ---------------------------------------------------------------------------
# Stream event types
# ---------------------------------------------------------------------------

EVENT_TYPE_INTENTION = "intention"
EVENT_TYPE_CONTENT = "content"
EVENT_TYPE_ERROR = "error"

# ---------------------------------------------------------------------------
# Pipeline stages (fallback labels)
# ---------------------------------------------------------------------------

STAGE_EMBED = "embed"
STAGE_RETRIEVE = "retrieve"
STAGE_CLASSIFY = "classify"
