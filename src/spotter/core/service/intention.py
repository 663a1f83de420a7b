"""Intention classifier: labels a transcript with a response strategy.

One LLM call per request with a fixed instruction template.  The reply
is free text; it is normalised to one of the known labels and anything
unrecognised becomes ``random``.
"""

import logging
import re

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import HumanMessage

from spotter.configs.identity import IdentityConfig
from spotter.configs.prompt import PromptConfig
from spotter.infra.telemetry import (
    ATTR_INTENTION_TYPE,
    SPAN_INTENTION_CLASSIFY,
    tracer,
)

from .models import (
    INTENTION_HOSTILE_MESSAGE,
    INTENTION_QUESTION,
    INTENTION_RANDOM,
    VALID_INTENTIONS,
    Chat,
    Intention,
    IntentionType,
)
from .prompt import format_transcript

logger = logging.getLogger(__name__)

_LABEL_ALIASES: dict[str, IntentionType] = {
    "hostile": INTENTION_HOSTILE_MESSAGE,
    "hostile_messages": INTENTION_HOSTILE_MESSAGE,
    "questions": INTENTION_QUESTION,
    "other": INTENTION_RANDOM,
    "random_message": INTENTION_RANDOM,
}

_NON_WORD = re.compile(r"[^a-z_]+")


def parse_intention_label(text: str) -> IntentionType:
    """Map a model reply such as ``"Label: Hostile message."`` to a label."""
    lines = [line for line in text.strip().lower().splitlines() if line.strip()]
    if not lines:
        return INTENTION_RANDOM
    first = lines[0].split(":")[-1]
    label = _NON_WORD.sub("_", first.strip()).strip("_")
    if label in VALID_INTENTIONS:
        return label  # type: ignore[return-value]
    if label in _LABEL_ALIASES:
        return _LABEL_ALIASES[label]
    for known in (INTENTION_HOSTILE_MESSAGE, INTENTION_QUESTION, INTENTION_RANDOM):
        if label.startswith(known):
            return known
    return INTENTION_RANDOM


class IntentionClassifier:
    def __init__(
        self,
        llm: BaseChatModel,
        prompt: PromptConfig,
        identity: IdentityConfig,
    ) -> None:
        self._llm = llm
        self._prompt = prompt
        self._identity = identity

    async def classify(self, chat: Chat) -> Intention:
        """Return the intention of the latest message in *chat*.

        Provider errors propagate to the caller.
        """
        instruction = self._prompt.render_intention_prompt(
            self._identity, format_transcript(chat)
        )
        with tracer.start_as_current_span(SPAN_INTENTION_CLASSIFY) as span:
            response = await self._llm.ainvoke([HumanMessage(content=instruction)])
            raw = response.content if isinstance(response.content, str) else ""
            intention = Intention(type=parse_intention_label(raw))
            span.set_attribute(ATTR_INTENTION_TYPE, intention.type)

        if intention.type == INTENTION_RANDOM and raw.strip().lower() != INTENTION_RANDOM:
            logger.debug("Unrecognised intention label %r, using random", raw)
        return intention
