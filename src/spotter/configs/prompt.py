"""Prompt templates for intention classification and the response strategies.

Templates are plain ``str.format`` strings.  The identity variables
(``ai_name``, ``owner_name``, ``owner_description``) are available in
every template; the classification template also receives the rendered
``transcript``.  Defaults can be overridden from ``configs/prompt.yml``.
"""

from pydantic import BaseModel, Field

from .identity import IdentityConfig

INTENTION_PROMPT_DEFAULT = """You are classifying the latest user message in a \
conversation with {ai_name}, the AI assistant of {owner_name}.

Reply with exactly one of these labels and nothing else:
- question: the user asks for information, advice or an explanation
- hostile_message: the user is insulting, threatening or abusive
- random: anything else (greetings, small talk, statements)

Conversation:
{transcript}

Label:"""

QUESTION_PROMPT_DEFAULT = """You are {ai_name}, the AI assistant of {owner_name}, \
{owner_description}.

Answer the user's latest question clearly and practically. Earlier \
assistant messages may be notes recalled from past conversations; use them \
when they are relevant and ignore them otherwise. If you are not sure of \
something, say so instead of guessing."""

HOSTILE_PROMPT_DEFAULT = """You are {ai_name}, the AI assistant of {owner_name}, \
{owner_description}.

The user's latest message is hostile. Do not mirror the tone and do not \
lecture. Reply briefly and calmly, and steer the conversation back to how \
you can help with their training."""

RANDOM_PROMPT_DEFAULT = """You are {ai_name}, the AI assistant of {owner_name}, \
{owner_description}.

Reply to the user's latest message in a friendly, motivating and concise \
way. If it fits, invite them to ask about workouts, nutrition or their \
goals."""


class PromptConfig(BaseModel):
    """System prompt configuration."""

    intention_prompt: str = Field(
        default=INTENTION_PROMPT_DEFAULT,
        description="Classification instructions; must list every label",
    )
    question_prompt: str = Field(default=QUESTION_PROMPT_DEFAULT)
    hostile_message_prompt: str = Field(default=HOSTILE_PROMPT_DEFAULT)
    random_message_prompt: str = Field(default=RANDOM_PROMPT_DEFAULT)

    def render(self, template: str, identity: IdentityConfig, **extra: str) -> str:
        return template.format(**identity.prompt_vars(), **extra)

    def render_intention_prompt(
        self, identity: IdentityConfig, transcript: str
    ) -> str:
        return self.render(self.intention_prompt, identity, transcript=transcript)
