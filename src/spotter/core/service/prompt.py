"""Transcript formatting shared by the classifier and the responders."""

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from .models import ROLE_ASSISTANT, ROLE_SYSTEM, Chat, Message


def format_transcript(chat: Chat) -> str:
    """Render *chat* as ``role: content`` lines, oldest first."""
    return "\n".join(f"{m.role}: {m.content}" for m in chat.messages)


def to_langchain_message(message: Message) -> BaseMessage:
    if message.role == ROLE_ASSISTANT:
        return AIMessage(content=message.content)
    if message.role == ROLE_SYSTEM:
        return SystemMessage(content=message.content)
    return HumanMessage(content=message.content)


def build_messages(system_prompt: str, chat: Chat) -> list[BaseMessage]:
    """System prompt followed by every chat message, oldest first."""
    return [SystemMessage(content=system_prompt)] + [
        to_langchain_message(m) for m in chat.messages
    ]
