"""Abstract chat service interface."""

from abc import ABC, abstractmethod
from typing import AsyncGenerator

from .chat import Chat
from .events import StreamEvent

__all__ = ["ChatService"]


class ChatService(ABC):
    """Turns a chat transcript into a stream of domain events."""

    chat_service_name: str = ""

    @abstractmethod
    def stream_response(self, chat: Chat) -> AsyncGenerator[StreamEvent, None]:
        """Stream the reply to the last message of *chat*.

        Yields:
            StreamEvent instances (intention, content, error)
        """
