"""Renders chat events on a text stream."""

import logging
from typing import TextIO

logger = logging.getLogger(__name__)


class ResponseFormatter:
    """Writes streamed content and errors, and collects the reply text."""

    def __init__(self, output: TextIO, show_intention: bool = False):
        self.output = output
        self.show_intention = show_intention
        self.content_buffer: list[str] = []
        self.failed = False

    @property
    def reply(self) -> str:
        return "".join(self.content_buffer)

    def handle_event(self, event: dict) -> None:
        event_type = event.get("type")

        if event_type == "intention":
            if self.show_intention:
                suffix = " (fallback)" if event.get("fallback") else ""
                self._print(f"[{event.get('intention', '?')}{suffix}]\n")

        elif event_type == "content":
            content = event.get("content", "")
            if not self.content_buffer:
                self._print("\n")
            self.content_buffer.append(content)
            self._print(content)

        elif event_type == "error":
            self.failed = True
            message = event.get("message", "Unknown error")
            code = event.get("code", "UNKNOWN")
            self._print(f"\nError [{code}]: {message}\n")

        else:
            logger.debug("Unknown event type: %s, event: %s", event_type, event)

    def finish_response(self) -> None:
        if self.content_buffer:
            self._print("\n")

    def _print(self, text: str) -> None:
        self.output.write(text)
        self.output.flush()
