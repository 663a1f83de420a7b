"""Interactive chat loop."""

import logging
import sys
from typing import TextIO

from .client import ChatAPIClient
from .config import CLIConfig
from .formatter import ResponseFormatter

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("exit", "quit", "q")
RESTART_COMMANDS = ("/restart", "/clear")


class SpotterCLI:
    """Keeps the transcript locally and sends all of it on every turn."""

    def __init__(
        self,
        config: CLIConfig,
        input_stream: TextIO = sys.stdin,
        output_stream: TextIO = sys.stdout,
        show_intention: bool = False,
        client: ChatAPIClient | None = None,
    ):
        self.config = config
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.show_intention = show_intention
        self.client = client or ChatAPIClient(config)
        self.messages: list[dict[str, str]] = []

    async def run(self) -> None:
        try:
            self._print_welcome()
            while True:
                try:
                    query = self._get_user_input()
                except EOFError:
                    self._print("\nGoodbye!\n")
                    break

                if not query.strip():
                    continue
                command = query.strip().lower()
                if command in EXIT_COMMANDS:
                    self._print("Goodbye!\n")
                    break
                if command in RESTART_COMMANDS:
                    self.messages.clear()
                    self._print("Conversation restarted.\n\n")
                    continue

                await self.send(query)
        finally:
            await self.client.close()

    async def send(self, query: str) -> str:
        """Send *query* with the transcript so far; return the reply text.

        The exchange is only kept in the transcript when a reply arrived.
        """
        formatter = ResponseFormatter(self.output_stream, self.show_intention)
        pending = self.messages + [{"role": "user", "content": query}]

        async for event in self.client.chat(pending):
            formatter.handle_event(event)
        formatter.finish_response()
        self._print("\n")

        if formatter.reply and not formatter.failed:
            self.messages = pending + [
                {"role": "assistant", "content": formatter.reply}
            ]
        return formatter.reply

    def _get_user_input(self) -> str:
        self._print("> ")
        line = self.input_stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n\r")

    def _print_welcome(self) -> None:
        self._print("Spotter - How can I help you reach your goals?\n")
        self._print(f"Connected to: {self.config.chat_url}\n")
        self._print("Type '/restart' to start over, 'exit' to quit.\n\n")

    def _print(self, text: str) -> None:
        self.output_stream.write(text)
        self.output_stream.flush()


async def main(
    host: str = "localhost",
    port: int = 8000,
    api_path: str = "/api/chat",
    debug: bool = False,
    show_intention: bool = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )
    config = CLIConfig(host=host, port=port, api_path=api_path)
    await SpotterCLI(config, show_intention=show_intention).run()
