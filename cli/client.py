"""HTTP client for the chat API with SSE stream parsing."""

import json
import logging
from typing import AsyncIterator

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data: "


def parse_sse_block(block: str) -> list[dict]:
    """Return the JSON payloads of the ``data:`` lines in one SSE block."""
    events: list[dict] = []
    for line in block.split("\n"):
        line = line.strip()
        if not line.startswith(SSE_DATA_PREFIX):
            continue
        data_str = line[len(SSE_DATA_PREFIX):]
        try:
            events.append(json.loads(data_str))
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse SSE data: %s (%s)", data_str, e)
    return events


class ChatAPIClient:
    """Client for the Spotter chat endpoint."""

    def __init__(
        self, config: CLIConfig, client: httpx.AsyncClient | None = None
    ) -> None:
        self.config = config
        self.client = client or httpx.AsyncClient(timeout=config.timeout_seconds)

    async def chat(self, messages: list[dict[str, str]]) -> AsyncIterator[dict]:
        """Post the transcript and yield parsed events.

        Transport and HTTP failures are yielded as ``error`` events.
        """
        payload = {"chat": {"messages": messages}}
        logger.debug("POST %s (%d message(s))", self.config.chat_url, len(messages))

        try:
            async with self.client.stream(
                "POST",
                self.config.chat_url,
                json=payload,
                headers={"Accept": "text/event-stream"},
            ) as response:
                logger.debug("Response status: %s", response.status_code)

                if response.status_code != 200:
                    error_text = await response.aread()
                    yield {
                        "type": "error",
                        "message": f"HTTP {response.status_code}: {error_text.decode()}",
                        "code": "HTTP_ERROR",
                    }
                    return

                # Events are separated by a blank line: "data: {...}\n\n"
                buffer = ""
                async for chunk in response.aiter_text():
                    buffer += chunk
                    while "\n\n" in buffer:
                        block, buffer = buffer.split("\n\n", 1)
                        for event in parse_sse_block(block):
                            yield event

        except httpx.TimeoutException:
            yield {"type": "error", "message": "Request timed out.", "code": "TIMEOUT"}
        except httpx.ConnectError as e:
            yield {
                "type": "error",
                "message": f"Connection error: {e}",
                "code": "CONNECTION_ERROR",
            }

    async def close(self) -> None:
        await self.client.aclose()
