"""Entry point: ``python -m cli``."""

import argparse
import asyncio
import sys

from .chat_cli import main


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Interactive CLI for the Spotter API")
    parser.add_argument("--host", default="localhost", help="Server host")
    parser.add_argument("--port", type=int, default=8000, help="Server port")
    parser.add_argument("--api-path", default="/api/chat", help="Chat endpoint path")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--show-intention",
        action="store_true",
        help="Print the response strategy chosen for each message",
    )
    return parser.parse_args(argv)


def cli_entry() -> None:
    args = parse_args()
    try:
        asyncio.run(
            main(
                host=args.host,
                port=args.port,
                api_path=args.api_path,
                debug=args.debug,
                show_intention=args.show_intention,
            )
        )
    except KeyboardInterrupt:
        sys.exit(0)


if __name__ == "__main__":
    cli_entry()
