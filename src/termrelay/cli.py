"""Command-line interface for termrelay.

Provides the main entry point for starting the relay server and for
talking to a running server from the terminal.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:3002"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="termrelay",
        description="Chat terminal backend relaying commands to a language model",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/termrelay.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP relay server")
    serve_parser.add_argument("--host", type=str, default=None, help="Override endpoint host")
    serve_parser.add_argument("--port", type=int, default=None, help="Override endpoint port")

    send_parser = subparsers.add_parser("send", help="Send one command to a running server")
    send_parser.add_argument("text", type=str, help="Command text to send")
    send_parser.add_argument("--url", type=str, default=DEFAULT_URL, help="Server base URL")
    send_parser.add_argument("--session", type=str, default=None, help="Session id to reuse")

    chat_parser = subparsers.add_parser("chat", help="Interactive prompt against a running server")
    chat_parser.add_argument("--url", type=str, default=DEFAULT_URL, help="Server base URL")
    chat_parser.add_argument("--session", type=str, default=None, help="Session id to reuse")

    return parser.parse_args(argv)


def _print_result(result) -> None:
    from termrelay.domain.models import ResultType

    stream = sys.stderr if result.type == ResultType.ERROR else sys.stdout
    print(result.output.rstrip("\n"), file=stream)


async def _send(args) -> int:
    from termrelay.client import RelayClient, RelayClientError

    async with RelayClient(base_url=args.url, session_id=args.session) as client:
        try:
            result = await client.execute(args.text)
        except RelayClientError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    _print_result(result)
    return 0


async def _chat(args) -> int:
    from termrelay.client import RelayClient, RelayClientError

    loop = asyncio.get_running_loop()
    async with RelayClient(base_url=args.url, session_id=args.session) as client:
        print(f"Session {client.session_id}. Type 'exit' to quit.")
        while True:
            try:
                line = await loop.run_in_executor(None, input, "$ ")
            except EOFError:
                print()
                break
            line = line.strip()
            if not line:
                continue
            if line in ("exit", "quit"):
                break
            try:
                result = await client.execute(line)
            except RelayClientError as e:
                print(f"Error: {e}", file=sys.stderr)
                continue
            _print_result(result)
    return 0


def _serve(settings, args) -> int:
    from termrelay.endpoint.server import create_app
    from termrelay.errors import ConfigError
    import uvicorn

    ep = settings.endpoint
    try:
        app = create_app(settings=settings)
    except ConfigError as e:
        logger.error("%s", e)
        return 1
    uvicorn.run(
        app,
        host=args.host or ep.host,
        port=args.port or ep.port,
    )
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the termrelay CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return

    from termrelay.config.settings import load_settings
    from termrelay.utils.logging import setup_logging

    settings = load_settings(args.config)
    if args.verbose:
        settings.logging.level = "DEBUG"
    setup_logging(settings.logging)

    if args.command == "serve":
        logger.info("Starting relay server")
        status = _serve(settings, args)
    elif args.command == "send":
        status = asyncio.run(_send(args))
    elif args.command == "chat":
        status = asyncio.run(_chat(args))
    else:
        status = 2

    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()
