"""Interactive chat on the command line."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Iterable
from typing import TextIO

import httpx

from .chat import Chat
from .chat_types import Model, Request
from .context import Context

GREETING = "Hi, what's your name?"
DEFAULT_PROMPT = "You're Jarvis - my personal assistant. Call me master"
DEFAULT_LIMIT = 4090
DEFAULT_PORT = "9090"

_ERRORS = (httpx.HTTPError, ValueError)


def _write(out: TextIO, text: str) -> None:
    out.write(text)
    out.flush()


async def run(chat: Chat, lines: Iterable[str], out: TextIO) -> None:
    """Greet the model, then stream an answer to every line read from ``lines``."""
    try:
        response = await chat.send(Request(messages=[GREETING], context=True, stream=False))
    except _ERRORS as exc:
        _write(out, f"Error: {exc}\n")
    else:
        if response is not None:
            _write(out, f"{response.text()}\n")

    source = iter(lines)
    while True:
        _write(out, "\n>> ")
        line = next(source, None)
        if line is None:
            break
        _write(out, "<< ")
        await chat.send(Request(messages=[line], context=True, stream=True))
        try:
            async for text in chat:
                if text:
                    _write(out, text)
        except _ERRORS as exc:
            _write(out, f"Error: {exc}\n")


def _parse(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with a model served on this machine.")
    parser.add_argument("--port", default=DEFAULT_PORT, help="server port (default: %(default)s)")
    parser.add_argument(
        "--model", default=Model.GEMMA3_4B.value, help="model name (default: %(default)s)"
    )
    parser.add_argument("--system", default=DEFAULT_PROMPT, help="system prompt")
    parser.add_argument(
        "--limit", type=int, default=DEFAULT_LIMIT, help="context size in characters"
    )
    return parser.parse_args(argv)


async def _main(args: argparse.Namespace) -> None:
    async with httpx.AsyncClient(timeout=None) as client:
        chat = Chat(args.model, Context(args.system, args.limit), args.port, client)
        await run(chat, sys.stdin, sys.stdout)


def main(argv: list[str] | None = None) -> int:
    """Start the interactive chat."""
    args = _parse(argv)
    try:
        asyncio.run(_main(args))
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())