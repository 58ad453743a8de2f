"""Bounded chat history with a fixed system prompt."""

from __future__ import annotations

from dataclasses import replace

from .chat_types import Message, Role


class Context:
    """Chat history that drops its oldest messages once over a character budget.

    The system prompt is always kept, and so is the most recent message.
    """

    def __init__(self, system_prompt: str, context_limit: int) -> None:
        self._messages: list[Message] = [Message(Role.SYSTEM, system_prompt)]
        self._tokens = 0
        self.context_limit = context_limit

    @property
    def tokens(self) -> int:
        """Characters counted against the limit."""
        return self._tokens

    def edit(self, modification: str) -> None:
        """Append retrieved context to the system prompt."""
        self._messages[0].content += f"\n\nContext: [\n\t{modification}]"

    def add(self, message: Message | str) -> None:
        """Add a message; plain strings are user messages."""
        if isinstance(message, str):
            message = Message.user(message)
        elif not isinstance(message, Message):
            raise TypeError(f"not a message: {message!r}")
        message = replace(message)
        self._tokens += len(message.content)
        self._messages.append(message)
        while len(self._messages) > 2 and self._tokens > self.context_limit:
            dropped = self._messages.pop(1)
            self._tokens -= len(dropped.content)

    def get(self) -> list[Message]:
        """Copies of all messages, system prompt first."""
        return [replace(m) for m in self._messages]

    def clear(self) -> None:
        """Drop everything but the system prompt."""
        del self._messages[1:]

    def copy(self) -> Context:
        """An independent copy of this context."""
        other = Context.__new__(Context)
        other._messages = self.get()
        other._tokens = self._tokens
        other.context_limit = self.context_limit
        return other