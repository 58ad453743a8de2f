"""Chat client for the chat completions endpoint, with optional streaming."""

from __future__ import annotations

import json
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

import httpx

from .chat_types import (
    Message,
    ModelLike,
    Request,
    Response,
    Role,
    Stream,
    StreamChoice,
    model_name,
)
from .context import Context

_DATA_PREFIX = "data: "
_DONE = "[DONE]"


async def _stream_choices(
    client: httpx.AsyncClient, url: str, payload: dict[str, Any]
) -> AsyncIterator[StreamChoice]:
    """Post a streaming request and yield the choices of each server-sent event."""
    async with client.stream("POST", url, json=payload) as response:
        async for line in response.aiter_lines():
            if not line.startswith(_DATA_PREFIX):
                continue
            data = line[len(_DATA_PREFIX):]
            if data == _DONE:
                return
            try:
                event = Stream.from_dict(json.loads(data))
            except ValueError:
                continue
            for choice in event.choices:
                yield choice


class ResponseReader:
    """Reads the pieces of a streamed answer and collects them into one message."""

    def __init__(self, choices: AsyncIterable[StreamChoice], context: bool) -> None:
        self._choices = aiter(choices)
        self.message = Message(Role.ASSISTANT, "")
        self.is_ready = False
        self.context = context

    async def next(self) -> str | None:
        """Return the next piece of text, or None once the stream has ended.

        A choice without content gives an empty string. Transport errors are
        raised.
        """
        if self.is_ready:
            return None
        try:
            choice = await anext(self._choices)
        except StopAsyncIteration:
            self.is_ready = True
            return None
        text = choice.delta.content
        if text is None:
            return ""
        self.message.content += text
        return text

    async def _close(self) -> None:
        close = getattr(self._choices, "aclose", None)
        if close is not None:
            await close()


class Chat:
    """A conversation with a model served on the local machine."""

    def __init__(
        self,
        model: ModelLike,
        context: Context,
        port: str | int,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        model_name(model)
        self.model = model
        self.context = context
        self.url = f"http://127.0.0.1:{port}/v1/chat/completions"
        self._client = client if client is not None else httpx.AsyncClient(timeout=None)
        self._reader: ResponseReader | None = None

    def change_url(self, url: str) -> None:
        """Send requests to ``url`` from now on."""
        self.url = url

    async def send(self, request: Request) -> Response | None:
        """Send ``request``.

        Without streaming the complete response is returned. With streaming
        None is returned and the answer is read with :meth:`next`.
        """
        if request.context:
            for message in request.messages:
                self.context.add(message)
            messages = self.context.get()
        else:
            scratch = self.context.copy()
            for message in request.messages:
                scratch.add(message)
            messages = scratch.get()

        model = self.model if model_name(request.model) == "" else request.model
        outgoing = Request(
            model=model,
            messages=messages,
            context=request.context,
            temperature=request.temperature,
            max_tokens=request.max_tokens,
            stream=request.stream,
        )
        payload = outgoing.to_dict()

        if not outgoing.stream:
            reply = await self._client.post(self.url, json=payload)
            reply.raise_for_status()
            response = Response.from_dict(reply.json())
            if outgoing.context and response.choices:
                answer = Message(Role.ASSISTANT, response.choices[0].message.content)
                self.context.add(answer)
            return response

        if self._reader is not None:
            await self._reader._close()
        self._reader = ResponseReader(
            _stream_choices(self._client, self.url, payload), outgoing.context
        )
        return None

    async def next(self) -> str | None:
        """Next piece of the streamed answer, or None when there is nothing more."""
        reader = self._reader
        if reader is None:
            return None
        text = await reader.next()
        if text is None:
            if reader.context:
                self.context.add(Message(Role.ASSISTANT, reader.message.content))
            self._reader = None
        return text

    async def __aiter__(self) -> AsyncIterator[str]:
        while (text := await self.next()) is not None:
            yield text