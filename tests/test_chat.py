import json

import httpx
import pytest

from lmstudio_client.chat import Chat, ResponseReader
from lmstudio_client.chat_types import Delta, Model, Request, Role, StreamChoice
from lmstudio_client.context import Context


def _completion(content):
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "gemma-3-4b-it-qat",
        "choices": [
            {
                "index": 0,
                "logprobs": None,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
        "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
        "system_fingerprint": "fp",
    }


def _sse(*pieces, done=True, extra_lines=()):
    lines = list(extra_lines)
    for piece in pieces:
        delta = {} if piece is None else {"content": piece}
        lines.append("data: " + json.dumps({"choices": [{"delta": delta}]}))
    if done:
        lines.append("data: [DONE]")
    return ("\n\n".join(lines) + "\n\n").encode()


def _make_chat(handler, captured, model=Model.GEMMA3_4B, limit=4090):
    def recording(request):
        captured.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording))
    return Chat(model, Context("You're Jarvis.", limit), "9090", client)


def test_default_url_uses_port():
    chat = Chat(Model.KIMIKO_13B, Context("sys", 10), "1234", httpx.AsyncClient())
    assert chat.url == "http://127.0.0.1:1234/v1/chat/completions"


@pytest.mark.asyncio
async def test_send_without_stream_returns_response_and_records_answer():
    captured = []
    chat = _make_chat(lambda r: httpx.Response(200, json=_completion("I am Jarvis")), captured)
    response = await chat.send(Request(messages=["Hi, what's your name?"], stream=False))

    assert response.text() == "I am Jarvis"
    payload = json.loads(captured[0].content)
    assert payload["model"] == "gemma-3-4b-it-qat"
    assert payload["stream"] is False
    assert "context" not in payload
    assert [m["role"] for m in payload["messages"]] == ["system", "user"]
    history = chat.context.get()
    assert [m.role for m in history] == [Role.SYSTEM, Role.USER, Role.ASSISTANT]
    assert history[-1].content == "I am Jarvis"


@pytest.mark.asyncio
async def test_send_without_context_leaves_history_alone():
    captured = []
    chat = _make_chat(lambda r: httpx.Response(200, json=_completion("ok")), captured)
    await chat.send(Request(messages=["hello"], context=False))

    payload = json.loads(captured[0].content)
    assert payload["messages"][-1] == {"role": "user", "content": "hello"}
    assert len(chat.context.get()) == 1


@pytest.mark.asyncio
async def test_explicit_model_is_kept():
    captured = []
    chat = _make_chat(lambda r: httpx.Response(200, json=_completion("ok")), captured)
    await chat.send(Request(model="my-model", messages=["x"]))
    assert json.loads(captured[0].content)["model"] == "my-model"


@pytest.mark.asyncio
async def test_change_url_redirects_requests():
    captured = []
    chat = _make_chat(lambda r: httpx.Response(200, json=_completion("ok")), captured)
    chat.change_url("http://localhost:5555/v1/chat/completions")
    await chat.send(Request(messages=["x"]))
    assert str(captured[0].url) == "http://localhost:5555/v1/chat/completions"


@pytest.mark.asyncio
async def test_error_status_raises():
    captured = []
    chat = _make_chat(lambda r: httpx.Response(500, text="boom"), captured)
    with pytest.raises(httpx.HTTPStatusError):
        await chat.send(Request(messages=["x"]))


@pytest.mark.asyncio
async def test_streaming_collects_pieces_into_context():
    captured = []
    chat = _make_chat(lambda r: httpx.Response(200, content=_sse("Hel", "lo")), captured)
    assert await chat.send(Request(messages=["hi"], stream=True)) is None

    pieces = [await chat.next(), await chat.next()]
    assert pieces == ["Hel", "lo"]
    assert await chat.next() is None
    assert await chat.next() is None

    assert json.loads(captured[0].content)["stream"] is True
    history = chat.context.get()
    assert [m.content for m in history[1:]] == ["hi", "Hello"]
    assert history[-1].role == Role.ASSISTANT


@pytest.mark.asyncio
async def test_streaming_async_iteration_skips_bad_lines_and_stops_at_done():
    body = _sse(
        "a", None, "b",
        extra_lines=["data: not json", ": comment", "event: x"],
    ) + b"data: " + json.dumps({"choices": [{"delta": {"content": "late"}}]}).encode() + b"\n\n"
    captured = []
    chat = _make_chat(lambda r: httpx.Response(200, content=body), captured)
    await chat.send(Request(messages=["hi"], stream=True))

    pieces = [piece async for piece in chat]
    assert pieces == ["a", "", "b"]
    assert chat.context.get()[-1].content == "ab"


@pytest.mark.asyncio
async def test_streaming_without_context_does_not_record():
    captured = []
    chat = _make_chat(lambda r: httpx.Response(200, content=_sse("x")), captured)
    await chat.send(Request(messages=["hi"], stream=True, context=False))
    assert [piece async for piece in chat] == ["x"]
    assert len(chat.context.get()) == 1


@pytest.mark.asyncio
async def test_streaming_transport_error_raised_from_next():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    captured = []
    chat = _make_chat(handler, captured)
    assert await chat.send(Request(messages=["hi"], stream=True)) is None
    with pytest.raises(httpx.ConnectError):
        await chat.next()


@pytest.mark.asyncio
async def test_next_without_stream_is_none():
    captured = []
    chat = _make_chat(lambda r: httpx.Response(200, json=_completion("ok")), captured)
    assert await chat.next() is None


async def _choices(*items):
    for item in items:
        if isinstance(item, Exception):
            raise item
        yield StreamChoice(Delta(item))


@pytest.mark.asyncio
async def test_reader_accumulates_message():
    reader = ResponseReader(_choices("foo", None, "bar"), True)
    assert await reader.next() == "foo"
    assert await reader.next() == ""
    assert await reader.next() == "bar"
    assert reader.is_ready is False
    assert await reader.next() is None
    assert reader.is_ready is True
    assert reader.message.content == "foobar"
    assert reader.message.role == Role.ASSISTANT


@pytest.mark.asyncio
async def test_reader_propagates_errors():
    reader = ResponseReader(_choices("x", RuntimeError("lost")), False)
    assert await reader.next() == "x"
    with pytest.raises(RuntimeError, match="lost"):
        await reader.next()
    assert await reader.next() is None
    assert reader.message.content == "x"