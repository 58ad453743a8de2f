# lmstudio-client

An asyncio client for the OpenAI-compatible server that LM Studio runs on your
machine. It covers two endpoints:

- **chat completions** (`/v1/chat/completions`), plain or streamed. A rolling
  conversation context drops the oldest messages once a size limit is reached.
- **text embeddings** (`/v1/embeddings`), for one text or a batch.

## Installation

```
pip install lmstudio-client
```

The only runtime dependency is `httpx`.

## Chatting

```python
import asyncio

import httpx

from lmstudio_client.chat import Chat
from lmstudio_client.chat_types import Message, Model, Request
from lmstudio_client.context import Context


async def main():
    async with httpx.AsyncClient(timeout=None) as client:
        chat = Chat(
            Model.GEMMA3_4B,  # or any model name as a plain string
            Context("You're Jarvis - my assistant.", 4090),
            "1234",
            client,
        )

        request = Request(messages=[Message.user("Hello, Jarvis.")], stream=False)
        response = await chat.send(request)
        print(response.text())


asyncio.run(main())
```

`Chat(model, context, port, client=None)` posts to
`http://127.0.0.1:<port>/v1/chat/completions`. Call `chat.change_url(url)` to
send to another address. If you pass no `httpx.AsyncClient`, the chat creates
its own and does not close it. Pass your own client if you want to control
its lifetime.

A `Request` has these fields and defaults:

| field         | default | meaning                                              |
|---------------|---------|------------------------------------------------------|
| `model`       | `""`    | empty means the chat's own model                     |
| `messages`    | `[]`    | `Message` objects, or plain strings as user messages |
| `context`     | `True`  | keep the exchange in the chat's history (not sent)   |
| `temperature` | `0.7`   |                                                      |
| `max_tokens`  | `4090`  |                                                      |
| `stream`      | `False` |                                                      |

With `context=True`, the messages you send and the assistant's answer are added
to the chat's `Context`, and every later request carries the whole
conversation. With `context=False`, the request is sent with a copy of the
current conversation plus the new messages, and the history stays unchanged.

A non-streamed `send` returns a `Response`. `response.text()` is the content of
the first choice, and `response.usage` holds the token counts. An HTTP error
status raises `httpx.HTTPStatusError`. A reply of the wrong shape raises
`ValueError`.

### Streaming

With `stream=True`, `send` returns `None` and the answer arrives piece by
piece, from `await chat.next()` or by iterating over the chat:

```python
await chat.send(Request(messages=["Tell me a story."], stream=True))

async for piece in chat:
    print(piece, end="", flush=True)
```

A server event that has no content gives an empty string. Events that cannot be
parsed are skipped, and the stream ends at `data: [DONE]`. Transport errors are
raised while you read. Once the stream is exhausted, `next()` returns `None`.
If the request had `context=True`, the full answer is then added to the
context. Starting a new streamed request closes the one still being read.

### Context

`Context(system_prompt, context_limit)` holds the system prompt followed by the
conversation. Its size is counted in characters of message content, and
`context.tokens` gives the current count. When the count exceeds
`context_limit`, the oldest messages after the system prompt are removed. The
system prompt and the newest message are always kept.

- `context.add(message)` adds a `Message`, or a string as a user message.
- `context.edit(text)` appends `Context: [...]` material to the system prompt.
- `context.clear()` drops everything except the system prompt.
- `context.get()` returns copies of the messages, system prompt first.
- `context.copy()` returns an independent copy.

## Embeddings

```python
import asyncio

from lmstudio_client.embedding import Embedding
from lmstudio_client.embedding_types import EmbeddingModel, EmbeddingRequest


async def main():
    embedder = Embedding()  # http://127.0.0.1:1234/v1/embeddings
    request = EmbeddingRequest(
        model=EmbeddingModel.ALL_MINILM_L6,
        input=["Rust is magic."],
    )
    result = await embedder.embed(request)
    print(result.vectors[0][:5], len(result))


asyncio.run(main())
```

`Embedding(url=None, client=None)` posts to the given URL, or to the local
default. `EmbeddingRequest` sends `encoding_format="float"` unless you set it to
`None`.

`embed` returns an `EmbeddingResult`. When the server returns one embedding,
`batch` is false, `vectors` holds that one vector, and `len(result)` is its
dimension. When the server returns several, `batch` is true and `len(result)` is
the number of vectors. A reply with no embedding raises `ValueError`.

`Embedding.send` returns the raw `EmbeddingData`, which includes the model name
and usage figures. `str()` of an `EmbeddingData` gives pretty-printed JSON.
`EmbeddingData.from_json` parses such text and raises `ParseEmbeddingDataError`,
a `ValueError`, on bad input.

## Command line

```
lmstudio-chat [--port PORT] [--model NAME] [--system PROMPT] [--limit N]
```

This starts an interactive session with a local server. The defaults are port
`9090`, model `gemma-3-4b-it-qat`, and a context limit of 4090 characters. The
session sends a greeting and prints the reply. It then reads lines from
standard input and streams each answer back as it is generated. It ends at end
of input. HTTP and parse errors are printed as `Error: ...`.

## Limitations

- Context size is measured in characters, not model tokens.
- Only the chat completions and embeddings endpoints are covered. There is no
  model listing, loading or management.