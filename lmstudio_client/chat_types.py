"""Wire types for the chat completions endpoint."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

_MISSING = object()


def _field(data: Any, key: str, kind: Any = None, *, default: Any = _MISSING) -> Any:
    """Fetch ``key`` from a decoded JSON object, checking presence and type."""
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    if key not in data:
        if default is _MISSING:
            raise ValueError(f"missing field `{key}`")
        return default
    value = data[key]
    if kind is not None:
        bad_bool = isinstance(value, bool) and kind in (int, float, (int, float))
        if bad_bool or not isinstance(value, kind):
            raise ValueError(f"invalid type for field `{key}`")
    return value


def _object_list(data: Any, key: str) -> list:
    items = _field(data, key, list)
    return list(items)


class Role(str, Enum):
    """The author of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Model(str, Enum):
    """Well-known chat models; any other model is given by its name as a string."""

    GEMMA2_2B = "gemma-2-2b-it"
    GEMMA2_9B = "gemma-2-9b-it"
    GEMMA2_27B = "gemma-2-27b-it"
    GEMMA3_1B = "gemma-3-1b-it-qat"
    GEMMA3_4B = "gemma-3-4b-it-qat"
    GEMMA3_12B = "gemma-3-12b-it-qat"
    GEMMA3_27B = "gemma-3-27b-it-qat"
    KIMIKO_13B = "mythomax-l2-kimiko-v2-13b"
    LLAMA3_1_8B = "meta-llama-3.1-8b-instruct"


ModelLike = Union[Model, str]


def model_name(model: ModelLike) -> str:
    """Return the name the server knows ``model`` by."""
    if isinstance(model, Model):
        return model.value
    if isinstance(model, str):
        return model
    raise TypeError(f"not a model: {model!r}")


@dataclass
class Message:
    """A single chat message."""

    role: Role
    content: str

    def __post_init__(self) -> None:
        self.role = Role(self.role)

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(Role.USER, content)

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Message:
        role = _field(data, "role", str)
        try:
            parsed_role = Role(role)
        except ValueError:
            raise ValueError(f"unknown role `{role}`") from None
        return cls(parsed_role, _field(data, "content", str))

    def __len__(self) -> int:
        """Length of the content in characters."""
        return len(self.content)


def _as_message(value: Message | str) -> Message:
    if isinstance(value, Message):
        return value
    if isinstance(value, str):
        return Message.user(value)
    raise TypeError(f"not a message: {value!r}")


@dataclass
class Request:
    """A chat completion request.

    An empty ``model`` means the chat's own model is used. ``context`` is not
    sent: it tells the chat whether to keep the exchange in its history.
    """

    model: ModelLike = ""
    messages: list[Message] = field(default_factory=list)
    context: bool = True
    temperature: float = 0.7
    max_tokens: int = 4090
    stream: bool = False

    def __post_init__(self) -> None:
        self.messages = [_as_message(m) for m in self.messages]

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": model_name(self.model),
            "messages": [m.to_dict() for m in self.messages],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "stream": self.stream,
        }


@dataclass
class Usage:
    """Token accounting for a completion."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Usage:
        return cls(
            prompt_tokens=_field(data, "prompt_tokens", int),
            completion_tokens=_field(data, "completion_tokens", int),
            total_tokens=_field(data, "total_tokens", int),
        )


@dataclass
class Choice:
    """One completion alternative."""

    index: int
    logprobs: Any
    finish_reason: str
    message: Message

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Choice:
        return cls(
            index=_field(data, "index", int),
            logprobs=_field(data, "logprobs", default=None),
            finish_reason=_field(data, "finish_reason", str),
            message=Message.from_dict(_field(data, "message", Mapping)),
        )


@dataclass
class Delta:
    """An increment of streamed content."""

    content: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Delta:
        content = _field(data, "content", default=None)
        if content is not None and not isinstance(content, str):
            raise ValueError("invalid type for field `content`")
        return cls(content)


@dataclass
class StreamChoice:
    """A choice carried by one streamed event."""

    delta: Delta

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StreamChoice:
        return cls(Delta.from_dict(_field(data, "delta", Mapping)))


@dataclass
class Stream:
    """One streamed event."""

    choices: list[StreamChoice]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Stream:
        return cls([StreamChoice.from_dict(c) for c in _object_list(data, "choices")])


@dataclass
class Response:
    """A complete (non-streamed) chat completion."""

    id: str
    object: str
    created: int
    model: str
    choices: list[Choice]
    usage: Usage
    system_fingerprint: str
    stats: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Response:
        created = _field(data, "created", int)
        if created < 0:
            raise ValueError("invalid value for field `created`")
        return cls(
            id=_field(data, "id", str),
            object=_field(data, "object", str),
            created=created,
            model=_field(data, "model", str),
            choices=[Choice.from_dict(c) for c in _object_list(data, "choices")],
            usage=Usage.from_dict(_field(data, "usage", Mapping)),
            system_fingerprint=_field(data, "system_fingerprint", str),
            stats=dict(_field(data, "stats", Mapping, default={})),
        )

    def text(self) -> str:
        """Content of the first choice."""
        return self.choices[0].message.content