"""Wire types for the embeddings endpoint."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

_MISSING = object()


def _field(data: Any, key: str, kind: Any = None, *, default: Any = _MISSING) -> Any:
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


def _unsigned(data: Any, key: str) -> int:
    value = _field(data, key, int)
    if value < 0:
        raise ValueError(f"invalid value for field `{key}`")
    return value


class EmbeddingModel(str, Enum):
    """Well-known embedding models; any other model is given by name as a string."""

    ALL_MINILM_L6 = "text-embedding-all-minilm-l6-v2-embedding"

    def __str__(self) -> str:
        return self.value


EmbeddingModelLike = Union[EmbeddingModel, str]


def embedding_model_name(model: EmbeddingModelLike) -> str:
    """Return the name the server knows ``model`` by."""
    if isinstance(model, EmbeddingModel):
        return model.value
    if isinstance(model, str):
        return model
    raise TypeError(f"not an embedding model: {model!r}")


@dataclass
class EmbeddingRequest:
    """An embedding request for one or more texts."""

    model: EmbeddingModelLike = ""
    input: list[str] = field(default_factory=list)
    encoding_format: str | None = "float"

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": embedding_model_name(self.model),
            "input": list(self.input),
        }
        if self.encoding_format is not None:
            body["encoding_format"] = self.encoding_format
        return body


@dataclass
class Input:
    """A text to embed."""

    content: str

    def __len__(self) -> int:
        """Length of the content in characters."""
        return len(self.content)

    def is_empty(self) -> bool:
        """True if the content is empty or only whitespace."""
        return not self.content.strip()


@dataclass
class EmbeddingResponse:
    """One embedding vector and its position in the batch."""

    object: str
    embedding: list[float]
    index: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EmbeddingResponse:
        vector = _field(data, "embedding", list)
        for value in vector:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError("invalid type for field `embedding`")
        return cls(
            object=_field(data, "object", str),
            embedding=[float(v) for v in vector],
            index=_field(data, "index", int),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"object": self.object, "embedding": list(self.embedding), "index": self.index}

    def actual_embedding(self) -> list[float]:
        """A copy of the embedding vector."""
        return list(self.embedding)


@dataclass
class EmbeddingUsage:
    """Token accounting for an embedding request."""

    prompt_tokens: int
    total_tokens: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EmbeddingUsage:
        return cls(
            prompt_tokens=_unsigned(data, "prompt_tokens"),
            total_tokens=_unsigned(data, "total_tokens"),
        )

    def to_dict(self) -> dict[str, int]:
        return {"prompt_tokens": self.prompt_tokens, "total_tokens": self.total_tokens}


class ParseEmbeddingDataError(ValueError):
    """Raised when an embeddings reply cannot be parsed."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to parse EmbeddingData: {reason}")
        self.reason = reason


@dataclass
class EmbeddingData:
    """The complete reply of the embeddings endpoint."""

    object: str
    data: list[EmbeddingResponse]
    model: str
    usage: EmbeddingUsage

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EmbeddingData:
        return cls(
            object=_field(data, "object", str),
            data=[EmbeddingResponse.from_dict(d) for d in _field(data, "data", list)],
            model=_field(data, "model", str),
            usage=EmbeddingUsage.from_dict(_field(data, "usage", Mapping)),
        )

    @classmethod
    def from_json(cls, text: str) -> EmbeddingData:
        """Parse a JSON document, raising ParseEmbeddingDataError on failure."""
        try:
            return cls.from_dict(json.loads(text))
        except ValueError as exc:
            raise ParseEmbeddingDataError(str(exc)) from exc

    def to_dict(self) -> dict[str, Any]:
        return {
            "object": self.object,
            "data": [d.to_dict() for d in self.data],
            "model": self.model,
            "usage": self.usage.to_dict(),
        }

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=2)