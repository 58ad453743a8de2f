"""Client for the embeddings endpoint."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from .embedding_types import EmbeddingData, EmbeddingRequest

DEFAULT_URL = "http://127.0.0.1:1234/v1/embeddings"


@dataclass(frozen=True)
class EmbeddingResult:
    """Vectors returned for a request.

    A single result holds exactly one vector. A batch result holds one vector
    for each input.
    """

    vectors: list[list[float]]
    batch: bool = False

    def __len__(self) -> int:
        """Dimension of the vector for a single result, or the number of vectors."""
        if self.batch:
            return len(self.vectors)
        return len(self.vectors[0])


class Embedding:
    """Sends texts to the embeddings endpoint and returns their vectors."""

    def __init__(
        self,
        url: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url if url is not None else DEFAULT_URL
        self.client = client if client is not None else httpx.AsyncClient(timeout=None)

    async def send(self, request: EmbeddingRequest) -> EmbeddingData:
        """Post ``request`` and return the parsed reply.

        HTTP error statuses raise ``httpx.HTTPStatusError``; a reply that does
        not have the expected shape raises ``ValueError``.
        """
        reply = await self.client.post(self.url, json=request.to_dict())
        reply.raise_for_status()
        return EmbeddingData.from_dict(reply.json())

    async def embed(self, request: EmbeddingRequest) -> EmbeddingResult:
        """Return only the vectors for ``request``."""
        data = await self.send(request)
        if len(data.data) > 1:
            return EmbeddingResult([item.actual_embedding() for item in data.data], batch=True)
        if not data.data:
            raise ValueError("the reply holds no embedding")
        return EmbeddingResult([data.data[0].actual_embedding()], batch=False)