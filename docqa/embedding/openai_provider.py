"""OpenAI hosted embedding provider implementation."""

import logging

from openai import OpenAI

from docqa.embedding.provider import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "text-embedding-ada-002"

_MODEL_DIMENSIONS = {
    "text-embedding-ada-002": 1536,
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
}


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embedding provider calling the OpenAI embeddings endpoint.

    Requests are sent in batches of ``batch_size`` texts; vectors are
    returned in input order.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_OPENAI_MODEL,
        api_key: str | None = None,
        batch_size: int = 512,
        client: OpenAI | None = None,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        self._model_name = model_name
        self._batch_size = batch_size
        self._client = client or OpenAI(api_key=api_key or None)
        self._dimension = _MODEL_DIMENSIONS.get(model_name)

    @property
    def model_name(self) -> str:
        return self._model_name

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")

        vectors: list[list[float]] = []
        for start in range(0, len(texts), self._batch_size):
            batch = texts[start:start + self._batch_size]
            logger.info(
                "Embedding batch %d-%d of %d with %s",
                start, start + len(batch), len(texts), self._model_name,
            )
            response = self._client.embeddings.create(model=self._model_name, input=batch)
            ordered = sorted(response.data, key=lambda item: item.index)
            vectors.extend(list(item.embedding) for item in ordered)

        if vectors and self._dimension is None:
            self._dimension = len(vectors[0])
        return vectors

    @property
    def dimension(self) -> int:
        if self._dimension is None:
            self._dimension = len(self.embed(["dimension probe"])[0])
        return self._dimension
