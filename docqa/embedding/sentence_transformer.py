"""Local embedding provider backed by sentence-transformers."""

import logging

from sentence_transformers import SentenceTransformer

from docqa.embedding.provider import EmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_SENTENCE_TRANSFORMER_MODEL = "all-MiniLM-L6-v2"


class SentenceTransformerEmbeddingProvider(EmbeddingProvider):
    """Embeds chunks on the local machine, with no API key or per-token cost.

    Vectors are L2-normalized so the cosine collection ranks them the
    same way as the hosted provider's unit-length vectors.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_SENTENCE_TRANSFORMER_MODEL,
        batch_size: int = 32,
    ):
        if batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        logger.info("Loading sentence-transformers model: %s", model_name)
        try:
            self._model = SentenceTransformer(model_name, local_files_only=True)
        except OSError:
            self._model = SentenceTransformer(model_name)
        self._model_name = model_name
        self._batch_size = batch_size
        self._dimension = self._model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        return self._model_name

    def embed(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            raise ValueError("texts must not be empty")
        embeddings = self._model.encode(
            texts,
            batch_size=self._batch_size,
            show_progress_bar=False,
            normalize_embeddings=True,
        )
        return embeddings.tolist()

    @property
    def dimension(self) -> int:
        return self._dimension
