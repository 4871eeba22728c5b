"""Abstract embedding provider interface."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Interface for text embedding generation.

    Implementations wrap a hosted API or a local model. The index manager
    embeds chunks through embed(); the retriever embeds questions through
    embed_query().
    """

    @abstractmethod
    def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for a batch of text strings.

        Args:
            texts: List of text strings to embed.

        Returns:
            List of embedding vectors, one per input text, in input order.

        Raises:
            ValueError: If texts is empty.
        """
        ...

    def embed_query(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for query texts.

        Override to add model-specific query preprocessing.
        Default delegates to embed().
        """
        return self.embed(texts)

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return the embedding dimension (e.g., 1536)."""
        ...
