"""ChromaDB vector store for document chunks."""

import logging

import chromadb
from chromadb.config import Settings as ChromaSettings

from docqa.embedding.provider import EmbeddingProvider
from docqa.models.chunk import DocumentChunk

logger = logging.getLogger(__name__)

COLLECTION_NAME = "documents"


class ChromaStore:
    """ChromaDB-backed vector index for document chunks.

    Manages a single collection with cosine distance. A filesystem path
    gives a persistent index (written on every add); ":memory:" gives an
    ephemeral one.

    The embedding provider, when given, is kept for embedding future
    queries; stored vectors are never recomputed.
    """

    def __init__(
        self,
        path: str = "Documents.index",
        embedding_provider: EmbeddingProvider | None = None,
    ):
        self._path = path
        self._embedding_provider = embedding_provider
        if path == ":memory:":
            self._client = chromadb.EphemeralClient(
                settings=ChromaSettings(anonymized_telemetry=False),
            )
        else:
            self._client = chromadb.PersistentClient(
                path=path,
                settings=ChromaSettings(anonymized_telemetry=False),
            )
        self._collection = self._client.get_or_create_collection(
            name=COLLECTION_NAME,
            metadata={"hnsw:space": "cosine"},
        )

    @property
    def path(self) -> str:
        return self._path

    @property
    def max_batch_size(self) -> int:
        return self._client.get_max_batch_size()

    @property
    def embedding_provider(self) -> EmbeddingProvider | None:
        return self._embedding_provider

    def add_chunks(self, chunks: list[DocumentChunk]) -> int:
        """Add embedded chunks to the collection.

        Returns the number of chunks added.
        """
        if not chunks:
            return 0

        ids = []
        embeddings = []
        documents = []
        metadatas = []

        for chunk in chunks:
            if not chunk.embedding:
                raise ValueError(f"chunk {chunk.id} has no embedding")
            ids.append(chunk.id)
            embeddings.append(chunk.embedding)
            documents.append(chunk.chunk_text)
            metadatas.append({
                "source": chunk.source,
                "chunk_index": chunk.chunk_index,
            })

        # Chroma rejects adds larger than the client's max batch size
        batch_size = self.max_batch_size
        for start in range(0, len(ids), batch_size):
            end = start + batch_size
            self._collection.add(
                ids=ids[start:end],
                embeddings=embeddings[start:end],
                documents=documents[start:end],
                metadatas=metadatas[start:end],
            )
        logger.info("Stored %d chunks in %s", len(ids), self._path)
        return len(ids)

    def query(self, query_embedding: list[float], top_k: int = 4) -> list[dict]:
        """Query the collection for the chunks nearest to an embedding.

        Returns a list of dicts with keys: id, text, metadata, distance.
        """
        if top_k <= 0:
            raise ValueError("top_k must be > 0")

        total = self._collection.count()
        if total == 0:
            return []

        results = self._collection.query(
            query_embeddings=[query_embedding],
            n_results=min(top_k, total),
        )

        output = []
        if results["ids"] and results["ids"][0]:
            for i in range(len(results["ids"][0])):
                output.append({
                    "id": results["ids"][0][i],
                    "text": results["documents"][0][i] if results["documents"] else "",
                    "metadata": results["metadatas"][0][i] if results["metadatas"] else {},
                    "distance": results["distances"][0][i] if results["distances"] else 0.0,
                })
        return output

    @property
    def count(self) -> int:
        """Return the number of chunks in the collection."""
        return self._collection.count()
