"""Load a persisted vector index, or build and persist a new one.

Two terminal paths, selected once by whether the index path exists:

- loaded: open the persisted index; nothing is re-embedded.
- built: chunk the documents, embed every chunk, write a new index.

There is no update or merge path. An index older than the documents is
still reused; the staleness is only logged.
"""

import logging
import shutil
from pathlib import Path
from typing import Callable

from docqa.embedding.provider import EmbeddingProvider
from docqa.ingestion.chunker import chunk_documents
from docqa.models.document import SourceDocument
from docqa.vectorstore.chroma_store import ChromaStore

logger = logging.getLogger(__name__)

INDEX_LOADED = "loaded"
INDEX_BUILT = "built"

StoreFactory = Callable[..., ChromaStore]


def index_exists(index_path: str | Path) -> bool:
    return Path(index_path).exists()


def _latest_mtime(path: Path) -> float:
    if path.is_file():
        return path.stat().st_mtime
    mtimes = [p.stat().st_mtime for p in path.rglob("*") if p.is_file()]
    return max(mtimes, default=path.stat().st_mtime)


def index_is_stale(index_path: str | Path, documents_path: str | Path) -> bool:
    """Return True if any file under documents_path is newer than the index."""
    index_path = Path(index_path)
    documents_path = Path(documents_path)
    if not index_path.exists() or not documents_path.exists():
        return False
    return _latest_mtime(documents_path) > _latest_mtime(index_path)


def remove_index(index_path: str | Path) -> bool:
    """Delete a persisted index. Returns True if something was removed."""
    index_path = Path(index_path)
    if not index_path.exists():
        return False
    if index_path.is_dir():
        shutil.rmtree(index_path)
    else:
        index_path.unlink()
    logger.info("Removed index at %s", index_path)
    return True


def load_index(
    index_path: str | Path,
    embedding_provider: EmbeddingProvider,
    store_factory: StoreFactory = ChromaStore,
) -> ChromaStore:
    """Open a persisted index with the embedding provider attached for queries."""
    store = store_factory(path=str(index_path), embedding_provider=embedding_provider)
    logger.info("Loaded index from %s (%d chunks)", index_path, store.count)
    return store


def build_index(
    documents: list[SourceDocument],
    index_path: str | Path,
    embedding_provider: EmbeddingProvider,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    store_factory: StoreFactory = ChromaStore,
) -> ChromaStore:
    """Chunk, embed and persist documents as a new index.

    All chunks are embedded before the store is created, and a failed
    write removes the partial index, so an aborted build leaves nothing
    on disk for the next run to reuse.
    """
    chunks = chunk_documents(documents, chunk_size=chunk_size, chunk_overlap=chunk_overlap)
    logger.info("Split %d documents into %d chunks", len(documents), len(chunks))

    if chunks:
        embeddings = embedding_provider.embed([c.chunk_text for c in chunks])
        if len(embeddings) != len(chunks):
            raise ValueError(
                f"Embedding count ({len(embeddings)}) != chunk count ({len(chunks)})"
            )
        for chunk, emb in zip(chunks, embeddings):
            chunk.embedding = emb
    else:
        logger.warning("No text to index; creating an empty index at %s", index_path)

    try:
        store = store_factory(path=str(index_path), embedding_provider=embedding_provider)
        store.add_chunks(chunks)
    except Exception:
        logger.error("Index write failed; removing partial index at %s", index_path)
        remove_index(index_path)
        raise
    return store


def load_or_build_index(
    documents: list[SourceDocument],
    index_path: str | Path,
    embedding_provider: EmbeddingProvider,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    store_factory: StoreFactory = ChromaStore,
    documents_path: str | Path | None = None,
) -> tuple[ChromaStore, str]:
    """Reuse the index at index_path if present, else build it.

    Returns (store, action) where action is "loaded" or "built".
    """
    if index_exists(index_path):
        if documents_path is not None and index_is_stale(index_path, documents_path):
            logger.warning(
                "Documents in %s changed after the index at %s was built; "
                "reusing the existing index anyway",
                documents_path, index_path,
            )
        return load_index(index_path, embedding_provider, store_factory), INDEX_LOADED

    store = build_index(
        documents,
        index_path,
        embedding_provider,
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        store_factory=store_factory,
    )
    return store, INDEX_BUILT
