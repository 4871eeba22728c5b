"""Retrieval-augmented question answering over the vector index."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from langchain_core.messages import HumanMessage, SystemMessage

from docqa.models.answer import Answer, ChunkResult

if TYPE_CHECKING:
    from langchain_core.language_models.chat_models import BaseChatModel

    from docqa.embedding.provider import EmbeddingProvider
    from docqa.vectorstore.chroma_store import ChromaStore

logger = logging.getLogger(__name__)

Retriever = Callable[[str], list[ChunkResult]]

SYSTEM_PROMPT = (
    "Use the following pieces of context to answer the question at the end. "
    "If you don't know the answer, just say that you don't know, "
    "don't try to make up an answer."
)


def create_retriever(
    store: ChromaStore,
    embedding_provider: EmbeddingProvider,
    top_k: int = 4,
) -> Retriever:
    """Wrap the store as a retriever returning the top_k nearest chunks."""

    def retrieve(question: str) -> list[ChunkResult]:
        query_embedding = embedding_provider.embed_query([question])[0]
        raw_results = store.query(query_embedding=query_embedding, top_k=top_k)

        results = []
        for r in raw_results:
            metadata = r.get("metadata") or {}
            # ChromaDB cosine distance range [0, 2]
            distance = r.get("distance", 1.0)
            relevance_score = max(0.0, min(1.0, 1.0 - distance / 2.0))
            results.append(ChunkResult(
                chunk_id=r["id"],
                source=metadata.get("source", ""),
                chunk_index=int(metadata.get("chunk_index", 0)),
                chunk_text=r.get("text", ""),
                relevance_score=relevance_score,
            ))
        return results

    return retrieve


def build_context(chunks: list[ChunkResult]) -> str:
    return "\n\n".join(c["chunk_text"] for c in chunks)


class RetrievalQAChain:
    """Stuffs retrieved chunks into a single prompt and asks the LLM."""

    def __init__(self, llm: BaseChatModel, retriever: Retriever):
        self._llm = llm
        self._retriever = retriever

    @classmethod
    def from_llm(
        cls,
        llm: BaseChatModel,
        store: ChromaStore,
        embedding_provider: EmbeddingProvider,
        top_k: int = 4,
    ) -> RetrievalQAChain:
        return cls(llm, create_retriever(store, embedding_provider, top_k=top_k))

    def invoke(self, question: str) -> Answer:
        """Answer a question, returning the answer text and supporting chunks."""
        if not question or not question.strip():
            raise ValueError("question must not be empty")

        chunks = self._retriever(question)
        logger.info("Retrieved %d chunks for question: %s", len(chunks), question)

        messages = [
            SystemMessage(content=SYSTEM_PROMPT),
            HumanMessage(content=(
                f"{build_context(chunks)}\n\n"
                f"Question: {question}\n"
                "Helpful Answer:"
            )),
        ]
        response = self._llm.invoke(messages)
        return Answer(
            question=question,
            text=str(response.content).strip(),
            source_chunks=chunks,
        )
