"""Answer data models."""

from dataclasses import dataclass, field
from typing import TypedDict


class ChunkResult(TypedDict):
    """A retrieved chunk from the vector index."""
    chunk_id: str
    source: str
    chunk_index: int
    chunk_text: str
    relevance_score: float


@dataclass
class Answer:
    """A response grounded in retrieved chunks."""

    question: str
    text: str
    source_chunks: list[ChunkResult] = field(default_factory=list)

    def __post_init__(self):
        if not self.question:
            raise ValueError("question must not be empty")

    @property
    def sources(self) -> list[str]:
        """Distinct chunk sources in retrieval order."""
        seen = []
        for chunk in self.source_chunks:
            if chunk["source"] and chunk["source"] not in seen:
                seen.append(chunk["source"])
        return seen
