"""Document Chunk data model."""

import uuid
from dataclasses import dataclass, field


@dataclass
class DocumentChunk:
    """A bounded-length segment of a source document sized for embedding."""

    chunk_text: str
    chunk_index: int
    source: str = ""
    embedding: list[float] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not self.chunk_text:
            raise ValueError("chunk_text must not be empty")
        if self.chunk_index < 0:
            raise ValueError("chunk_index must be >= 0")
