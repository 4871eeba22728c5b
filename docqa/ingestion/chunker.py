"""Recursive character text splitter."""

from docqa.models.chunk import DocumentChunk
from docqa.models.document import SourceDocument

DEFAULT_SEPARATORS = ["\n\n", "\n", " ", ""]


def _validate(chunk_size: int, chunk_overlap: int) -> None:
    if chunk_size <= 0:
        raise ValueError("chunk_size must be > 0")
    if chunk_overlap < 0:
        raise ValueError("chunk_overlap must be >= 0")
    if chunk_overlap >= chunk_size:
        raise ValueError("chunk_overlap must be < chunk_size")


def _split_by_window(text: str, chunk_size: int, chunk_overlap: int) -> list[str]:
    """Hard cut into fixed-size character windows."""
    step = chunk_size - chunk_overlap
    pieces = []
    for start in range(0, max(1, len(text) - chunk_overlap), step):
        piece = text[start:start + chunk_size].strip()
        if piece:
            pieces.append(piece)
    return pieces


def _get_overlap_text(text: str, overlap_chars: int) -> str:
    """Get the last N characters of text for overlap, snapping to a word boundary."""
    if overlap_chars <= 0:
        return ""
    if len(text) <= overlap_chars:
        return text
    candidate = text[-overlap_chars:]
    # Snap forward to the next word boundary to avoid mid-word truncation
    space_idx = candidate.find(" ")
    if space_idx != -1:
        candidate = candidate[space_idx + 1:]
    return candidate


def split_text(
    text: str,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    separators: list[str] | None = None,
) -> list[str]:
    """Split text recursively using a hierarchy of separators.

    Tries paragraph breaks first, then lines, then words, and finally cuts
    fixed character windows. Every returned piece is at most chunk_size
    characters long.
    """
    _validate(chunk_size, chunk_overlap)
    if separators is None:
        separators = DEFAULT_SEPARATORS

    text = text.strip()
    if not text:
        return []
    if len(text) <= chunk_size:
        return [text]

    separator = separators[0]
    remaining_separators = separators[1:] or [""]

    if separator == "":
        return _split_by_window(text, chunk_size, chunk_overlap)
    if separator not in text:
        return split_text(text, chunk_size, chunk_overlap, remaining_separators)

    chunks: list[str] = []
    current_chunk = ""

    for part in text.split(separator):
        part = part.strip()
        if not part:
            continue

        if len(part) > chunk_size:
            if current_chunk:
                chunks.append(current_chunk)
                current_chunk = ""
            chunks.extend(split_text(part, chunk_size, chunk_overlap, remaining_separators))
            continue

        candidate = current_chunk + separator + part if current_chunk else part
        if len(candidate) > chunk_size and current_chunk:
            chunks.append(current_chunk)
            # Start new chunk with overlap
            overlap_text = _get_overlap_text(current_chunk, chunk_overlap)
            current_chunk = overlap_text + separator + part if overlap_text else part
            if len(current_chunk) > chunk_size:
                current_chunk = part
        else:
            current_chunk = candidate

    if current_chunk:
        chunks.append(current_chunk)

    return chunks


def chunk_document(
    document: SourceDocument,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
) -> list[DocumentChunk]:
    """Split a document's normalized text into chunks tagged with its source."""
    pieces = split_text(document.normalized_text(), chunk_size, chunk_overlap)
    return [
        DocumentChunk(chunk_text=piece, chunk_index=idx, source=document.source)
        for idx, piece in enumerate(pieces)
    ]


def chunk_documents(
    documents: list[SourceDocument],
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
) -> list[DocumentChunk]:
    """Chunk every document, preserving document order."""
    _validate(chunk_size, chunk_overlap)
    chunks: list[DocumentChunk] = []
    for document in documents:
        chunks.extend(chunk_document(document, chunk_size, chunk_overlap))
    return chunks
