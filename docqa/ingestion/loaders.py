"""File loaders that turn a documents directory into SourceDocuments.

Each loader is a callable ``(path) -> list[SourceDocument]``. The directory
loader maps file extensions to loaders and materializes every document
eagerly; a failing loader aborts the whole load.
"""

import csv
import json
import logging
from pathlib import Path
from typing import Callable

from pypdf import PdfReader

from docqa.models.document import SourceDocument

logger = logging.getLogger(__name__)

Loader = Callable[[Path], list[SourceDocument]]


def load_text(path: Path) -> list[SourceDocument]:
    """Load a plain text file as a single document."""
    text = path.read_text(encoding="utf-8")
    return [SourceDocument(content=text, metadata={"source": str(path)})]


def _collect_strings(value, out: list[str]) -> None:
    """Depth-first walk collecting every string value in a parsed JSON tree."""
    if isinstance(value, str):
        out.append(value)
    elif isinstance(value, dict):
        for item in value.values():
            _collect_strings(item, out)
    elif isinstance(value, list):
        for item in value:
            _collect_strings(item, out)


def load_json(path: Path) -> list[SourceDocument]:
    """Load a JSON file as one document whose content is its string values in order."""
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    segments: list[str] = []
    _collect_strings(data, segments)
    return [SourceDocument(content=segments, metadata={"source": str(path)})]


def load_csv(path: Path) -> list[SourceDocument]:
    """Load a CSV file as one document per row of ``column: value`` lines."""
    documents = []
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row_number, row in enumerate(reader, 1):
            content = "\n".join(
                f"{key.strip()}: {(value or '').strip()}"
                for key, value in row.items()
                if key is not None
            )
            documents.append(
                SourceDocument(
                    content=content,
                    metadata={"source": str(path), "line": row_number},
                )
            )
    return documents


def load_pdf(path: Path) -> list[SourceDocument]:
    """Load a PDF as one document per page."""
    reader = PdfReader(str(path))
    total_pages = len(reader.pages)
    documents = []
    for page_number, page in enumerate(reader.pages, 1):
        documents.append(
            SourceDocument(
                content=page.extract_text() or "",
                metadata={
                    "source": str(path),
                    "page": page_number,
                    "total_pages": total_pages,
                },
            )
        )
    return documents


DEFAULT_LOADERS: dict[str, Loader] = {
    ".json": load_json,
    ".txt": load_text,
    ".csv": load_csv,
    ".pdf": load_pdf,
}


class DirectoryLoader:
    """Loads every supported file under a directory, recursively."""

    def __init__(self, path: str | Path, loaders: dict[str, Loader] | None = None):
        self._path = Path(path)
        self._loaders = {
            ext.lower(): loader
            for ext, loader in (loaders if loaders is not None else DEFAULT_LOADERS).items()
        }

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[SourceDocument]:
        """Load all documents.

        Raises:
            FileNotFoundError: If the directory does not exist.
            NotADirectoryError: If the path is not a directory.
        """
        if not self._path.exists():
            raise FileNotFoundError(f"Documents directory not found: {self._path}")
        if not self._path.is_dir():
            raise NotADirectoryError(f"Not a directory: {self._path}")

        documents: list[SourceDocument] = []
        for file_path in sorted(p for p in self._path.rglob("*") if p.is_file()):
            loader = self._loaders.get(file_path.suffix.lower())
            if loader is None:
                logger.warning("Unknown file type, skipping: %s", file_path)
                continue
            loaded = loader(file_path)
            logger.info("Loaded %d document(s) from %s", len(loaded), file_path)
            documents.extend(loaded)
        return documents
