"""Source document data model."""

from dataclasses import dataclass, field


@dataclass
class SourceDocument:
    """A document produced by a file loader.

    ``content`` is either plain text or an ordered sequence of text segments
    (e.g. the string values extracted from a JSON file).
    """

    content: str | list[str]
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.content, (str, list)):
            raise ValueError(
                f"content must be a string or a list of strings, got {type(self.content).__name__}"
            )
        if isinstance(self.content, list) and not all(isinstance(s, str) for s in self.content):
            raise ValueError("content segments must all be strings")

    @property
    def source(self) -> str:
        return str(self.metadata.get("source", ""))

    def normalized_text(self) -> str:
        """Return the content as a single string, joining segments by newline."""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(self.content)

    def to_dict(self) -> dict:
        return {"pageContent": self.content, "metadata": self.metadata}
