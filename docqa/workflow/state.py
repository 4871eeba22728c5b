"""Workflow state definition for the LangGraph run."""

from typing import Any, TypedDict

from docqa.models.answer import Answer
from docqa.models.document import SourceDocument


class WorkflowState(TypedDict, total=False):
    """State object passed through the LangGraph workflow."""
    documents: list[SourceDocument]
    cost: float
    skipped: bool
    index_action: str | None  # "loaded" | "built"
    vector_store: Any
    answer: Answer | None
