"""Embedding cost estimation via tiktoken token counting."""

import json
import logging

import tiktoken

from docqa.models.document import SourceDocument

logger = logging.getLogger(__name__)

DEFAULT_TOKENIZER_MODEL = "text-embedding-ada-002"
DEFAULT_RATE_PER_1K_TOKENS = 0.0004


def serialize_documents(documents: list[SourceDocument]) -> str:
    """Serialize documents to the compact JSON blob that gets tokenized."""
    return json.dumps(
        [doc.to_dict() for doc in documents],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def count_tokens(
    documents: list[SourceDocument],
    encoding=None,
    model_name: str = DEFAULT_TOKENIZER_MODEL,
) -> int:
    """Count tokens in the serialized documents.

    Args:
        encoding: Optional encoder exposing ``encode(text) -> list[int]``.
            When omitted, the tiktoken encoding for ``model_name`` is
            resolved (downloaded on first use).
    """
    if encoding is None:
        encoding = tiktoken.encoding_for_model(model_name)
    tokens = encoding.encode(serialize_documents(documents), disallowed_special=())
    return len(tokens)


def cost_for_tokens(token_count: int, rate_per_1k: float = DEFAULT_RATE_PER_1K_TOKENS) -> float:
    return (token_count / 1000) * rate_per_1k


def estimate_cost(
    documents: list[SourceDocument],
    rate_per_1k: float = DEFAULT_RATE_PER_1K_TOKENS,
    encoding=None,
    model_name: str = DEFAULT_TOKENIZER_MODEL,
) -> float:
    """Estimate the cost of embedding the documents.

    cost = tokens / 1000 * rate_per_1k
    """
    token_count = count_tokens(documents, encoding=encoding, model_name=model_name)
    cost = cost_for_tokens(token_count, rate_per_1k)
    logger.info("Estimated %d tokens, cost %.6f", token_count, cost)
    return cost
