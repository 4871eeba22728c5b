"""Embedding provider selection from settings."""

from config.settings import Settings
from docqa.embedding.provider import EmbeddingProvider


def is_openai_model(model_name: str) -> bool:
    return model_name.startswith("text-embedding-")


def get_embedding_provider(settings: Settings) -> EmbeddingProvider:
    """Create the configured embedding provider.

    Default: OpenAI hosted embeddings (text-embedding-ada-002). The
    sentence-transformers provider falls back to its own default model
    when the configured model is an OpenAI one.
    """
    provider = settings.docqa_embedding_provider.lower()
    model_name = settings.docqa_embedding_model

    if provider == "openai":
        from docqa.embedding.openai_provider import OpenAIEmbeddingProvider

        return OpenAIEmbeddingProvider(
            model_name=model_name,
            api_key=settings.openai_api_key,
        )
    elif provider == "sentence-transformers":
        from docqa.embedding.sentence_transformer import (
            DEFAULT_SENTENCE_TRANSFORMER_MODEL,
            SentenceTransformerEmbeddingProvider,
        )

        if is_openai_model(model_name):
            model_name = DEFAULT_SENTENCE_TRANSFORMER_MODEL
        return SentenceTransformerEmbeddingProvider(model_name)
    else:
        raise ValueError(
            f"Unsupported embedding provider: {provider}. "
            "Supported: 'openai', 'sentence-transformers'"
        )
