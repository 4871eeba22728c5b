"""Application configuration management."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """docqa settings loaded from environment variables and a local .env file."""

    # Credentials
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    google_api_key: str = ""

    # Inputs
    docqa_documents_path: str = "./documents"
    docqa_question: str = "Tell me about these docs"

    # Storage
    docqa_index_path: str = "Documents.index"

    # Embedding
    docqa_embedding_provider: str = "openai"
    docqa_embedding_model: str = "text-embedding-ada-002"

    # Cost gate
    docqa_tokenizer_model: str = "text-embedding-ada-002"
    docqa_rate_per_1k_tokens: float = 0.0004
    docqa_cost_ceiling: float = 1.0

    # Chunking (characters)
    docqa_chunk_size: int = 1000
    docqa_chunk_overlap: int = 200

    # Retrieval
    docqa_top_k: int = 4

    # LLM
    docqa_llm_provider: str = "anthropic"
    docqa_llm_model: str = "claude-sonnet-4-5-20250929"

    @property
    def documents_path(self) -> Path:
        return Path(self.docqa_documents_path)

    @property
    def index_path(self) -> Path:
        return Path(self.docqa_index_path)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Provider name -> environment variable holding its API key
PROVIDER_API_KEYS = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "google": "GOOGLE_API_KEY",
}


class MissingCredentialsError(Exception):
    """Raised when a provider about to be created has no API key configured."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"{', '.join(missing)} not set")


def missing_credentials(settings: Settings, embedding: bool = True, llm: bool = True) -> list[str]:
    """Return the names of API keys the configured providers need but lack.

    Local sentence-transformers embeddings need no key.
    """
    providers = []
    if embedding:
        providers.append(settings.docqa_embedding_provider.lower())
    if llm:
        providers.append(settings.docqa_llm_provider.lower())

    missing = []
    for provider in providers:
        env_name = PROVIDER_API_KEYS.get(provider)
        if env_name and not getattr(settings, env_name.lower()) and env_name not in missing:
            missing.append(env_name)
    return missing


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
