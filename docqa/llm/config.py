"""LLM provider configuration using LangChain abstractions."""

from langchain_core.language_models.chat_models import BaseChatModel

from config.settings import Settings


def get_llm(settings: Settings) -> BaseChatModel:
    """Create and return the configured LLM instance.

    Uses LangChain's BaseChatModel abstraction for provider-agnostic access.
    Default: Anthropic Claude via langchain-anthropic.
    """
    provider = settings.docqa_llm_provider.lower()

    if provider == "anthropic":
        from langchain_anthropic import ChatAnthropic

        return ChatAnthropic(
            model=settings.docqa_llm_model,
            temperature=0,
            api_key=settings.anthropic_api_key,
        )
    elif provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        return ChatGoogleGenerativeAI(
            model=settings.docqa_llm_model,
            temperature=0,
            google_api_key=settings.google_api_key,
        )
    else:
        raise ValueError(
            f"Unsupported LLM provider: {provider}. "
            "Supported: 'anthropic', 'google'"
        )
