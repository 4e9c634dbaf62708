"""Factory for creating Generation Service providers."""

from typing import Literal

from htachat.ai.providers.base import BaseLLMProvider
from htachat.exceptions import ConfigurationError
from htachat.utils.config import Settings, get_settings
from htachat.utils.logging import get_logger

logger = get_logger(__name__)

ProviderType = Literal["gemini", "openai"]


def create_provider(
    provider_type: ProviderType | None = None,
    settings: Settings | None = None,
) -> BaseLLMProvider:
    """
    Create a provider from settings.

    Args:
        provider_type: Provider type (if None, uses settings.provider)
        settings: Settings (if None, uses global settings)

    Returns:
        BaseLLMProvider instance

    Raises:
        ConfigurationError: If the provider has no API key or is unknown

    Examples:
        provider = create_provider()
        provider = create_provider(provider_type="openai")
    """
    if settings is None:
        settings = get_settings()

    provider = provider_type or settings.provider
    api_key = settings.get_api_key_for_provider(provider)
    model = settings.get_model_for_provider(provider)

    if api_key is None:
        logger.warning("provider_api_key_missing", provider=provider)
        raise ConfigurationError(
            f"No API key configured for provider '{provider}'",
            setting="openai_api_key" if provider == "openai" else "google_api_key",
        )

    logger.info("creating_llm_provider", provider=provider, model=model)

    if provider == "gemini":
        from htachat.ai.providers.gemini import GeminiProvider

        return GeminiProvider(api_key=api_key, model=model, timeout=settings.request_timeout)

    if provider == "openai":
        from htachat.ai.providers.openai import OpenAIProvider

        return OpenAIProvider(api_key=api_key, model=model, timeout=settings.request_timeout)

    raise ConfigurationError(
        f"Unknown provider: {provider}. Supported: gemini, openai",
        setting="provider",
    )


__all__ = ["create_provider", "ProviderType"]
