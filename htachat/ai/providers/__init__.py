"""Generation Service providers."""

from htachat.ai.providers.base import (
    DEFAULT_GENERATION_CONFIG,
    BaseLLMProvider,
    ErrorCategory,
    GenerationConfig,
    ProviderError,
    ProviderInvalidArgumentError,
    ProviderQuotaError,
    ProviderTimeoutError,
    ProviderTurn,
)
from htachat.ai.providers.factory import create_provider

__all__ = [
    "BaseLLMProvider",
    "ErrorCategory",
    "GenerationConfig",
    "DEFAULT_GENERATION_CONFIG",
    "ProviderError",
    "ProviderInvalidArgumentError",
    "ProviderQuotaError",
    "ProviderTimeoutError",
    "ProviderTurn",
    "create_provider",
]
