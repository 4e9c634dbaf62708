"""Base contract for Generation Service providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from htachat.ai.domain.message import Message, Role
from htachat.exceptions import HTAChatError


class ErrorCategory(str, Enum):
    """Machine-readable failure category reported by a provider."""

    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_ARGUMENT = "invalid_argument"
    UNCLASSIFIED = "unclassified"


class ProviderError(HTAChatError):
    """Generation Service failure that fits no more specific category."""

    category = ErrorCategory.UNCLASSIFIED

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        code: int | str | None = None,
        **kwargs: Any,
    ) -> None:
        context = dict(kwargs.get("context") or {})
        if provider:
            context["provider"] = provider
        if code is not None:
            context["code"] = code
        kwargs["context"] = context
        super().__init__(message, **kwargs)
        self.provider = provider
        self.code = code


class ProviderQuotaError(ProviderError):
    """Provider reports usage-limit exhaustion."""

    category = ErrorCategory.QUOTA_EXCEEDED


class ProviderInvalidArgumentError(ProviderError):
    """Provider rejected the request shape or content."""

    category = ErrorCategory.INVALID_ARGUMENT


class ProviderTimeoutError(ProviderError):
    """No reply within the configured wait."""


@dataclass(frozen=True)
class GenerationConfig:
    """Sampling policy sent with every request. Not user-configurable."""

    max_output_tokens: int = 500
    temperature: float = 0.7
    top_p: float = 0.8


DEFAULT_GENERATION_CONFIG = GenerationConfig()


@dataclass(frozen=True)
class ProviderTurn:
    """One history turn in the provider's own role vocabulary."""

    role: str
    text: str


class BaseLLMProvider(ABC):
    """
    Generation Service client.

    Subclasses declare the role name their API uses for model output and
    implement ``generate``, raising ``ProviderError`` subclasses on failure.
    """

    provider_name: str = "base"
    assistant_role: str = "assistant"

    def __init__(self, model: str, timeout: float = 60.0) -> None:
        self.model = model
        self.timeout = timeout

    def map_role(self, role: Role) -> str:
        """Provider role name for a message role."""
        return "user" if role == Role.USER else self.assistant_role

    def build_history(self, messages: list[Message]) -> list[ProviderTurn]:
        """Map messages to provider turns, preserving order."""
        return [ProviderTurn(role=self.map_role(msg.role), text=msg.content) for msg in messages]

    @abstractmethod
    async def generate(
        self,
        history: list[ProviderTurn],
        user_text: str,
        config: GenerationConfig = DEFAULT_GENERATION_CONFIG,
    ) -> str:
        """
        Generate a reply to ``user_text`` given the prior conversation.

        Args:
            history: Earlier turns, oldest first, already role-mapped
            user_text: The new user turn
            config: Sampling policy

        Returns:
            Generated text

        Raises:
            ProviderError: On any provider failure
        """

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"


__all__ = [
    "ErrorCategory",
    "ProviderError",
    "ProviderQuotaError",
    "ProviderInvalidArgumentError",
    "ProviderTimeoutError",
    "GenerationConfig",
    "DEFAULT_GENERATION_CONFIG",
    "ProviderTurn",
    "BaseLLMProvider",
]
