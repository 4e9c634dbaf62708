"""OpenAI provider implementation."""

from __future__ import annotations

from typing import Any

import openai
from openai import AsyncOpenAI

from htachat.ai.providers.base import (
    DEFAULT_GENERATION_CONFIG,
    BaseLLMProvider,
    GenerationConfig,
    ProviderError,
    ProviderInvalidArgumentError,
    ProviderQuotaError,
    ProviderTimeoutError,
    ProviderTurn,
)
from htachat.utils.logging import LogPerformance, get_logger

logger = get_logger(__name__)


class OpenAIProvider(BaseLLMProvider):
    """
    OpenAI provider using Chat Completions.

    The history is replayed as user/assistant chat messages followed by the
    new user message.
    """

    provider_name = "openai"
    assistant_role = "assistant"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 60.0,
        base_url: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Model name
            timeout: Request timeout in seconds
            base_url: Custom API base URL
            client: Preconfigured SDK client (tests)
        """
        super().__init__(model=model, timeout=timeout)
        self.base_url = base_url
        self.client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, base_url=base_url)

    def _build_chat_payload(
        self, history: list[ProviderTurn], user_text: str
    ) -> list[dict[str, Any]]:
        payload: list[dict[str, Any]] = [
            {"role": turn.role, "content": turn.text} for turn in history
        ]
        payload.append({"role": "user", "content": user_text})
        return payload

    async def generate(
        self,
        history: list[ProviderTurn],
        user_text: str,
        config: GenerationConfig = DEFAULT_GENERATION_CONFIG,
    ) -> str:
        """Generate a reply with the Chat Completions API."""
        try:
            with LogPerformance("openai_generate", logger, model=self.model, turns=len(history)):
                response = await self.client.chat.completions.create(
                    model=self.model,
                    messages=self._build_chat_payload(history, user_text),  # type: ignore[arg-type]
                    max_tokens=config.max_output_tokens,
                    temperature=config.temperature,
                    top_p=config.top_p,
                )

        except openai.RateLimitError as e:
            logger.error("openai_rate_limited", code=e.code, status=e.status_code)
            raise ProviderQuotaError(
                e.message, provider=self.provider_name, code=e.code or e.status_code, original_error=e
            ) from e

        except openai.BadRequestError as e:
            logger.error("openai_bad_request", code=e.code, status=e.status_code)
            raise ProviderInvalidArgumentError(
                e.message, provider=self.provider_name, code=e.code or e.status_code, original_error=e
            ) from e

        except openai.APITimeoutError as e:
            logger.error("openai_timeout", timeout=self.timeout)
            raise ProviderTimeoutError(
                f"OpenAI request timeout after {self.timeout}s",
                provider=self.provider_name,
                original_error=e,
            ) from e

        except openai.APIError as e:
            logger.error("openai_api_error", error=e.message, error_type=type(e).__name__)
            raise ProviderError(
                e.message, provider=self.provider_name, code=e.code, original_error=e
            ) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.warning("openai_empty_response", model=self.model)
            raise ProviderError("OpenAI returned an empty response", provider=self.provider_name)

        return content


__all__ = ["OpenAIProvider"]
