"""Google Gemini provider implementation."""

from __future__ import annotations

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from htachat.ai.providers.base import (
    DEFAULT_GENERATION_CONFIG,
    BaseLLMProvider,
    GenerationConfig,
    ProviderError,
    ProviderInvalidArgumentError,
    ProviderQuotaError,
    ProviderTurn,
)
from htachat.utils.logging import LogPerformance, get_logger

logger = get_logger(__name__)

# google.rpc status names carried by Gemini API errors
_QUOTA_STATUSES = {"RESOURCE_EXHAUSTED"}
_INVALID_STATUSES = {"INVALID_ARGUMENT"}


def classify_api_error(error: genai_errors.APIError, provider: str = "gemini") -> ProviderError:
    """Map a Gemini API error to the provider error taxonomy.

    Classification uses the structured HTTP code and status name only.
    """
    status = (error.status or "").upper()
    code = error.code
    detail = error.message or str(error)

    if code == 429 or status in _QUOTA_STATUSES:
        return ProviderQuotaError(detail, provider=provider, code=status or code, original_error=error)
    if status in _INVALID_STATUSES or (code == 400 and not status):
        return ProviderInvalidArgumentError(
            detail, provider=provider, code=status or code, original_error=error
        )
    return ProviderError(detail, provider=provider, code=status or code, original_error=error)


class GeminiProvider(BaseLLMProvider):
    """
    Gemini provider using the google-genai SDK.

    Each call opens a chat seeded with the mapped history and sends the new
    user turn, so the model sees the alternating user/model context.
    """

    provider_name = "gemini"
    assistant_role = "model"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        timeout: float = 60.0,
        client: genai.Client | None = None,
    ) -> None:
        """
        Initialize Gemini provider.

        Args:
            api_key: Google AI Studio API key
            model: Gemini model name
            timeout: HTTP timeout in seconds
            client: Preconfigured SDK client (tests)
        """
        super().__init__(model=model, timeout=timeout)
        self.client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout * 1000)),
        )

    def _build_contents(self, history: list[ProviderTurn]) -> list[types.Content]:
        return [
            types.Content(role=turn.role, parts=[types.Part(text=turn.text)]) for turn in history
        ]

    async def generate(
        self,
        history: list[ProviderTurn],
        user_text: str,
        config: GenerationConfig = DEFAULT_GENERATION_CONFIG,
    ) -> str:
        """Generate a reply with the Gemini chat API."""
        generate_config = types.GenerateContentConfig(
            max_output_tokens=config.max_output_tokens,
            temperature=config.temperature,
            top_p=config.top_p,
        )

        try:
            with LogPerformance("gemini_generate", logger, model=self.model, turns=len(history)):
                chat = self.client.aio.chats.create(
                    model=self.model,
                    history=self._build_contents(history),
                    config=generate_config,
                )
                response = await chat.send_message(user_text)

        except genai_errors.APIError as e:
            error = classify_api_error(e, provider=self.provider_name)
            logger.error(
                "gemini_api_error",
                code=e.code,
                status=e.status,
                category=error.category.value,
            )
            raise error from e

        except Exception as e:
            logger.error("gemini_unexpected_error", error=str(e), error_type=type(e).__name__)
            raise ProviderError(
                str(e) or type(e).__name__,
                provider=self.provider_name,
                original_error=e,
            ) from e

        text = response.text
        if not text:
            logger.warning("gemini_empty_response", model=self.model)
            raise ProviderError("Gemini returned an empty response", provider=self.provider_name)

        return text


__all__ = ["GeminiProvider", "classify_api_error"]
