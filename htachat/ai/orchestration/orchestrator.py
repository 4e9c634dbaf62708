"""Conversation orchestrator.

Turns a session's message history plus one new user message into a
Generation Service request, and the outcome into the next assistant message.
Failures never escape ``submit``: every path ends in a ``Message``, so the
conversation log records what happened, errors included.
"""

from __future__ import annotations

import asyncio
import uuid

from htachat.ai.domain.message import Message
from htachat.ai.orchestration.errors import describe_failure
from htachat.ai.providers.base import (
    DEFAULT_GENERATION_CONFIG,
    BaseLLMProvider,
    GenerationConfig,
    ProviderError,
    ProviderTimeoutError,
)
from htachat.ai.providers.factory import create_provider
from htachat.exceptions import ConfigurationError, SessionBusyError
from htachat.utils.config import Settings, get_settings
from htachat.utils.logging import get_logger

logger = get_logger(__name__)


class ConversationOrchestrator:
    """
    Builds provider requests from session history and interprets replies.

    At most one ``submit`` may be in flight per session. An unsaved
    conversation (``session_id=None``) shares one key per orchestrator.

    Attributes:
        provider: Generation Service client, or None when no credential exists
        config: Sampling policy for every request
        timeout: Seconds to wait for a reply
    """

    def __init__(
        self,
        provider: BaseLLMProvider | None,
        *,
        config: GenerationConfig = DEFAULT_GENERATION_CONFIG,
        timeout: float = 60.0,
    ) -> None:
        self.provider = provider
        self.config = config
        self.timeout = timeout
        self._in_flight: set[str] = set()
        self._new_session_key = f"unsaved-{uuid.uuid4()}"

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ConversationOrchestrator:
        """Build an orchestrator with the configured provider.

        A missing credential is not an error here: the orchestrator is built
        without a provider and answers every submission with the
        configuration-error message.
        """
        settings = settings or get_settings()
        try:
            provider: BaseLLMProvider | None = create_provider(settings=settings)
        except ConfigurationError as e:
            logger.warning("orchestrator_without_provider", error=str(e))
            provider = None
        return cls(provider, timeout=settings.request_timeout)

    def _key(self, session_id: str | None) -> str:
        return session_id or self._new_session_key

    def is_busy(self, session_id: str | None) -> bool:
        """Whether a submission is outstanding for this session."""
        return self._key(session_id) in self._in_flight

    async def submit(
        self,
        history: list[Message],
        new_user_text: str,
        session_id: str | None = None,
    ) -> Message | None:
        """
        Generate the assistant reply to a new user message.

        Args:
            history: Earlier messages of the session, excluding the new one
            new_user_text: Text of the new user turn
            session_id: Session the turn belongs to (None if unsaved)

        Returns:
            Assistant message with the reply or a localized error text;
            None when new_user_text is blank (nothing is sent)

        Raises:
            SessionBusyError: If a submission for this session is still pending
        """
        if not new_user_text or not new_user_text.strip():
            logger.warning("blank_submission_ignored", session_id=session_id)
            return None

        key = self._key(session_id)
        if key in self._in_flight:
            logger.warning("submission_rejected_busy", session_id=session_id)
            raise SessionBusyError(key)

        self._in_flight.add(key)
        try:
            return await self._generate_reply(history, new_user_text, session_id)
        finally:
            self._in_flight.discard(key)

    async def _generate_reply(
        self,
        history: list[Message],
        new_user_text: str,
        session_id: str | None,
    ) -> Message:
        if self.provider is None:
            logger.warning("generation_skipped_no_credential", session_id=session_id)
            return Message.assistant(
                describe_failure(ConfigurationError("Generation Service is not configured"))
            )

        turns = self.provider.build_history(history)
        logger.info(
            "generation_started",
            session_id=session_id,
            provider=self.provider.provider_name,
            history_turns=len(turns),
        )

        try:
            reply = await asyncio.wait_for(
                self.provider.generate(turns, new_user_text, self.config),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            error: ProviderError = ProviderTimeoutError(
                f"No reply within {self.timeout}s",
                provider=self.provider.provider_name,
                original_error=e,
            )
        except ProviderError as e:
            error = e
        except Exception as e:
            error = ProviderError(
                str(e),
                provider=self.provider.provider_name,
                original_error=e,
            )
        else:
            logger.info("generation_completed", session_id=session_id, reply_length=len(reply))
            return Message.assistant(reply)

        logger.error(
            "generation_failed",
            session_id=session_id,
            category=error.category.value,
            error=str(error),
            error_type=type(error).__name__,
        )
        return Message.assistant(describe_failure(error))


__all__ = ["ConversationOrchestrator"]
