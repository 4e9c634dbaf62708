"""Mapping from Generation Service failures to localized assistant text."""

from htachat.ai.providers.base import ErrorCategory, ProviderError, ProviderTimeoutError
from htachat.exceptions import ConfigurationError, HTAChatError
from htachat.i18n import _


def describe_failure(error: HTAChatError, locale: str | None = None) -> str:
    """User-facing text for a failed generation.

    Each category yields a fixed message; unclassified errors show the
    provider's own message, or a generic fallback when it has none.
    """
    if isinstance(error, ConfigurationError):
        return _("chat-error-config", locale=locale)

    if isinstance(error, ProviderTimeoutError):
        return _("chat-error-timeout", locale=locale)

    category = error.category if isinstance(error, ProviderError) else ErrorCategory.UNCLASSIFIED

    if category == ErrorCategory.QUOTA_EXCEEDED:
        return _("chat-error-quota", locale=locale)

    if category == ErrorCategory.INVALID_ARGUMENT:
        return _("chat-error-invalid-argument", locale=locale)

    detail = error.message.strip()
    if not detail:
        return _("chat-error-fallback", locale=locale)
    return _("chat-error-unclassified", locale=locale, detail=detail)
