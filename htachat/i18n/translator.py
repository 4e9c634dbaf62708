"""Translation function with locale fallback."""

from typing import Any

import structlog

from htachat.i18n.loader import FALLBACK_LOCALE, format_value, get_locale

logger = structlog.get_logger(__name__)


def _(message_id: str, locale: str | None = None, **variables: Any) -> str:
    """Translate a message with optional variable interpolation.

    Examples:
        >>> _("chat-error-invalid-argument", locale="en")
        'Error: Invalid request. Check your input.'

        >>> _("chat-error-unclassified", locale="vi", detail="boom")
        'Lỗi: boom'

    Fallback behavior:
        1. Try requested locale
        2. Try the fallback locale (vi)
        3. Return message_id
    """
    current_locale = locale or get_locale()

    result = format_value(current_locale, message_id, variables)
    if result is None and current_locale != FALLBACK_LOCALE:
        result = format_value(FALLBACK_LOCALE, message_id, variables)

    if result is not None:
        return result

    logger.warning("translation_not_found", message_id=message_id, locale=current_locale)
    return message_id
