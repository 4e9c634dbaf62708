"""Internationalization (i18n) for htachat.

Uses Mozilla Fluent for the user-facing strings of the chat client, most
importantly the assistant messages that report Generation Service failures.

Supported languages: VI (Vietnamese - default), EN (English)

Usage:
    from htachat.i18n import _, get_locale, set_locale

    message = _("chat-error-quota")
    message = _("chat-error-unclassified", detail="503 UNAVAILABLE")
    set_locale("en")
"""

from htachat.i18n.loader import get_locale, reload_translations, reset_locale, set_locale
from htachat.i18n.translator import _

__all__ = [
    "_",
    "get_locale",
    "set_locale",
    "reset_locale",
    "reload_translations",
]
