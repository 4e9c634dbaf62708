"""Fluent translation loader and bundle cache.

Loads the Fluent Translation List (.ftl) files shipped under ``locales/`` and
keeps one FluentBundle per locale.
"""

import os
import threading
from pathlib import Path
from typing import Any

import structlog
from fluent.runtime import FluentBundle, FluentResource

from htachat.utils.config import get_settings

logger = structlog.get_logger(__name__)

SUPPORTED_LOCALES = ["vi", "en"]
DEFAULT_LOCALE = "vi"
FALLBACK_LOCALE = "vi"

# Thread-local storage for per-session locale
_thread_local = threading.local()

_bundle_cache: dict[str, FluentBundle] = {}


def get_locales_dir() -> Path:
    """Get the locales directory path."""
    return Path(__file__).parent / "locales"


def _load_bundle(locale: str) -> FluentBundle:
    """Load the Fluent bundle for a locale.

    Raises:
        FileNotFoundError: If the locale directory doesn't exist
    """
    if locale not in SUPPORTED_LOCALES:
        logger.warning("unsupported_locale", locale=locale, fallback=FALLBACK_LOCALE)
        locale = FALLBACK_LOCALE

    locale_dir = get_locales_dir() / locale
    if not locale_dir.exists():
        raise FileNotFoundError(f"Locale directory not found: {locale_dir}")

    # Provider text is interpolated verbatim, without bidi isolation marks
    bundle = FluentBundle([locale], use_isolating=False)

    ftl_files = sorted(locale_dir.glob("*.ftl"))
    if not ftl_files:
        logger.warning("no_ftl_files", locale_dir=str(locale_dir))
        return bundle

    for ftl_file in ftl_files:
        bundle.add_resource(FluentResource(ftl_file.read_text(encoding="utf-8")))
        logger.debug("ftl_loaded", file=ftl_file.name, locale=locale)

    return bundle


def get_bundle(locale: str) -> FluentBundle:
    """Get cached Fluent bundle for a locale."""
    if locale not in _bundle_cache:
        _bundle_cache[locale] = _load_bundle(locale)
    return _bundle_cache[locale]


def get_locale() -> str:
    """Get current locale.

    Priority:
    1. Thread-local override (set_locale)
    2. HTACHAT_LOCALE environment variable
    3. Settings.locale
    4. Default locale (vi)
    """
    if getattr(_thread_local, "locale", None):
        return _thread_local.locale

    env_locale = os.getenv("HTACHAT_LOCALE")
    if env_locale and env_locale in SUPPORTED_LOCALES:
        return env_locale

    settings_locale = get_settings().locale
    if settings_locale in SUPPORTED_LOCALES:
        return settings_locale

    return DEFAULT_LOCALE


def set_locale(locale: str) -> None:
    """Set locale for the current thread.

    Raises:
        ValueError: If locale is not supported
    """
    if locale not in SUPPORTED_LOCALES:
        raise ValueError(f"Unsupported locale: {locale}. Supported: {', '.join(SUPPORTED_LOCALES)}")

    _thread_local.locale = locale
    logger.debug("locale_set", locale=locale)


def reset_locale() -> None:
    """Drop the thread-local override so environment and settings apply again."""
    _thread_local.locale = None


def reload_translations() -> None:
    """Reload all translation bundles from disk."""
    _bundle_cache.clear()
    logger.info("translations_reloaded")


def format_value(
    locale: str, message_id: str, variables: dict[str, Any] | None = None
) -> str | None:
    """Format a message, returning None if the id is unknown in that locale."""
    bundle = get_bundle(locale)

    if not bundle.has_message(message_id):
        return None

    message = bundle.get_message(message_id)
    if message.value is None:
        return None

    formatted, errors = bundle.format_pattern(message.value, variables or {})
    if errors:
        logger.warning("ftl_format_errors", message_id=message_id, errors=[str(e) for e in errors])
    return formatted
