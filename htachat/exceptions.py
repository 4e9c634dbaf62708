"""Exception hierarchy for htachat.

All errors raised by the package inherit from :class:`HTAChatError` and carry
structured context so they can be logged with structlog without string
formatting.

Usage:
    from htachat.exceptions import SessionNotFoundError

    try:
        session = manager.load_session(session_id)
    except SessionNotFoundError as e:
        logger.warning("session_missing", error=str(e), context=e.context)
"""

from __future__ import annotations

from typing import Any


class HTAChatError(Exception):
    """Base exception for all htachat errors.

    Attributes:
        message: Human-readable error message
        context: Additional context for debugging (dict)
        original_error: Original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        base = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        if self.original_error:
            base = f"{base} [caused by: {type(self.original_error).__name__}]"
        return base

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# =============================================================================
# Validation & Configuration Errors
# =============================================================================


class ValidationError(HTAChatError):
    """Raised when input to a session operation is invalid."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        context = dict(kwargs.get("context") or {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)[:100]
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class ConfigurationError(HTAChatError):
    """Raised when the Generation Service has no usable credential or settings."""

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = dict(kwargs.get("context") or {})
        if setting:
            context["setting"] = setting
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# =============================================================================
# Session & Storage Errors
# =============================================================================


class SessionError(HTAChatError):
    """Base class for session lifecycle errors."""


class SessionNotFoundError(SessionError):
    """Raised when a session id is not present in the store."""

    def __init__(self, session_id: str, **kwargs: Any) -> None:
        context = dict(kwargs.get("context") or {})
        context["session_id"] = session_id
        kwargs["context"] = context
        super().__init__(f"Session not found: {session_id}", **kwargs)
        self.session_id = session_id


class SessionBusyError(SessionError):
    """Raised when a submission is already in flight for the same session."""

    def __init__(self, session_key: str, **kwargs: Any) -> None:
        context = dict(kwargs.get("context") or {})
        context["session_key"] = session_key
        kwargs["context"] = context
        super().__init__("A reply is already pending for this session", **kwargs)
        self.session_key = session_key


class StorageError(HTAChatError):
    """Base class for persistent store errors."""


class StoreReadError(StorageError):
    """Raised when the persisted session blob cannot be decoded.

    Never reaches the UI: SessionStore.load recovers by returning no sessions.
    """


class StoreWriteError(StorageError):
    """Raised when the session blob cannot be written.

    Propagates to the caller; a lost write must never be silent.
    """


__all__ = [
    "HTAChatError",
    "ValidationError",
    "ConfigurationError",
    "SessionError",
    "SessionNotFoundError",
    "SessionBusyError",
    "StorageError",
    "StoreReadError",
    "StoreWriteError",
]
