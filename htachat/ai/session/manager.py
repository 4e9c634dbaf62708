"""Session lifecycle management.

``SessionManager`` is the only component that mutates the session store. It
keeps the loaded session list in memory (most recently persisted first),
tracks the current session pointer, and funnels every change through
``persist_turn`` or ``delete_session``, each of which rewrites the whole
collection.

Example:
    manager = SessionManager(get_session_store())
    manager.initialize()

    session_id = manager.persist_turn(None, [Message.user("Hello")])
    session_id = manager.persist_turn(
        session_id, [Message.user("Hello"), Message.assistant("Hi there")]
    )
"""

from __future__ import annotations

import json
import re
import uuid
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from htachat.ai.domain.message import Message, Role
from htachat.ai.session.models import ChatSession, make_preview, make_title, utcnow
from htachat.ai.session.store import SessionStore
from htachat.exceptions import SessionNotFoundError, ValidationError
from htachat.i18n import _
from htachat.utils.logging import get_logger

logger = get_logger(__name__)


def _new_session_id() -> str:
    return str(uuid.uuid4())


class SessionManager:
    """Create, load, delete and persist chat sessions.

    Attributes:
        store: Durable session collection

    The current session pointer is either None (a new, unsaved conversation)
    or the id of exactly one session in the store.
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = _new_session_id,
    ) -> None:
        self.store = store
        self._clock = clock
        self._id_factory = id_factory
        self._sessions: list[ChatSession] = []
        self._current_id: str | None = None
        self._initialized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> list[ChatSession]:
        """Load the persisted sessions. Call once at startup."""
        self._sessions = self.store.load()
        self._current_id = None
        self._initialized = True
        logger.info("session_manager_initialized", session_count=len(self._sessions))
        return self.sessions

    def _ensure_initialized(self) -> None:
        # Writing before the first load would overwrite the persisted history
        if not self._initialized:
            self.initialize()

    @property
    def sessions(self) -> list[ChatSession]:
        """Sessions ordered most recently persisted first."""
        self._ensure_initialized()
        return list(self._sessions)

    @property
    def current_id(self) -> str | None:
        return self._current_id

    def _index_of(self, session_id: str) -> int | None:
        for index, session in enumerate(self._sessions):
            if session.id == session_id:
                return index
        return None

    def get_session(self, session_id: str) -> ChatSession | None:
        """Stored session by id, or None. Does not change the current pointer."""
        self._ensure_initialized()
        index = self._index_of(session_id)
        if index is None:
            return None
        return self._sessions[index].model_copy(deep=True)

    def exists(self, session_id: str) -> bool:
        self._ensure_initialized()
        return self._index_of(session_id) is not None

    def resolve_id(self, id_or_prefix: str) -> str | None:
        """Full session id for an exact id or an unambiguous prefix."""
        self._ensure_initialized()
        if not id_or_prefix:
            return None
        if self._index_of(id_or_prefix) is not None:
            return id_or_prefix
        matches = [s.id for s in self._sessions if s.id and s.id.startswith(id_or_prefix)]
        return matches[0] if len(matches) == 1 else None

    # ------------------------------------------------------------------
    # Operations used by the UI shell
    # ------------------------------------------------------------------

    def start_new_session(self) -> ChatSession:
        """Begin a new, unsaved conversation. The store is not touched."""
        self._current_id = None
        logger.debug("new_session_started")
        return ChatSession()

    def load_session(self, session_id: str) -> ChatSession:
        """Load a stored session and make it current.

        Raises:
            SessionNotFoundError: If no session has this id
        """
        session = self.get_session(session_id)
        if session is None:
            logger.warning("session_not_found", session_id=session_id)
            raise SessionNotFoundError(session_id)

        self._current_id = session_id
        logger.info("session_loaded", session_id=session_id, message_count=session.message_count)
        return session

    def delete_session(self, session_id: str) -> bool:
        """Remove a session permanently.

        Deleting an unknown id is a no-op. When the deleted session was the
        current one, the pointer moves to a new, empty session.

        Returns:
            True if a session was removed, False if none matched
        """
        self._ensure_initialized()
        index = self._index_of(session_id)
        if index is None:
            logger.debug("session_delete_noop", session_id=session_id)
            return False

        remaining = self._sessions[:index] + self._sessions[index + 1 :]
        self.store.save(remaining)
        self._sessions = remaining

        if self._current_id == session_id:
            self._current_id = None

        logger.info("session_deleted", session_id=session_id, remaining=len(remaining))
        return True

    def persist_turn(self, current_id: str | None, messages: list[Message]) -> str:
        """Persist the full message list of a conversation.

        The title is computed only for a session that has none yet; preview
        and timestamp are recomputed on every call. The session moves to the
        front of the list.

        Args:
            current_id: Id of the session, or None for its first persistence
            messages: Complete ordered message list

        Returns:
            The session id (newly assigned when current_id is None)

        Raises:
            ValidationError: If messages is empty or current_id is blank
            StoreWriteError: If the collection could not be written
        """
        if not messages:
            raise ValidationError("A persisted session needs at least one message", field="messages")
        if current_id is not None and not current_id.strip():
            raise ValidationError("Session id must not be blank", field="current_id", value=current_id)

        self._ensure_initialized()
        messages = list(messages)

        existing_index = self._index_of(current_id) if current_id is not None else None
        if current_id is None:
            session_id = self._id_factory()
            title = make_title(messages)
        elif existing_index is None:
            logger.warning("persist_unknown_session", session_id=current_id)
            session_id = current_id
            title = make_title(messages)
        else:
            session_id = current_id
            title = self._sessions[existing_index].title

        session = ChatSession(
            id=session_id,
            title=title,
            preview=make_preview(messages),
            timestamp=self._clock(),
            messages=messages,
        )

        others = [s for s in self._sessions if s.id != session_id]
        updated = [session, *others]
        self.store.save(updated)
        self._sessions = updated
        self._current_id = session_id

        logger.info(
            "session_persisted",
            session_id=session_id,
            message_count=len(messages),
            created=existing_index is None,
        )
        return session_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_sessions(self, limit: int | None = None) -> list[ChatSession]:
        """Sessions most recently persisted first, optionally limited."""
        sessions = self.sessions
        return sessions[:limit] if limit is not None else sessions

    def search_sessions(self, query: str, limit: int = 20) -> list[ChatSession]:
        """Sessions whose title or messages contain ``query`` (case-insensitive)."""
        if not query.strip():
            return []
        return [s for s in self.sessions if s.matches(query)][:limit]

    def get_stats(self) -> dict[str, int]:
        """Counts of sessions and messages in the store."""
        sessions = self.sessions
        user_messages = sum(1 for s in sessions for m in s.messages if m.role == Role.USER)
        total_messages = sum(s.message_count for s in sessions)
        return {
            "sessions": len(sessions),
            "messages": total_messages,
            "user_messages": user_messages,
            "assistant_messages": total_messages - user_messages,
        }

    def export_session(
        self,
        session_id: str,
        format: str = "markdown",
        output_path: Path | None = None,
    ) -> str | None:
        """Write a session transcript to a file.

        Args:
            session_id: Session to export
            format: "markdown" or "json"
            output_path: Target file (defaults to the working directory)

        Returns:
            Path of the written file, or None for unknown id/format or I/O failure
        """
        session = self.get_session(session_id)
        if session is None:
            return None

        if format == "markdown":
            content = session.export_markdown(
                user_label=_("chat-role-user"),
                assistant_label=_("chat-role-assistant"),
            )
            extension = ".md"
        elif format == "json":
            content = json.dumps(session.export_json(), indent=2, ensure_ascii=False)
            extension = ".json"
        else:
            logger.warning("export_format_unsupported", format=format)
            return None

        if output_path is None:
            slug = re.sub(r"[^\w-]+", "_", session.title).strip("_") or "chat"
            output_path = Path.cwd() / f"{slug}_{session_id[:8]}{extension}"

        try:
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            logger.error("session_export_failed", session_id=session_id, error=str(e))
            return None

        logger.info("session_exported", session_id=session_id, path=str(output_path), format=format)
        return str(output_path)


__all__ = ["SessionManager"]
