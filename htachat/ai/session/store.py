"""Session store: the whole session list persisted as one serialized blob.

The store reads the full, ordered session list once and rewrites it in full on
every mutation. Durability is delegated to a pluggable ``StorageBackend``
addressed by a single fixed key, so the same store runs over a JSON file in
the user's data directory or over a dict in tests.

Example:
    store = SessionStore(FileStorageBackend(data_dir))
    sessions = store.load()
    store.save([new_session, *sessions])
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from htachat.ai.session.models import ChatSession
from htachat.exceptions import StoreReadError, StoreWriteError
from htachat.utils.logging import get_logger

logger = get_logger(__name__)

STORAGE_KEY = "chat_sessions"

_sessions_adapter = TypeAdapter(list[ChatSession])


class StorageBackend(ABC):
    """Key-value medium holding serialized text values.

    Implementations must make ``write`` a whole-value replace: a concurrent
    ``read`` sees either the old value or the new one, never a mix.
    """

    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent.

        Raises:
            StoreReadError: If the medium cannot be read
        """

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Replace the stored value.

        Raises:
            StoreWriteError: If the value could not be written
        """

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the key. Missing keys are ignored."""


def encode_sessions(sessions: list[ChatSession]) -> str:
    """Serialize an ordered session list to a JSON document."""
    return _sessions_adapter.dump_json(sessions, indent=2).decode("utf-8")


def decode_sessions(raw: str) -> list[ChatSession]:
    """Parse a JSON document into an ordered session list.

    Raises:
        StoreReadError: If the document is not valid JSON, does not match the
            session schema, or holds a session without id or messages
    """
    try:
        sessions = _sessions_adapter.validate_json(raw)
    except (PydanticValidationError, json.JSONDecodeError, ValueError) as e:
        raise StoreReadError("Persisted sessions are malformed", original_error=e) from e

    for index, session in enumerate(sessions):
        if not session.id or not session.messages:
            raise StoreReadError(
                "Persisted session is missing its id or messages",
                context={"index": index},
            )

    seen: set[str] = set()
    unique: list[ChatSession] = []
    for session in sessions:
        if session.id in seen:
            logger.warning("duplicate_session_dropped", session_id=session.id)
            continue
        seen.add(session.id)  # type: ignore[arg-type]
        unique.append(session)
    return unique


class SessionStore:
    """Durable, ordered collection of chat sessions.

    Attributes:
        backend: Storage medium for the serialized collection
        key: Fixed key the collection lives under
    """

    def __init__(self, backend: StorageBackend, key: str = STORAGE_KEY) -> None:
        self.backend = backend
        self.key = key

    def load(self) -> list[ChatSession]:
        """Load the persisted sessions, most recently saved first.

        An absent, unreadable or malformed blob yields an empty list.
        """
        try:
            raw = self.backend.read(self.key)
            if raw is None or not raw.strip():
                logger.debug("session_store_empty", key=self.key)
                return []
            sessions = decode_sessions(raw)
        except StoreReadError as e:
            logger.warning(
                "session_store_read_failed",
                key=self.key,
                error=str(e),
                error_type=type(e.original_error or e).__name__,
            )
            return []

        logger.debug("session_store_loaded", key=self.key, count=len(sessions))
        return sessions

    def save(self, sessions: list[ChatSession]) -> None:
        """Serialize and overwrite the whole collection.

        Raises:
            StoreWriteError: If the backend could not persist the blob
        """
        blob = encode_sessions(sessions)
        try:
            self.backend.write(self.key, blob)
        except StoreWriteError:
            logger.error("session_store_write_failed", key=self.key, count=len(sessions))
            raise

        logger.debug("session_store_saved", key=self.key, count=len(sessions), size=len(blob))


__all__ = [
    "STORAGE_KEY",
    "StorageBackend",
    "SessionStore",
    "encode_sessions",
    "decode_sessions",
]
