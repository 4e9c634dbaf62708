"""Chat session persistence for htachat.

Key Components:
- ChatSession: one conversation with title, preview and timestamp
- SessionStore: the whole session list persisted as one blob
- StorageBackend: pluggable medium (FileStorageBackend, InMemoryStorageBackend)
- SessionManager: lifecycle operations and the single mutation path
- get_session_store(): factory selecting the backend

Example:
    from htachat.ai.session import SessionManager, get_session_store

    manager = SessionManager(get_session_store())
    manager.initialize()
"""

from htachat.ai.session.factory import get_session_store
from htachat.ai.session.file_store import FileStorageBackend
from htachat.ai.session.manager import SessionManager
from htachat.ai.session.memory_store import InMemoryStorageBackend
from htachat.ai.session.models import PREVIEW_LENGTH, TITLE_LENGTH, ChatSession
from htachat.ai.session.store import STORAGE_KEY, SessionStore, StorageBackend

__all__ = [
    "ChatSession",
    "TITLE_LENGTH",
    "PREVIEW_LENGTH",
    "STORAGE_KEY",
    "StorageBackend",
    "SessionStore",
    "FileStorageBackend",
    "InMemoryStorageBackend",
    "SessionManager",
    "get_session_store",
]
