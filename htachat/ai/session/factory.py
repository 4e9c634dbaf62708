"""Factory for creating session stores.

Selects the storage backend from an explicit argument, the
``HTACHAT_SESSION_STORE`` environment variable, or the settings, and returns a
fresh ``SessionStore`` over it. No store instance is cached at module level.

Example:
    store = get_session_store()                     # settings.session_store
    store = get_session_store(store_type="memory")  # tests, throwaway runs
    store = get_session_store(store_type="file", data_dir=tmp_path)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from htachat.ai.session.file_store import FileStorageBackend
from htachat.ai.session.memory_store import InMemoryStorageBackend
from htachat.ai.session.store import SessionStore, StorageBackend
from htachat.utils.config import get_settings
from htachat.utils.logging import get_logger

logger = get_logger(__name__)

StoreType = Literal["file", "memory", "auto"]


def get_session_store(
    store_type: StoreType = "auto",
    data_dir: Path | None = None,
) -> SessionStore:
    """Get a session store for the requested backend.

    Resolution order:
    1. HTACHAT_SESSION_STORE environment variable (case-insensitive)
    2. store_type parameter
    3. Settings.session_store when store_type is "auto"

    Args:
        store_type: Backend type ("file", "memory", "auto")
        data_dir: Directory for file storage (defaults to Settings.data_dir)

    Returns:
        SessionStore over the selected backend
    """
    env_store_type = os.getenv("HTACHAT_SESSION_STORE", "").lower()
    if env_store_type in ("file", "memory"):
        store_type = env_store_type  # type: ignore[assignment]

    settings = get_settings()
    if store_type == "auto":
        store_type = settings.session_store

    backend: StorageBackend
    if store_type == "memory":
        backend = InMemoryStorageBackend()
        logger.info("session_store_created", type="memory")
    else:
        backend = FileStorageBackend(data_dir or settings.data_dir)
        logger.info("session_store_created", type="file", data_dir=str(backend.data_dir))

    return SessionStore(backend)


__all__ = ["get_session_store", "StoreType"]
