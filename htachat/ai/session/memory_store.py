"""In-memory storage backend.

Holds serialized values in a dict for the lifetime of the process. Used by the
test suite and for throwaway sessions (``HTACHAT_SESSION_STORE=memory``).
"""

from __future__ import annotations

from htachat.ai.session.store import StorageBackend


class InMemoryStorageBackend(StorageBackend):
    """Dict-backed storage. Values are replaced whole on every write."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})
        self.write_count = 0

    def read(self, key: str) -> str | None:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value
        self.write_count += 1

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


__all__ = ["InMemoryStorageBackend"]
