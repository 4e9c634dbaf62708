"""File-based storage backend.

Each key maps to one JSON file in the user's data directory
(``<data_dir>/<key>.json``). Writes go to a temporary file in the same
directory which then replaces the target with ``os.replace``, so a reader
never sees a partially written blob.

Example:
    backend = FileStorageBackend(Path("~/.local/share/htachat").expanduser())
    store = SessionStore(backend)
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path

from htachat.ai.session.store import StorageBackend
from htachat.exceptions import StoreReadError, StoreWriteError, ValidationError
from htachat.utils.logging import get_logger

logger = get_logger(__name__)

_VALID_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


class FileStorageBackend(StorageBackend):
    """JSON files with atomic replace.

    Attributes:
        data_dir: Directory holding one file per key

    Thread Safety:
        Readers are always safe. Concurrent writers from several processes
        are last-writer-wins and must be serialized by the caller.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("file_storage_initialized", data_dir=str(self.data_dir))

    def _get_path(self, key: str) -> Path:
        if not _VALID_KEY.match(key):
            raise ValidationError("Invalid storage key", field="key", value=key)
        return self.data_dir / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._get_path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StoreReadError(
                "Failed to read session file",
                context={"path": str(path)},
                original_error=e,
            ) from e

    def write(self, key: str, value: str) -> None:
        path = self._get_path(key)
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.data_dir,
                prefix=f".{key}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(value)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise StoreWriteError(
                "Failed to write session file",
                context={"path": str(path)},
                original_error=e,
            ) from e

        logger.debug("session_file_written", path=str(path), size=len(value))

    def delete(self, key: str) -> None:
        path = self._get_path(key)
        path.unlink(missing_ok=True)


__all__ = ["FileStorageBackend"]
