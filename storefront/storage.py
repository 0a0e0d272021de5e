"""
Storage Module - durable key/value slots

The storefront keeps its state in a handful of named string slots, the
same contract as the browser's localStorage:
- cart slot (serialized cart lines)
- last order slot
- analytics identity slots (user id, session id)

Backends:
- MemoryStorage: dict-backed, per process (tests, default)
- FileStorage: one JSON object file, rewritten atomically on every change
"""
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Optional, Protocol

from storefront import config
from storefront.logging import get_logger

logger = get_logger(__name__)


class KeyValueStorage(Protocol):
    """String key/value slot contract."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage backend."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileStorage:
    """
    JSON file storage backend.

    The whole file is a single JSON object of string values. Every write
    goes to a temporary file in the same directory which then replaces the
    target, so readers see either the old or the new content, never a
    partial write. An unreadable file is treated as empty.
    """

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_all(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            logger.warning(f"Storage file unreadable ({self.path.name}): {e}")
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Corrupted storage file {self.path.name}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Corrupted storage file {self.path.name}: not an object")
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write_all(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, ensure_ascii=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._read_all()
            if key in data:
                del data[key]
                self._write_all(data)


# Singleton instance
_storage: Optional[KeyValueStorage] = None


def get_storage() -> KeyValueStorage:
    """
    Get storage backend (singleton).

    Uses STOREFRONT_STORAGE_PATH when set, in-memory storage otherwise.
    """
    global _storage

    if _storage is None:
        if config.STORAGE_PATH:
            _storage = FileStorage(config.STORAGE_PATH)
        else:
            _storage = MemoryStorage()

    return _storage


def set_storage(storage: Optional[KeyValueStorage]) -> None:
    """Replace the storage singleton (None resets to configuration)."""
    global _storage
    _storage = storage
