from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

from .errors import StorageError

logger = logging.getLogger(__name__)

PROGRESS_KEY = "switchplus_progress"
ACTIVE_THEME_KEY = "switchplus_active_theme"


class KeyValueStore(Protocol):
    """String key-value persistence contract.

    Implementations should wrap their own failures in StorageError. Callers
    treat StorageError and a raw OSError from either method as a recoverable
    fault; any other exception is a bug in the store and propagates.
    """

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """In-process store, used for tests and for sessions without a save directory."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


def _atomic_write(file_path: Path, data: str) -> None:
    """Write data to a temp file next to the target, then replace the target."""
    file_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = file_path.with_name(file_path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as fh:
        fh.write(data)
        fh.flush()
        os.fsync(fh.fileno())
    os.replace(tmp_path, file_path)


class JsonFileStore:
    """Key-value store backed by a single JSON object on disk.

    Every set() rewrites the whole document. A missing file reads as empty.
    """

    FILENAME = "switchplus.json"

    def __init__(self, directory: str | Path) -> None:
        self.path = Path(directory) / self.FILENAME

    def _load_raw(self) -> Dict[str, str]:
        if not self.path.exists():
            logger.debug("Store file does not exist yet: %s", self.path)
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise StorageError(f"Failed to read store file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Store file {self.path} is malformed: not an object")
        return data

    def get(self, key: str) -> Optional[str]:
        value = self._load_raw().get(key)
        if value is None:
            return None
        return str(value)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._load_raw()
        except StorageError:
            logger.warning("Store file %s unreadable; rewriting it from scratch", self.path)
            data = {}
        data[key] = value
        try:
            _atomic_write(self.path, json.dumps(data, ensure_ascii=False, sort_keys=True, indent=2))
        except OSError as e:
            raise StorageError(f"Failed to write store file {self.path}: {e}") from e
        logger.debug("Saved key '%s' to %s", key, self.path)
