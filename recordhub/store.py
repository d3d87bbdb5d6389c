"""
Key-value persistence for users, password hashes, records and the session
token.

Each well-known key holds one JSON-serializable value. The JSON-file
backend keeps one document per key inside a data directory and writes it
atomically (temp file + move); the memory backend keeps values in a dict.
Managers do read-modify-write of whole collections inside store.lock(key).
"""

from __future__ import annotations

import copy
import json
import shutil
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Optional

from .locks import acquire_lock, lock_key_store
from .utils.exceptions import StorageError
from .utils.logger import get_logger

logger = get_logger(__name__)

USERS_KEY = "saas_users"
PASSWORDS_KEY = "saas_passwords"
RECORDS_KEY = "saas_data_records"
TOKEN_KEY = "auth_token"


class KeyValueStore(ABC):
    """Minimal key-value interface the managers depend on"""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None when the key is absent"""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Replace the value stored under key"""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key (no-op when absent)"""

    @abstractmethod
    def lock(self, key: str):
        """Context manager serializing read-modify-write on key"""


class MemoryStore(KeyValueStore):
    """Process-local store; values are deep-copied in and out"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    @contextmanager
    def lock(self, key: str) -> Generator[None, None, None]:
        with self._guard:
            key_lock = self._locks.setdefault(key, threading.Lock())
        with key_lock:
            yield


class JsonFileStore(KeyValueStore):
    """One JSON file per key under data_dir"""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)
        self.locks_dir = self.data_dir / "locks"

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StorageError(f"Failed to load {key} from {path}: {str(e)}")

    def set(self, key: str, value: Any) -> None:
        self._atomic_write(self._path(key), value)

    def remove(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()

    @contextmanager
    def lock(self, key: str) -> Generator[None, None, None]:
        with acquire_lock(self.locks_dir, lock_key_store(key)):
            yield

    def _atomic_write(self, path: Path, data: Any) -> None:
        """Write JSON file atomically"""
        path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w", dir=str(path.parent), delete=False, encoding="utf-8"
        ) as tf:
            json.dump(data, tf, indent=2, ensure_ascii=False, default=str)
            temp_path = Path(tf.name)

        try:
            shutil.move(str(temp_path), str(path))
        except Exception as e:
            if temp_path.exists():
                temp_path.unlink()
            logger.error("Store write failed", path=str(path), error=str(e))
            raise StorageError(f"Failed to save {path}: {str(e)}")
