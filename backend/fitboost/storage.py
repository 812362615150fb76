"""String-keyed local storage with JSON-encoded values.

Three interchangeable backends share the ``LocalStorage`` interface:

- ``JsonFileStorage`` keeps every key in one JSON object file, re-read on
  each call and written atomically via a temp-file swap.
- ``SqlStorage`` keeps a ``storage_items`` table in SQLite via SQLAlchemy.
- ``MemoryStorage`` is a plain dict, used by tests.

Callers always read the full value, mutate it, and write it back whole.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from sqlalchemy import delete, select

from fitboost import db_models
from fitboost.config import Settings
from fitboost.database import create_tables, make_engine, make_session_factory

logger = logging.getLogger(__name__)

SESSION_KEY = "fitboost_session_user"
PROFILE_PREFIX = "fitboost_data_"
HISTORY_PREFIX = "fitboost_history_"

JSON_STORAGE_FILENAME = "local_storage.json"


def profile_key(email: str) -> str:
    """Storage key for the profile record of *email*."""
    return f"{PROFILE_PREFIX}{email}"


def history_key(email: str, assistant_type: str) -> str:
    """Storage key for one chat-history partition."""
    return f"{HISTORY_PREFIX}{email}_{assistant_type}"


class LocalStorage(ABC):
    """Minimal key/value contract modelled on browser local storage."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored string, or ``None`` when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Create or replace *key*."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete *key*. Missing keys are ignored."""

    @abstractmethod
    def keys(self) -> list[str]:
        """Return every stored key."""


class MemoryStorage(LocalStorage):
    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStorage(LocalStorage):
    """All keys in a single JSON object file.

    The file is created on first write. A corrupted file is treated as
    empty (and logged) rather than crashing the app; the next write
    replaces it. Every read-modify-write holds the instance lock.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._lock = threading.RLock()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Storage file %s is corrupted, ignoring: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s does not hold an object, ignoring.", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _write(self, items: dict[str, str]) -> None:
        """Atomically replace the storage file with *items*."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(items, indent=2, ensure_ascii=False)
        # Write to a temp file in the same directory, then rename (atomic on POSIX).
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".json.tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
            os.replace(tmp_path, self.path)
        except Exception:
            os.unlink(tmp_path)
            raise

    def get_item(self, key: str) -> str | None:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._load()
            items[key] = value
            self._write(items)

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._load()
            if items.pop(key, None) is not None:
                self._write(items)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._load())


class SqlStorage(LocalStorage):
    """Key/value rows in the ``storage_items`` SQLite table."""

    def __init__(self, data_dir: Path) -> None:
        self._engine = make_engine(data_dir)
        create_tables(self._engine)
        self._sessions = make_session_factory(self._engine)

    def get_item(self, key: str) -> str | None:
        with self._sessions() as db:
            row = db.get(db_models.StorageItem, key)
            return row.value if row else None

    def set_item(self, key: str, value: str) -> None:
        with self._sessions() as db:
            row = db.get(db_models.StorageItem, key)
            if row is None:
                db.add(db_models.StorageItem(key=key, value=value))
            else:
                row.value = value
            db.commit()

    def remove_item(self, key: str) -> None:
        with self._sessions() as db:
            db.execute(delete(db_models.StorageItem).where(db_models.StorageItem.key == key))
            db.commit()

    def keys(self) -> list[str]:
        with self._sessions() as db:
            result = db.execute(select(db_models.StorageItem.key).order_by(db_models.StorageItem.key))
            return list(result.scalars())


def create_storage(settings: Settings) -> LocalStorage:
    """Instantiate the backend named by ``settings.storage_backend``.

    Raises:
        ValueError: If the backend name is not recognised.
    """
    if settings.storage_backend == "json":
        return JsonFileStorage(settings.data_dir / JSON_STORAGE_FILENAME)
    elif settings.storage_backend == "sqlite":
        return SqlStorage(settings.data_dir)
    else:
        raise ValueError(f"Unknown STORAGE_BACKEND: '{settings.storage_backend}'")
