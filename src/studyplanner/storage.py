"""Local persistence for sessions, stats and tasks."""

import json
import logging
from pathlib import Path
from typing import Any, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

SESSIONS_KEY = "sessions"
USER_STATS_KEY = "userStats"
TASKS_KEY = "tasks"
ACTIVITIES_KEY = "activities"
RESOURCES_KEY = "resources"


class Store(Protocol):
    """Key/value persistence used by the statistics engine and task store."""

    def load(self, key: str, default: T) -> T | Any: ...

    def save(self, key: str, value: Any) -> bool | None:
        """Persist a value. Returning False signals the write did not happen."""
        ...


class LocalStore:
    """Stores each key as a JSON file in a local directory.

    Read and write failures are logged and never propagate: a missing or
    corrupted file loads as the caller's default.
    """

    def __init__(self, data_dir: Path):
        self._data_dir = data_dir
        self._data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def _path(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def load(self, key: str, default: T) -> T | Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except Exception:
            logger.exception("Failed to load %s from store", key)
            return default

    def save(self, key: str, value: Any) -> bool:
        try:
            data = json.dumps(value, indent=2)
            self._path(key).write_text(data, encoding="utf-8")
            logger.debug("Saved %s to store", key)
            return True
        except Exception:
            logger.exception("Failed to save %s to store", key)
            return False


class MemoryStore:
    """In-process store with the same contract as LocalStore."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def load(self, key: str, default: T) -> T | Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def save(self, key: str, value: Any) -> bool:
        try:
            self._data[key] = json.dumps(value)
            return True
        except (TypeError, ValueError):
            logger.exception("Failed to save %s to store", key)
            return False


def safe_load(store: Store, key: str, default: T) -> T | Any:
    """Load through any store, degrading to the default if the store raises."""
    try:
        return store.load(key, default)
    except Exception:
        logger.exception("Store failed to load %s, using default", key)
        return default


def safe_save(store: Store, key: str, value: Any) -> bool:
    """Save through any store. Returns False if the write did not persist."""
    try:
        return store.save(key, value) is not False
    except Exception:
        logger.exception("Store failed to save %s", key)
        return False
