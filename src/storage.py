"""Persistence helpers for the todo list.

A KeyValueStore holds string values under string keys (the local stand-in
for browser local storage). TaskStore serializes the task list as a JSON
array under one fixed key. Persistence is best effort: load() degrades to
an empty list and save() never raises, the in-memory list stays the source
of truth.
"""
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol
from loguru import logger
from models import Task

STORAGE_KEY = 'awesome_todos_v1'


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class JsonFileStore:
    """String key/value pairs kept in a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f'{self.path} does not hold a JSON object')
        return data

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            data = self._read()
        except (ValueError, RecursionError) as e:
            logger.warning("Resetting unreadable store {}: {}", self.path, e)
            data = {}
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4)


class TaskStore:
    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def load(self) -> List[Task]:
        """Load the stored task list.

        Missing key, unreadable storage, malformed JSON, a wrong shape or a
        repeated id -> empty list. Never raises.
        """
        try:
            raw = self.store.get_item(self.key)
            if raw is None:
                return []
            return parse_tasks(json.loads(raw))
        except (OSError, ValueError, TypeError, RecursionError) as e:
            logger.warning("Discarding stored tasks under '{}': {}", self.key, e)
            return []

    def save(self, tasks: Iterable[Task]) -> bool:
        """Serialize and write the list; returns False if the write failed."""
        try:
            payload = json.dumps([t.to_dict() for t in tasks])
            self.store.set_item(self.key, payload)
        except (OSError, ValueError, TypeError, RecursionError) as e:
            logger.warning("Could not save tasks under '{}': {}", self.key, e)
            return False
        return True


def parse_tasks(data: Any) -> List[Task]:
    """Validate a decoded JSON payload as a task list (ValueError if not)."""
    if not isinstance(data, list):
        raise ValueError('stored task list is not an array')
    tasks = [Task.from_dict(entry) for entry in data]
    ids = [t.id for t in tasks]
    if len(set(ids)) != len(ids):
        raise ValueError('stored task list has duplicate ids')
    return tasks
