"""Data models for the terminal todo list.

Exposes the Task dataclass plus the small enums and the read-only view the
engine hands to the renderer. Filter is transient UI state and is never
persisted; a fresh session always starts on Filter.ALL.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

@dataclass
class Task:
    """A single todo entry.

    Fields:
        id: Integer id, unique within the in-memory list.
        text: Trimmed, non-empty text (validated once, at creation).
        completed: Completion flag, flipped by toggle.
    """
    id: int
    text: str
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'text': self.text, 'completed': self.completed}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Task":
        """Build a Task from a stored entry (text re-trimmed); ValueError on any shape mismatch."""
        if not isinstance(raw, Mapping):
            raise ValueError(f'task entry must be an object, got {type(raw).__name__}')
        tid = raw.get('id')
        text = raw.get('text')
        completed = raw.get('completed')
        # bool is an int subclass
        if not isinstance(tid, int) or isinstance(tid, bool):
            raise ValueError(f'invalid task id: {tid!r}')
        if not isinstance(text, str) or not text.strip():
            raise ValueError(f'invalid task text for id {tid}')
        if not isinstance(completed, bool):
            raise ValueError(f'invalid completed flag for id {tid}')
        return cls(id=tid, text=text.strip(), completed=completed)

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, text={self.text}, completed={self.completed})"


class Filter(Enum):
    ALL = 'all'
    ACTIVE = 'active'
    COMPLETED = 'completed'

    def matches(self, task: Task) -> bool:
        if self is Filter.ACTIVE:
            return not task.completed
        if self is Filter.COMPLETED:
            return task.completed
        return True

    @classmethod
    def parse(cls, value: str) -> Optional["Filter"]:
        return FILTER_ALIASES.get(value.strip().lower())


FILTER_ALIASES: Dict[str, Filter] = {
    'a': Filter.ALL,
    'all': Filter.ALL,
    'ac': Filter.ACTIVE,
    'active': Filter.ACTIVE,
    'c': Filter.COMPLETED,
    'completed': Filter.COMPLETED,
    'done': Filter.COMPLETED,
}


class InsertPosition(Enum):
    """Where add() places a new task."""
    APPEND = 'append'
    PREPEND = 'prepend'


@dataclass(frozen=True)
class ListView:
    """Derived, read-only projection of the task list.

    remaining and has_completed are computed over the whole list, not just
    the filtered subsequence.
    """
    tasks: Tuple[Task, ...]
    remaining: int
    has_completed: bool
    filter: Filter = Filter.ALL
