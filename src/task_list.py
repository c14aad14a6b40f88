"""List engine: owns the ordered task list, id allocation, mutations and
the derived view handed to the renderer.

Every mutation runs to completion and then writes the whole list through the
TaskStore. Nothing here raises for user-level mistakes: empty text and stale
ids are no-ops, and persistence failures are absorbed by the store adapter.
"""
from __future__ import annotations
from dataclasses import replace
from typing import Iterable, Iterator, List, Optional, Tuple
from loguru import logger
from models import Task, Filter, ListView, InsertPosition
from storage import TaskStore


class IdGenerator:
    """Monotonic integer ids, seeded above the highest id already in use."""

    def __init__(self, start: int = 1):
        self._next_id: int = start

    @classmethod
    def after(cls, tasks: Iterable[Task]) -> "IdGenerator":
        highest = max((t.id for t in tasks), default=0)
        return cls(highest + 1)

    def __call__(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid


class TaskList:
    def __init__(
        self,
        tasks: Optional[Iterable[Task]] = None,
        store: Optional[TaskStore] = None,
        insert_position: InsertPosition = InsertPosition.APPEND,
        id_generator: Optional[IdGenerator] = None,
    ):
        self._tasks: List[Task] = []
        seen = set()
        for task in tasks or ():
            if task.id in seen:
                logger.warning("Dropping task with duplicate id {}", task.id)
                continue
            seen.add(task.id)
            self._tasks.append(replace(task))
        self._store = store
        self.insert_position = insert_position
        self.filter: Filter = Filter.ALL
        self._next_id = id_generator or IdGenerator.after(self._tasks)

    @classmethod
    def load(cls, store: TaskStore, insert_position: InsertPosition = InsertPosition.APPEND) -> "TaskList":
        """Build an engine from whatever the store holds (empty on any failure)."""
        return cls(store.load(), store=store, insert_position=insert_position)

    # -------------------- queries --------------------
    def snapshot(self) -> Tuple[Task, ...]:
        return tuple(replace(t) for t in self._tasks)

    def get(self, task_id: int) -> Optional[Task]:
        idx = self._index_of(task_id)
        return None if idx is None else replace(self._tasks[idx])

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.snapshot())

    def _index_of(self, task_id: int) -> Optional[int]:
        for idx, task in enumerate(self._tasks):
            if task.id == task_id:
                return idx
        return None

    def derived_view(self, filter: Optional[Filter] = None) -> ListView:
        active_filter = self.filter if filter is None else filter
        visible = tuple(replace(t) for t in self._tasks if active_filter.matches(t))
        remaining = sum(1 for t in self._tasks if not t.completed)
        return ListView(
            tasks=visible,
            remaining=remaining,
            has_completed=remaining < len(self._tasks),
            filter=active_filter,
        )

    # -------------------- task operations --------------------
    def add(self, text: str) -> Optional[Task]:
        trimmed = text.strip()
        if not trimmed:
            return None
        task = Task(id=self._next_id(), text=trimmed)
        if self.insert_position is InsertPosition.PREPEND:
            self._tasks.insert(0, task)
        else:
            self._tasks.append(task)
        logger.debug("Added task {}", task.id)
        self._persist()
        return replace(task)

    def toggle(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is not None:
            task = self._tasks[idx]
            task.completed = not task.completed
            logger.debug("Task {} completed={}", task_id, task.completed)
        self._persist()
        return idx is not None

    def remove(self, task_id: int) -> bool:
        idx = self._index_of(task_id)
        if idx is not None:
            del self._tasks[idx]
            logger.debug("Removed task {}", task_id)
        self._persist()
        return idx is not None

    def clear_completed(self) -> int:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if not t.completed]
        removed = before - len(self._tasks)
        logger.debug("Cleared {} completed task(s)", removed)
        self._persist()
        return removed

    def reorder(self, moved_id: int, before_id: int) -> bool:
        """Move moved_id so it sits immediately before before_id.

        The anchor index is looked up after the moved task is taken out, so
        the result is the same whether the task travels up or down.
        """
        if moved_id == before_id:
            return False
        src = self._index_of(moved_id)
        if src is None or self._index_of(before_id) is None:
            return False
        task = self._tasks.pop(src)
        dst = self._index_of(before_id)
        self._tasks.insert(dst, task)  # type: ignore[arg-type]
        logger.debug("Moved task {} before {}", moved_id, before_id)
        self._persist()
        return True

    def set_filter(self, filter: Filter) -> None:
        self.filter = filter

    def _persist(self) -> None:
        if self._store is not None:
            self._store.save(self._tasks)

    def __str__(self) -> str:
        view = self.derived_view(Filter.ALL)
        return f'{len(self._tasks)} tasks, {view.remaining} left'


class DragGesture:
    """Transient drag-and-drop state for one gesture.

    Tracks which task is being dragged and which row it currently hovers.
    drop() and cancel() always clear both; used as a context manager the
    state is also cleared when the block exits by any other path.
    """

    def __init__(self, task_list: TaskList):
        self.task_list = task_list
        self.dragging_id: Optional[int] = None
        self.over_id: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.dragging_id is not None

    def start(self, task_id: int) -> None:
        self.dragging_id = task_id
        self.over_id = None

    def enter(self, task_id: int) -> None:
        if self.active:
            self.over_id = task_id

    def drop(self, target_id: Optional[int] = None) -> bool:
        """Drop onto target_id (or the last hovered row); returns True if moved."""
        try:
            target = self.over_id if target_id is None else target_id
            if self.dragging_id is None or target is None:
                return False
            return self.task_list.reorder(self.dragging_id, target)
        finally:
            self.cancel()

    def cancel(self) -> None:
        self.dragging_id = None
        self.over_id = None

    def __enter__(self) -> "DragGesture":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()
