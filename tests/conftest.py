"""Shared fixtures for the todo list tests."""

from __future__ import annotations

from typing import Optional

import pytest

from storage import MemoryStore, TaskStore
from task_list import TaskList


class BrokenStore:
    """Key/value store whose backend always fails."""

    def __init__(self) -> None:
        self.writes = 0

    def get_item(self, key: str) -> Optional[str]:
        raise OSError("storage disabled")

    def set_item(self, key: str, value: str) -> None:
        self.writes += 1
        raise OSError("quota exceeded")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def task_store(memory_store: MemoryStore) -> TaskStore:
    return TaskStore(memory_store)


@pytest.fixture
def task_list(task_store: TaskStore) -> TaskList:
    return TaskList(store=task_store)


@pytest.fixture
def broken_store() -> BrokenStore:
    return BrokenStore()
