"""Tests for the list engine."""

from __future__ import annotations

import json

import pytest

from models import Filter, InsertPosition, Task
from storage import STORAGE_KEY, MemoryStore, TaskStore
from task_list import DragGesture, IdGenerator, TaskList


def _texts(task_list: TaskList) -> list[str]:
    return [t.text for t in task_list.snapshot()]


def _stored(memory_store: MemoryStore) -> list[dict]:
    return json.loads(memory_store.items[STORAGE_KEY])


class TestAdd:
    @pytest.mark.parametrize("text", ["", " ", "   ", "\t", "\n  \t"])
    def test_whitespace_only_is_ignored(self, task_list, memory_store, text):
        assert task_list.add(text) is None
        assert len(task_list) == 0
        assert STORAGE_KEY not in memory_store.items

    @pytest.mark.parametrize("text", ["a", "buy milk", "  padded  "])
    def test_add_grows_list_by_one(self, task_list, text):
        task_list.add("existing")
        before = len(task_list)

        task = task_list.add(text)

        assert len(task_list) == before + 1
        assert task is not None
        assert task.completed is False
        assert task.text == text.strip()

    def test_add_persists(self, task_list, memory_store):
        task_list.add("buy milk")

        assert _stored(memory_store) == [
            {"id": task_list.snapshot()[0].id, "text": "buy milk", "completed": False}
        ]

    def test_rapid_adds_get_unique_ids(self, task_list):
        for i in range(500):
            task_list.add(f"task {i}")

        ids = [t.id for t in task_list.snapshot()]
        assert len(set(ids)) == 500

    def test_ids_continue_after_loaded_tasks(self):
        task_list = TaskList([Task(id=7, text="seven"), Task(id=3, text="three")])

        task = task_list.add("new")

        assert task.id == 8

    def test_append_is_default(self, task_list):
        task_list.add("first")
        task_list.add("second")

        assert _texts(task_list) == ["first", "second"]

    def test_prepend_policy(self, task_store):
        task_list = TaskList(store=task_store, insert_position=InsertPosition.PREPEND)
        task_list.add("first")
        task_list.add("second")

        assert _texts(task_list) == ["second", "first"]


class TestToggleRemove:
    def test_toggle_twice_restores_value(self, task_list):
        task = task_list.add("buy milk")

        task_list.toggle(task.id)
        assert task_list.get(task.id).completed is True
        task_list.toggle(task.id)
        assert task_list.get(task.id).completed is False

    def test_toggle_unknown_id_is_noop(self, task_list, memory_store):
        task_list.add("buy milk")
        before = task_list.snapshot()

        assert task_list.toggle(999) is False
        assert task_list.snapshot() == before
        assert len(_stored(memory_store)) == 1

    def test_remove_twice(self, task_list):
        keep = task_list.add("keep")
        gone = task_list.add("gone")

        assert task_list.remove(gone.id) is True
        assert len(task_list) == 1
        assert task_list.remove(gone.id) is False
        assert len(task_list) == 1
        assert task_list.get(keep.id) is not None

    def test_remove_persists(self, task_list, memory_store):
        task = task_list.add("gone")
        task_list.remove(task.id)

        assert _stored(memory_store) == []


class TestClearCompleted:
    def test_removes_only_completed(self, task_list):
        a = task_list.add("a")
        task_list.add("b")
        c = task_list.add("c")
        task_list.toggle(a.id)
        task_list.toggle(c.id)

        assert task_list.clear_completed() == 2
        assert _texts(task_list) == ["b"]

    def test_noop_still_writes(self, task_store, memory_store):
        task_list = TaskList([Task(id=1, text="a")], store=task_store)
        assert STORAGE_KEY not in memory_store.items

        assert task_list.clear_completed() == 0
        assert _stored(memory_store) == [{"id": 1, "text": "a", "completed": False}]


class TestReorder:
    @pytest.fixture
    def abcd(self, task_list):
        ids = {text: task_list.add(text).id for text in "abcd"}
        return task_list, ids

    def test_move_down_lands_before_target(self, abcd):
        task_list, ids = abcd

        assert task_list.reorder(ids["a"], ids["c"]) is True
        assert _texts(task_list) == ["b", "a", "c", "d"]

    def test_move_up_lands_before_target(self, abcd):
        task_list, ids = abcd

        assert task_list.reorder(ids["d"], ids["b"]) is True
        assert _texts(task_list) == ["a", "d", "b", "c"]

    def test_move_to_front(self, abcd):
        task_list, ids = abcd

        task_list.reorder(ids["c"], ids["a"])
        assert _texts(task_list) == ["c", "a", "b", "d"]

    @pytest.mark.parametrize("moved,target", [("a", "b"), ("b", "d"), ("d", "a"), ("c", "b")])
    def test_preserves_tasks_and_places_before_target(self, abcd, moved, target):
        task_list, ids = abcd
        task_list.toggle(ids["b"])
        before = {t.id: t for t in task_list.snapshot()}

        task_list.reorder(ids[moved], ids[target])

        after = task_list.snapshot()
        assert {t.id: t for t in after} == before
        order = [t.id for t in after]
        assert order.index(ids[moved]) + 1 == order.index(ids[target])

    def test_missing_ids_are_noop(self, abcd, memory_store):
        task_list, ids = abcd
        memory_store.items.clear()

        assert task_list.reorder(ids["a"], 999) is False
        assert task_list.reorder(999, ids["a"]) is False
        assert task_list.reorder(ids["a"], ids["a"]) is False
        assert _texts(task_list) == ["a", "b", "c", "d"]
        assert STORAGE_KEY not in memory_store.items

    def test_reorder_persists_new_order(self, abcd, memory_store):
        task_list, ids = abcd

        task_list.reorder(ids["d"], ids["a"])
        assert [e["text"] for e in _stored(memory_store)] == ["d", "a", "b", "c"]


class TestDerivedView:
    def test_active_and_completed_partition_the_list(self, task_list):
        for text in ["a", "b", "c", "d", "e"]:
            task_list.add(text)
        for task in task_list.snapshot()[::2]:
            task_list.toggle(task.id)

        active = {t.id for t in task_list.derived_view(Filter.ACTIVE).tasks}
        completed = {t.id for t in task_list.derived_view(Filter.COMPLETED).tasks}
        everything = {t.id for t in task_list.derived_view(Filter.ALL).tasks}

        assert active | completed == everything
        assert not active & completed

    def test_counts_are_over_whole_list(self, task_list):
        a = task_list.add("a")
        task_list.add("b")
        task_list.toggle(a.id)

        view = task_list.derived_view(Filter.COMPLETED)

        assert [t.text for t in view.tasks] == ["a"]
        assert view.remaining == 1
        assert view.has_completed is True

    def test_empty_list(self, task_list):
        view = task_list.derived_view()

        assert view.tasks == ()
        assert view.remaining == 0
        assert view.has_completed is False
        assert view.filter is Filter.ALL

    def test_uses_current_filter_by_default(self, task_list, memory_store):
        a = task_list.add("a")
        task_list.add("b")
        task_list.toggle(a.id)
        memory_store.items.clear()

        task_list.set_filter(Filter.ACTIVE)

        assert [t.text for t in task_list.derived_view().tasks] == ["b"]
        assert task_list.derived_view().filter is Filter.ACTIVE
        assert STORAGE_KEY not in memory_store.items

    def test_view_tasks_are_copies(self, task_list):
        task = task_list.add("a")

        task_list.derived_view().tasks[0].completed = True
        task_list.snapshot()[0].text = "changed"

        assert task_list.get(task.id) == Task(id=task.id, text="a", completed=False)


class TestScenario:
    def test_add_toggle_clear(self, task_list):
        task_list.add("buy milk")
        task_list.add("  ")
        task_list.add("walk dog")

        view = task_list.derived_view()
        assert [(t.text, t.completed) for t in view.tasks] == [
            ("buy milk", False),
            ("walk dog", False),
        ]
        assert view.remaining == 2

        milk = view.tasks[0]
        task_list.toggle(milk.id)
        assert task_list.derived_view().remaining == 1
        assert [(t.text, t.completed) for t in task_list.derived_view(Filter.COMPLETED).tasks] == [
            ("buy milk", True)
        ]

        task_list.clear_completed()
        assert [(t.text, t.completed) for t in task_list.snapshot()] == [("walk dog", False)]


class TestPersistenceFailures:
    def test_mutations_survive_broken_store(self, broken_store):
        task_list = TaskList(store=TaskStore(broken_store))

        a = task_list.add("a")
        task_list.add("b")
        task_list.toggle(a.id)
        task_list.clear_completed()

        assert _texts(task_list) == ["b"]
        assert broken_store.writes == 4

    def test_load_from_broken_store_is_empty(self, broken_store):
        task_list = TaskList.load(TaskStore(broken_store))

        assert len(task_list) == 0
        assert task_list.filter is Filter.ALL

    def test_load_round_trip(self, task_list, task_store):
        task_list.add("a")
        b = task_list.add("b")
        task_list.toggle(b.id)

        reloaded = TaskList.load(task_store)

        assert reloaded.snapshot() == task_list.snapshot()
        assert reloaded.add("c").id == b.id + 1


class TestConstruction:
    def test_duplicate_ids_are_dropped(self):
        task_list = TaskList([Task(id=1, text="a"), Task(id=1, text="b")])

        assert _texts(task_list) == ["a"]

    def test_id_generator_is_monotonic(self):
        gen = IdGenerator.after([Task(id=4, text="x")])

        assert [gen(), gen(), gen()] == [5, 6, 7]


class TestDragGesture:
    @pytest.fixture
    def abc(self, task_list):
        ids = {text: task_list.add(text).id for text in "abc"}
        return task_list, ids

    def test_drop_reorders_and_resets(self, abc):
        task_list, ids = abc
        drag = DragGesture(task_list)

        drag.start(ids["c"])
        drag.enter(ids["a"])
        assert drag.over_id == ids["a"]

        assert drag.drop() is True
        assert _texts(task_list) == ["c", "a", "b"]
        assert drag.dragging_id is None
        assert drag.over_id is None

    def test_invalid_drop_resets(self, abc):
        task_list, ids = abc
        drag = DragGesture(task_list)

        drag.start(ids["a"])
        drag.enter(999)

        assert drag.drop() is False
        assert not drag.active
        assert drag.over_id is None
        assert _texts(task_list) == ["a", "b", "c"]

    def test_drop_without_start(self, abc):
        task_list, ids = abc
        drag = DragGesture(task_list)

        drag.enter(ids["a"])

        assert drag.over_id is None
        assert drag.drop(ids["a"]) is False

    def test_explicit_target_overrides_hover(self, abc):
        task_list, ids = abc
        drag = DragGesture(task_list)

        drag.start(ids["c"])
        drag.enter(ids["a"])

        assert drag.drop(ids["b"]) is True
        assert _texts(task_list) == ["a", "c", "b"]

    def test_context_manager_resets_on_cancel(self, abc):
        task_list, ids = abc

        with DragGesture(task_list) as drag:
            drag.start(ids["a"])
            drag.enter(ids["b"])

        assert not drag.active
        assert drag.over_id is None
        assert _texts(task_list) == ["a", "b", "c"]

    def test_context_manager_resets_on_error(self, abc):
        task_list, ids = abc
        drag = DragGesture(task_list)

        with pytest.raises(RuntimeError):
            with drag:
                drag.start(ids["a"])
                drag.enter(ids["b"])
                raise RuntimeError("drag interrupted")

        assert not drag.active
        assert drag.over_id is None
