"""Tests for presets (presets.py) and preset injection (injector.py)."""

from __future__ import annotations

import pytest

from tasklist.engine import TaskList
from tasklist.errors import NotFound, ValidationError
from tasklist.injector import inject
from tasklist.presets import Preset, PresetBook, PresetTask


@pytest.fixture
def book() -> PresetBook:
    return PresetBook()


class TestPresetBook:
    def test_create(self, book: PresetBook) -> None:
        preset = book.create("chores")
        assert preset.name == "chores"
        assert preset.tasks == []
        assert "chores" in book
        assert book.get("chores") is preset

    def test_name_is_stripped(self, book: PresetBook) -> None:
        assert book.create("  chores ").name == "chores"

    @pytest.mark.parametrize("name", ["", "   "])
    def test_empty_name_rejected(self, book: PresetBook, name: str) -> None:
        with pytest.raises(ValidationError):
            book.create(name)
        assert len(book) == 0

    def test_duplicate_name_rejected(self, book: PresetBook) -> None:
        book.create("chores")
        with pytest.raises(ValidationError, match="already exists"):
            book.create(" chores")
        assert len(book) == 1

    def test_get_unknown(self, book: PresetBook) -> None:
        with pytest.raises(NotFound):
            book.get("garden")

    def test_names_sorted(self, book: PresetBook) -> None:
        book.create("weekly")
        book.create("daily")
        assert book.names() == ["daily", "weekly"]
        assert [p.name for p in book.presets()] == ["daily", "weekly"]

    def test_remove(self, book: PresetBook) -> None:
        book.create("daily")
        book.remove("daily")
        assert "daily" not in book
        with pytest.raises(NotFound):
            book.remove("daily")


class TestPresetTasks:
    def test_add_task(self) -> None:
        preset = Preset(name="chores")
        entry = preset.add_task(" vacuum ", priority="A")
        assert entry == PresetTask(description="vacuum", priority="A")
        assert preset.tasks == [entry]

    def test_add_task_without_priority(self) -> None:
        preset = Preset(name="chores")
        assert preset.add_task("dust").priority is None

    def test_add_task_validation(self) -> None:
        preset = Preset(name="chores")
        with pytest.raises(ValidationError):
            preset.add_task("")
        with pytest.raises(ValidationError):
            preset.add_task("vacuum", priority="a")
        assert preset.tasks == []

    def test_remove_task(self) -> None:
        preset = Preset(name="chores")
        preset.add_task("vacuum")
        preset.add_task("dust")
        assert preset.remove_task(0).description == "vacuum"
        assert [t.description for t in preset.tasks] == ["dust"]

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_remove_task_bad_index(self, index: int) -> None:
        preset = Preset(name="chores")
        preset.add_task("vacuum")
        with pytest.raises(NotFound):
            preset.remove_task(index)

    def test_to_dict(self) -> None:
        preset = Preset(name="chores")
        preset.add_task("vacuum", priority="A")
        assert preset.to_dict() == {
            "name": "chores",
            "tasks": [{"description": "vacuum", "priority": "A"}],
        }


class TestInject:
    def test_chores_scenario(self, book: PresetBook) -> None:
        preset = book.create("chores")
        preset.add_task("vacuum", priority="A")
        tasks = TaskList()

        ids = inject(preset, tasks)

        assert len(ids) == 1
        task = tasks.get(ids[0])
        assert task.project == "chores"
        assert task.priority == "A"
        assert task.description == "vacuum"
        assert task.completed is False

    def test_ids_follow_preset_order(self) -> None:
        preset = Preset(name="chores")
        preset.add_task("vacuum", priority="C")
        preset.add_task("dust", priority="A")
        preset.add_task("trash")
        tasks = TaskList()
        ids = inject(preset, tasks)
        assert [tasks.get(i).description for i in ids] == ["vacuum", "dust", "trash"]

    @pytest.mark.parametrize("times", [1, 2, 3])
    def test_injection_multiplicity(self, times: int) -> None:
        preset = Preset(name="chores")
        preset.add_task("vacuum", priority="A")
        preset.add_task("dust")
        tasks = TaskList()
        batches = [inject(preset, tasks) for _ in range(times)]

        assert len(tasks) == times * 2
        assert all(t.project == "chores" for t in tasks.list())
        all_ids = [i for batch in batches for i in batch]
        assert len(set(all_ids)) == len(all_ids)

    def test_preset_is_not_consumed(self) -> None:
        preset = Preset(name="chores")
        preset.add_task("vacuum", priority="A")
        before = list(preset.tasks)
        tasks = TaskList()
        inject(preset, tasks)
        tasks.flag_completed(tasks.list()[0].id)
        tasks.cleanup()
        assert preset.tasks == before

    def test_injected_tasks_are_independent(self) -> None:
        preset = Preset(name="chores")
        preset.add_task("vacuum", priority="A")
        tasks = TaskList()
        first, = inject(preset, tasks)
        second, = inject(preset, tasks)
        tasks.edit(first, description="vacuum upstairs")
        assert tasks.get(second).description == "vacuum"

    def test_existing_tasks_untouched(self) -> None:
        tasks = TaskList()
        own = tasks.add("pay rent", priority="B", project="home")
        preset = Preset(name="chores")
        preset.add_task("vacuum")
        inject(preset, tasks)
        assert tasks.get(own).project == "home"
        assert tasks.project_names() == {"home", "chores"}

    def test_empty_preset(self) -> None:
        tasks = TaskList()
        assert inject(Preset(name="empty"), tasks) == []
        assert len(tasks) == 0
        assert tasks.project_names() == set()

    def test_multi_word_preset_name_becomes_project(self, book: PresetBook) -> None:
        preset = book.create("Weekly chores")
        preset.add_task("vacuum")
        tasks = TaskList()
        inject(preset, tasks)
        assert tasks.project_names() == {"Weekly chores"}


class TestInjectValidation:
    @pytest.mark.parametrize(
        "entries",
        [
            [PresetTask("vacuum", "A"), PresetTask("")],
            [PresetTask("vacuum"), PresetTask("dust", "dd")],
            [PresetTask("vacuum"), PresetTask("x marks the spot")],
        ],
    )
    def test_invalid_entry_leaves_list_untouched(self, entries: list[PresetTask]) -> None:
        tasks = TaskList()
        tasks.add("existing")
        with pytest.raises(ValidationError):
            inject(Preset("chores", entries), tasks)
        assert [t.description for t in tasks.list()] == ["existing"]

    def test_entries_appended_directly_are_checked(self) -> None:
        preset = Preset(name="chores")
        preset.add_task("vacuum")
        preset.tasks.append(PresetTask("  "))
        tasks = TaskList()
        with pytest.raises(ValidationError):
            inject(preset, tasks)
        assert len(tasks) == 0

    def test_blank_preset_name_rejected(self) -> None:
        tasks = TaskList()
        with pytest.raises(ValidationError, match="Preset name"):
            inject(Preset(" ", [PresetTask("vacuum")]), tasks)
        assert len(tasks) == 0
