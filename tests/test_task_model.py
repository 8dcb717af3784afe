"""Tests for the task model (model.py)."""

from __future__ import annotations

import pytest

from tasklist.errors import ValidationError
from tasklist.model import (
    Task,
    priority_rank,
    validate_description,
    validate_priority,
    validate_project,
)


class TestTaskCreation:
    def test_default_values(self) -> None:
        t = Task(description="Test task")
        assert t.description == "Test task"
        assert t.priority is None
        assert t.completed is False
        assert t.project is None
        assert t.id.startswith("task-")
        assert len(t.id) == 13  # "task-" + 8 hex chars

    def test_id_generation_unique(self) -> None:
        ids = {Task().id for _ in range(100)}
        assert len(ids) == 100

    def test_equality_ignores_id(self) -> None:
        a = Task(description="wash car", priority="B")
        b = Task(description="wash car", priority="B")
        assert a.id != b.id
        assert a == b
        assert a != Task(description="wash car", priority="C")


class TestTaskSerialization:
    def test_to_dict(self) -> None:
        t = Task(description="Write docs", priority="C", completed=True, project="docs")
        d = t.to_dict()
        assert d == {
            "id": t.id,
            "description": "Write docs",
            "priority": "C",
            "completed": True,
            "project": "docs",
        }
        assert "seq" not in d


class TestValidation:
    @pytest.mark.parametrize("raw", ["A", "M", "Z", " B "])
    def test_valid_priorities(self, raw: str) -> None:
        assert validate_priority(raw) == raw.strip()

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_blank_priority_means_none(self, raw: str | None) -> None:
        assert validate_priority(raw) is None

    @pytest.mark.parametrize("raw", ["a", "AA", "1", "(A)", "É", 3])
    def test_invalid_priorities(self, raw: object) -> None:
        with pytest.raises(ValidationError):
            validate_priority(raw)  # type: ignore[arg-type]

    def test_description_is_stripped(self) -> None:
        assert validate_description("  wash car \n") == "wash car"

    @pytest.mark.parametrize("raw", ["", "   ", None])
    def test_empty_description_rejected(self, raw: object) -> None:
        with pytest.raises(ValidationError):
            validate_description(raw)

    def test_multiline_description_rejected(self) -> None:
        with pytest.raises(ValidationError, match="single line"):
            validate_description("first\nsecond")

    @pytest.mark.parametrize("raw", ["x marks the spot", "  x marks", "(A) looks prioritized", "(Z) z"])
    def test_line_markers_rejected(self, raw: str) -> None:
        with pytest.raises(ValidationError, match="marker"):
            validate_description(raw)

    @pytest.mark.parametrize("raw", ["x", "xylophone", "X marks", "(a) lowercase", "(AB) two", "(A)no space", "(A)"])
    def test_marker_lookalikes_accepted(self, raw: str) -> None:
        assert validate_description(raw) == raw

    def test_project_blank_is_none(self) -> None:
        assert validate_project("  ") is None
        assert validate_project(" home ") == "home"
        assert validate_project("Weekly chores") == "Weekly chores"


class TestPriorityHelpers:
    def test_rank_order(self) -> None:
        assert priority_rank("A") < priority_rank("B") < priority_rank("Z") < priority_rank(None)

    def test_raise_priority(self) -> None:
        t = Task(description="x", priority="C")
        t.raise_priority()
        assert t.priority == "B"

    def test_raise_priority_clamps_at_a(self) -> None:
        t = Task(description="x", priority="A")
        t.raise_priority()
        assert t.priority == "A"

    def test_raise_unprioritized_gives_z(self) -> None:
        t = Task(description="x")
        t.raise_priority()
        assert t.priority == "Z"

    def test_lower_priority(self) -> None:
        t = Task(description="x", priority="C")
        t.lower_priority()
        assert t.priority == "D"

    def test_lower_priority_clamps_at_z(self) -> None:
        t = Task(description="x", priority="Z")
        t.lower_priority()
        assert t.priority == "Z"

    def test_lower_unprioritized_is_noop(self) -> None:
        t = Task(description="x")
        t.lower_priority()
        assert t.priority is None
