"""Task list: creation, edits, completion flags, ordering and cleanup.

This is the primary entry-point for all task manipulation.  A
:class:`TaskList` is a plain in-memory object: it does no locking and no
I/O, so a host that shares one instance between threads must guard it
with its own lock (the HTTP app in :mod:`tasklist.server` does).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Iterator, Optional

from . import codec
from .errors import NotFound, ValidationError
from .model import (
    Task,
    _generate_id,
    priority_rank,
    validate_description,
    validate_priority,
    validate_project,
)

logger = logging.getLogger(__name__)


class _Unset:
    """Marker for "leave this field alone" in :meth:`TaskList.edit`."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def order_tasks(tasks: list[Task]) -> list[Task]:
    """Sort *tasks* for display.

    Keys, most significant first: priority (``A`` first, unprioritized
    last), description in descending case-sensitive order, then insertion
    order.  Each pass is a stable sort, so the earlier passes break ties
    of the later ones.
    """
    out = sorted(tasks, key=lambda t: t.seq)
    out.sort(key=lambda t: t.description, reverse=True)
    out.sort(key=lambda t: priority_rank(t.priority))
    return out


# ---------------------------------------------------------------------------
# Task list
# ---------------------------------------------------------------------------

class TaskList:
    """An ordered collection of tasks keyed by id.

    The list owns its tasks: every method that returns a task returns a
    copy, so callers cannot mutate list state behind its back.

    Parameters
    ----------
    tasks:
        Optional initial tasks (already decoded or deserialized); they are
        validated like :meth:`add` and keep their completion state.
    """

    def __init__(self, tasks: Optional[list[Task]] = None) -> None:
        self._tasks: dict[str, Task] = {}
        self._issued_ids: set[str] = set()
        self._next_seq = 1
        for task in tasks or []:
            self._insert(self._validated(task))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _insert(self, task: Task) -> Task:
        # Ids are never handed out twice, even after cleanup removed the owner.
        while task.id in self._issued_ids:
            task.id = _generate_id()
        self._issued_ids.add(task.id)
        task.seq = self._next_seq
        self._next_seq += 1
        self._tasks[task.id] = task
        return task

    def _require(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFound(f"Task {task_id} not found")
        return task

    @staticmethod
    def _validated(task: Task) -> Task:
        return Task(
            id=task.id,
            description=validate_description(task.description),
            priority=validate_priority(task.priority),
            completed=bool(task.completed),
            project=validate_project(task.project),
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def add(
        self,
        description: str,
        priority: Optional[str] = None,
        project: Optional[str] = None,
    ) -> str:
        """Create a pending task and return its id."""
        task = Task(
            description=validate_description(description),
            priority=validate_priority(priority),
            project=validate_project(project),
        )
        self._insert(task)
        logger.info("Created task %s: %s", task.id, codec.encode(task))
        return task.id

    def get(self, task_id: str) -> Task:
        return replace(self._require(task_id))

    def edit(
        self,
        task_id: str,
        *,
        priority: Any = UNSET,
        description: Any = UNSET,
        project: Any = UNSET,
    ) -> Task:
        """Apply a partial update and return the updated task.

        Only the fields passed are touched; ``priority=None`` clears the
        priority and ``project=None`` detaches the task from its project.
        Every changed field is validated before any of them is applied.
        """
        task = self._require(task_id)
        changes: dict[str, Any] = {}
        if priority is not UNSET:
            changes["priority"] = validate_priority(priority)
        if description is not UNSET:
            changes["description"] = validate_description(description)
        if project is not UNSET:
            changes["project"] = validate_project(project)

        for key, value in changes.items():
            setattr(task, key, value)
        if changes:
            logger.debug("Edited task %s: %s", task_id, sorted(changes))
        return replace(task)

    # ------------------------------------------------------------------
    # Completion flags and priority steps
    # ------------------------------------------------------------------

    def flag_completed(self, task_id: str) -> Task:
        """Mark a task completed.  Already-completed tasks are left as they are."""
        task = self._require(task_id)
        if not task.completed:
            task.completed = True
            logger.debug("Task %s completed", task_id)
        return replace(task)

    def flag_pending(self, task_id: str) -> Task:
        """Mark a task pending again; its priority was never cleared."""
        task = self._require(task_id)
        if task.completed:
            task.completed = False
            logger.debug("Task %s reopened", task_id)
        return replace(task)

    def toggle(self, task_id: str) -> Task:
        if self._require(task_id).completed:
            return self.flag_pending(task_id)
        return self.flag_completed(task_id)

    def raise_priority(self, task_id: str) -> Task:
        task = self._require(task_id)
        task.raise_priority()
        return replace(task)

    def lower_priority(self, task_id: str) -> Task:
        task = self._require(task_id)
        task.lower_priority()
        return replace(task)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(
        self,
        project: Optional[str] = None,
        include_completed: bool = True,
    ) -> list[Task]:
        """Return copies of the tasks in display order.

        *project* keeps only the tasks associated with that project;
        *include_completed* set to ``False`` hides completed tasks.
        """
        selected = [
            t for t in self._tasks.values()
            if (project is None or t.project == project)
            and (include_completed or not t.completed)
        ]
        return [replace(t) for t in order_tasks(selected)]

    def project_names(self) -> set[str]:
        """Every project currently referenced by at least one task."""
        return {t.project for t in self._tasks.values() if t.project}

    def rename_project(self, old: str, new: str) -> int:
        """Move every task of project *old* to project *new*.

        Returns the number of tasks moved.  Once no task references *old*
        it no longer shows up in :meth:`project_names`.
        """
        target = validate_project(new)
        if target is None:
            raise ValidationError("Project name must not be empty")
        members = [t for t in self._tasks.values() if t.project == old]
        if not members:
            raise NotFound(f"Project {old} not found")
        for task in members:
            task.project = target
        logger.info("Renamed project %s to %s (%d tasks)", old, target, len(members))
        return len(members)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self.list())

    # ------------------------------------------------------------------
    # Cleanup
    # ------------------------------------------------------------------

    def cleanup(self) -> int:
        """Remove every completed task and return how many were removed."""
        done = [tid for tid, t in self._tasks.items() if t.completed]
        for tid in done:
            del self._tasks[tid]
        if done:
            logger.info("Cleaned up %d completed tasks", len(done))
        return len(done)

    # ------------------------------------------------------------------
    # Text import / export
    # ------------------------------------------------------------------

    def dumps(self, extended: bool = False) -> str:
        """Export the ordered list in the canonical text format."""
        return codec.dumps(self.list(), extended=extended)

    def load(self, text: str, extended: bool = False) -> list[str]:
        """Add every task decoded from *text*; returns the new ids in order.

        All lines are validated before the first one is added, so a bad
        line leaves the list untouched.
        """
        decoded = [self._validated(t) for t in codec.loads(text, extended=extended)]
        ids = [self._insert(t).id for t in decoded]
        if ids:
            logger.info("Loaded %d tasks from text", len(ids))
        return ids
