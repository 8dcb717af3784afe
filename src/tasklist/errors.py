"""Error kinds raised by the task-list core.

Both kinds are recoverable: an operation that raises has not mutated any
state, so the caller can re-prompt or re-fetch and try again.
"""

from __future__ import annotations


class TaskListError(Exception):
    """Base class for every error raised by :mod:`tasklist`."""


class ValidationError(TaskListError, ValueError):
    """Rejected input: empty description, bad priority, bad preset name."""


class NotFound(TaskListError, LookupError):
    """An id, preset name or project referenced by the caller does not exist."""
