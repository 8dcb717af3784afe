"""Task model for the todo list.

A task carries an optional single-letter priority (``A`` is the most
urgent), a one-line description, a completion flag and an optional project
label.  Projects are not stored anywhere else: they exist only through the
tasks that reference them (see :meth:`tasklist.engine.TaskList.project_names`).
"""

from __future__ import annotations

import re
import string
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from .errors import ValidationError


PRIORITY_LETTERS = string.ascii_uppercase
HIGHEST_PRIORITY = PRIORITY_LETTERS[0]
LOWEST_PRIORITY = PRIORITY_LETTERS[-1]

# Line markers of the text format; a description must not begin with one.
_MARKER_RE = re.compile(r"^(x |\([A-Z]\) )")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _generate_id() -> str:
    """Short human-friendly task ID: ``task-<8hex>``."""
    return f"task-{uuid.uuid4().hex[:8]}"


def priority_rank(priority: Optional[str]) -> int:
    """Sort rank of a priority: ``A`` is 0, ``Z`` is 25, no priority is 26."""
    if priority is None:
        return len(PRIORITY_LETTERS)
    return PRIORITY_LETTERS.index(priority)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_priority(priority: Optional[str]) -> Optional[str]:
    """Return *priority* normalized to ``None`` or one letter in ``A..Z``.

    An empty or blank string means "no priority", which is what HTML forms
    send for an untouched field.  Anything else that is not exactly one
    uppercase Latin letter is rejected.
    """
    if priority is None:
        return None
    if not isinstance(priority, str):
        raise ValidationError(f"Priority must be a letter A-Z, got {priority!r}")
    value = priority.strip()
    if not value:
        return None
    if len(value) != 1 or value not in PRIORITY_LETTERS:
        raise ValidationError(f"Priority {value!r} is invalid; expected one letter A-Z")
    return value


def validate_description(description: Any) -> str:
    """Return the stripped description, rejecting empty or multi-line text.

    A description may not start with ``x `` or ``(X) ``: its line would read
    back as a completed or prioritized task.
    """
    if not isinstance(description, str):
        raise ValidationError("Description must be text")
    value = description.strip()
    if not value:
        raise ValidationError("Description must not be empty")
    if "\n" in value or "\r" in value:
        raise ValidationError("Description must fit on a single line")
    if _MARKER_RE.match(value):
        raise ValidationError(f"Description {value!r} must not start with a completion or priority marker")
    return value


def validate_project(project: Optional[str]) -> Optional[str]:
    """Return the stripped project name or ``None`` for a blank one."""
    if project is None:
        return None
    if not isinstance(project, str):
        raise ValidationError("Project must be text")
    value = project.strip()
    if not value:
        return None
    return value


# ---------------------------------------------------------------------------
# Task dataclass
# ---------------------------------------------------------------------------

@dataclass
class Task:
    """A single entry of a :class:`~tasklist.engine.TaskList`.

    Equality looks at the user-visible fields only, so a task decoded from
    its text line compares equal to the task it was encoded from even
    though the two carry different ids.
    """

    description: str = ""
    priority: Optional[str] = None
    completed: bool = False
    project: Optional[str] = None

    id: str = field(default_factory=_generate_id, compare=False)
    # Insertion sequence inside the owning list; final ordering tie-breaker.
    seq: int = field(default=0, compare=False, repr=False)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict (JSON friendly)."""
        data = asdict(self)
        data.pop("seq")
        return data

    # ------------------------------------------------------------------
    # Priority steps
    # ------------------------------------------------------------------

    def raise_priority(self) -> None:
        """Step one letter towards ``A``; an unprioritized task becomes ``Z``."""
        if self.priority is None:
            self.priority = LOWEST_PRIORITY
        elif self.priority != HIGHEST_PRIORITY:
            self.priority = PRIORITY_LETTERS[priority_rank(self.priority) - 1]

    def lower_priority(self) -> None:
        """Step one letter towards ``Z``; clamps at ``Z`` and ignores ``None``."""
        if self.priority is None or self.priority == LOWEST_PRIORITY:
            return
        self.priority = PRIORITY_LETTERS[priority_rank(self.priority) + 1]
