"""Encode tasks to and from their todo.txt-style line.

Grammar of one line::

    line := "x " description
          | "(" LETTER ")" " " description
          | description

A completed task is written ``x <description>``: its priority and project
are kept in memory but not rendered, so the plain format is lossy for
them.  The *extended* mode adds the todo.txt side-channel tokens
``pri:X`` (priority of a completed task) and ``+project`` at the end of the
line, which makes the export lossless.

Decoding never fails.  A line that does not match a marker is read as a
pending, unprioritized task whose description is the whole line.
"""

from __future__ import annotations

import re
from typing import Iterable
from urllib.parse import quote, unquote

from .model import Task


_COMPLETED_PREFIX = "x "
_PRIORITY_RE = re.compile(r"^\((?P<priority>[A-Z])\) (?P<rest>.*)$")
_PROJECT_TAG_RE = re.compile(r"\s\+(?P<project>\S+)$")
_PRIORITY_TAG_RE = re.compile(r"\spri:(?P<priority>[A-Z])$")


def encode(task: Task, extended: bool = False) -> str:
    """Return the canonical one-line representation of *task*."""
    if task.completed:
        line = _COMPLETED_PREFIX + task.description
        if extended and task.priority:
            line += f" pri:{task.priority}"
    elif task.priority:
        line = f"({task.priority}) {task.description}"
    else:
        line = task.description
    if extended and task.project:
        # percent-encoding keeps multi-word project names on one token
        line += " +" + quote(task.project, safe="")
    return line


def decode(line: str, extended: bool = False) -> Task:
    """Parse one line into a new :class:`Task` (fresh id, never raises)."""
    text = line.rstrip("\r\n")

    completed = False
    priority = None
    description = text.strip()

    if text.startswith(_COMPLETED_PREFIX) and text[len(_COMPLETED_PREFIX):].strip():
        completed = True
        description = text[len(_COMPLETED_PREFIX):].strip()
        # a completed line may still carry its old "(X) " marker
        m = _PRIORITY_RE.match(description)
        if m and m.group("rest").strip():
            priority = m.group("priority")
            description = m.group("rest").strip()
    else:
        m = _PRIORITY_RE.match(text)
        if m and m.group("rest").strip():
            priority = m.group("priority")
            description = m.group("rest").strip()

    project = None
    if extended:
        description, project = _peel(description, _PROJECT_TAG_RE, "project")
        if project is not None:
            project = unquote(project)
        if completed:
            description, tagged = _peel(description, _PRIORITY_TAG_RE, "priority")
            priority = tagged or priority

    return Task(
        description=description,
        priority=priority,
        completed=completed,
        project=project,
    )


def _peel(description: str, pattern: re.Pattern[str], group: str) -> tuple[str, str | None]:
    """Strip a trailing side-channel token, unless nothing would be left."""
    m = pattern.search(description)
    if not m:
        return description, None
    remainder = description[: m.start()].strip()
    if not remainder:
        return description, None
    return remainder, m.group(group)


def dumps(tasks: Iterable[Task], extended: bool = False) -> str:
    """Render *tasks* one per line, each line newline-terminated."""
    return "".join(encode(t, extended=extended) + "\n" for t in tasks)


def loads(text: str, extended: bool = False) -> list[Task]:
    """Decode every non-blank line of *text*."""
    return [decode(line, extended=extended) for line in text.splitlines() if line.strip()]
