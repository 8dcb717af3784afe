"""Provide the public `tasklist` package exports."""

from __future__ import annotations

from .engine import UNSET, TaskList
from .errors import NotFound, TaskListError, ValidationError
from .injector import inject
from .model import Task
from .presets import Preset, PresetBook, PresetTask

__all__ = [
    "UNSET",
    "NotFound",
    "Preset",
    "PresetBook",
    "PresetTask",
    "Task",
    "TaskList",
    "TaskListError",
    "ValidationError",
    "inject",
]
