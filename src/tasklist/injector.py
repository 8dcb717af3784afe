"""Materialize a preset as real tasks in a task list."""

from __future__ import annotations

import logging

from .engine import TaskList
from .model import validate_description, validate_priority
from .presets import Preset, validate_preset_name

logger = logging.getLogger(__name__)


def inject(preset: Preset, target: TaskList) -> list[str]:
    """Add one pending task per preset task, tagged with the preset's name.

    Tasks are created in preset order and the new ids are returned in the
    same order.  Injecting twice creates two batches; the preset itself is
    only read.

    Raises:
        tasklist.errors.ValidationError: if the preset name or any entry is
            invalid; *target* is then left untouched.
    """
    project = validate_preset_name(preset.name)
    entries = [
        (validate_description(entry.description), validate_priority(entry.priority))
        for entry in preset.tasks
    ]
    ids = [target.add(description, priority=priority, project=project) for description, priority in entries]
    logger.info("Injected preset %s: %d tasks", project, len(ids))
    return ids
