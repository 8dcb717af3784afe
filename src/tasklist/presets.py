"""Presets: named templates of tasks for recurring chores.

A preset holds :class:`PresetTask` records, which are deliberately not
tasks: they have no id, no completion flag and no project.  Turning them
into real tasks is the job of :func:`tasklist.injector.inject`.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

from .errors import NotFound, ValidationError
from .model import validate_description, validate_priority

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PresetTask:
    """Template entry: a priority and a description, nothing else."""

    description: str
    priority: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class Preset:
    name: str
    tasks: list[PresetTask] = field(default_factory=list)

    def add_task(self, description: str, priority: Optional[str] = None) -> PresetTask:
        """Append a template task, validated like :meth:`TaskList.add`."""
        entry = PresetTask(
            description=validate_description(description),
            priority=validate_priority(priority),
        )
        self.tasks.append(entry)
        logger.debug("Preset %s: added task %r", self.name, entry.description)
        return entry

    def remove_task(self, index: int) -> PresetTask:
        if not 0 <= index < len(self.tasks):
            raise NotFound(f"Preset {self.name} has no task #{index}")
        return self.tasks.pop(index)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "tasks": [t.to_dict() for t in self.tasks]}


def validate_preset_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Preset name must not be empty")
    return name.strip()


class PresetBook:
    """Registry of presets, keyed by their unique name."""

    def __init__(self) -> None:
        self._presets: dict[str, Preset] = {}

    def create(self, name: str) -> Preset:
        """Create an empty preset.  Names must be non-empty and unused."""
        key = validate_preset_name(name)
        if key in self._presets:
            raise ValidationError(f"Preset {key} already exists")
        preset = Preset(name=key)
        self._presets[key] = preset
        logger.info("Created preset %s", key)
        return preset

    def get(self, name: str) -> Preset:
        preset = self._presets.get(name)
        if preset is None:
            raise NotFound(f"Preset {name} not found")
        return preset

    def remove(self, name: str) -> Preset:
        preset = self.get(name)
        del self._presets[name]
        logger.info("Removed preset %s", name)
        return preset

    def names(self) -> list[str]:
        return sorted(self._presets)

    def presets(self) -> list[Preset]:
        return [self._presets[n] for n in self.names()]

    def __contains__(self, name: object) -> bool:
        return name in self._presets

    def __len__(self) -> int:
        return len(self._presets)
