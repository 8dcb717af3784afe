"""Load optional configuration from ``tasklist.yaml``.

The file seeds the in-memory state a server starts with::

    log_level: INFO
    tasks:
      - "(A) pay rent +home"
      - "x (B) file taxes"
    presets:
      chores:
        - "(A) vacuum"
        - "take out trash"

Task lines are decoded in extended mode, so ``+project`` tags attach the
seeded task to a project.  Preset lines only use their priority and
description; a completed ``x `` line is rejected there.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError as SchemaError, field_validator

from . import codec
from .engine import TaskList
from .errors import ValidationError
from .presets import PresetBook

logger = logging.getLogger(__name__)

CONFIG_FILE = "tasklist.yaml"
CONFIG_ENV_VAR = "TASKLIST_CONFIG"
VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class TaskListConfig(BaseModel):
    """Schema of the config file; unknown keys are ignored."""

    log_level: str = "INFO"
    tasks: list[str] = Field(default_factory=list)
    presets: dict[str, list[str]] = Field(default_factory=dict)

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(VALID_LOG_LEVELS)}")
        return level

    @field_validator("tasks", mode="before")
    @classmethod
    def _no_tasks(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("presets", mode="before")
    @classmethod
    def _no_presets(cls, value: Any) -> Any:
        if value is None:
            return {}
        # "chores:" with no entries parses as None
        if isinstance(value, dict):
            return {k: (v or []) for k, v in value.items()}
        return value


def resolve_config_path(path: Optional[str] = None) -> Path:
    """Pick the config path: explicit argument, then env var, then ``./tasklist.yaml``."""
    raw = path or os.environ.get(CONFIG_ENV_VAR)
    return Path(raw).expanduser() if raw else Path.cwd() / CONFIG_FILE


def load_config(path: Path) -> tuple[dict[str, Any], str | None]:
    """Load the optional config file.

    Args:
        path: Location of the YAML file.

    Returns:
        A tuple of ``(config, error_message)``.  A missing file returns
        ``({}, None)``; an unreadable or invalid one returns ``({}, message)``.
    """
    if not path.exists():
        return {}, None
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        return {}, f"Unable to read {path}: {exc}"
    if data is None:
        return {}, None
    if not isinstance(data, dict):
        return {}, f"{path} must contain a mapping at the top level"
    try:
        parsed = TaskListConfig.model_validate(data)
    except SchemaError as exc:
        return {}, f"Invalid config {path}: {exc}"
    return parsed.model_dump(), None


def get_log_level(config: dict[str, Any]) -> str:
    raw = config.get("log_level")
    return raw if isinstance(raw, str) and raw in VALID_LOG_LEVELS else "INFO"


def get_seed_tasks(config: dict[str, Any]) -> list[str]:
    raw = config.get("tasks")
    return [str(line) for line in raw] if isinstance(raw, list) else []


def get_presets(config: dict[str, Any]) -> dict[str, list[str]]:
    raw = config.get("presets")
    return dict(raw) if isinstance(raw, dict) else {}


def build_state(config: dict[str, Any]) -> tuple[TaskList, PresetBook]:
    """Create the task list and preset book described by *config*.

    Raises:
        tasklist.errors.TaskListError: if a seeded task or preset is invalid.
    """
    tasks = TaskList()
    seed = get_seed_tasks(config)
    if seed:
        tasks.load("\n".join(seed), extended=True)

    book = PresetBook()
    for name, lines in get_presets(config).items():
        preset = book.create(name)
        for line in lines:
            entry = codec.decode(line)
            if entry.completed:
                raise ValidationError(f"Preset {name} entry {line!r} must not be completed")
            preset.add_task(entry.description, priority=entry.priority)

    logger.info("Seeded %d tasks and %d presets", len(tasks), len(book))
    return tasks, book

