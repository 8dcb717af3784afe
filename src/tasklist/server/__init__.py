"""HTTP adapter for the task list."""

from .api import ServerState, create_app

__all__ = ["ServerState", "create_app"]
