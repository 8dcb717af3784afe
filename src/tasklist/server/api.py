"""FastAPI application factory for the task list."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from ..config import build_state
from ..engine import TaskList
from ..errors import NotFound, ValidationError
from ..presets import PresetBook
from .preset_api import create_preset_router
from .task_api import create_project_router, create_task_router


@dataclass
class ServerState:
    """The objects one app serves.

    The core does no locking of its own, so every endpoint holds ``lock``
    while it touches ``tasks`` or ``presets``.
    """

    tasks: TaskList = field(default_factory=TaskList)
    presets: PresetBook = field(default_factory=PresetBook)
    lock: threading.Lock = field(default_factory=threading.Lock)


def create_app(
    config: Optional[dict[str, Any]] = None,
    state: Optional[ServerState] = None,
    enable_cors: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Loaded config mapping used to seed tasks and presets.
            Ignored when *state* is given.
        state: Pre-built state, mostly for tests.
        enable_cors: Whether to enable CORS.

    Returns:
        Configured FastAPI app.
    """
    if state is None:
        tasks, presets = build_state(config or {})
        state = ServerState(tasks=tasks, presets=presets)

    app = FastAPI(
        title="Task List",
        description="todo.txt-style task list with presets",
        version="1.0.0",
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.state.tasklist = state

    @app.exception_handler(ValidationError)
    async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("{} {} rejected: {}", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(NotFound)
    async def _not_found(request: Request, exc: NotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.get("/api/health")
    async def health() -> dict[str, Any]:
        with state.lock:
            return {"status": "ok", "tasks": len(state.tasks), "presets": len(state.presets)}

    app.include_router(create_task_router(state))
    app.include_router(create_project_router(state))
    app.include_router(create_preset_router(state))
    return app
