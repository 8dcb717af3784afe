"""Task and project API endpoints.

This module provides FastAPI routers over a shared :class:`TaskList`.  They
are mounted under ``/api/tasks`` and ``/api/projects`` by
:func:`tasklist.server.api.create_app`.  Core errors are not caught here:
the app-level exception handlers turn them into 400 / 404 responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from fastapi import APIRouter, Query
from fastapi.responses import PlainTextResponse
from loguru import logger
from pydantic import BaseModel

from ..codec import encode
from ..engine import UNSET
from ..model import Task

if TYPE_CHECKING:
    from .api import ServerState


# ---------------------------------------------------------------------------
# Pydantic request / response models
# ---------------------------------------------------------------------------

class CreateTaskRequest(BaseModel):
    description: str
    priority: Optional[str] = None
    project: Optional[str] = None


class UpdateTaskRequest(BaseModel):
    """Partial update; only the fields present in the body are applied.

    An explicit ``null`` priority or project clears it.
    """

    priority: Optional[str] = None
    description: Optional[str] = None
    project: Optional[str] = None


class ImportRequest(BaseModel):
    text: str
    extended: bool = False


class RenameProjectRequest(BaseModel):
    name: str


class TaskResponse(BaseModel):
    task: dict[str, Any]


class TaskListResponse(BaseModel):
    tasks: list[dict[str, Any]]
    total: int


class IdsResponse(BaseModel):
    ids: list[str]
    total: int


class CleanupResponse(BaseModel):
    removed: int


class ProjectListResponse(BaseModel):
    projects: list[str]


class RenameProjectResponse(BaseModel):
    project: str
    moved: int


def task_payload(task: Task) -> dict[str, Any]:
    """Task fields plus its canonical text line."""
    data = task.to_dict()
    data["line"] = encode(task)
    return data


# ---------------------------------------------------------------------------
# Router factories
# ---------------------------------------------------------------------------

def create_task_router(state: "ServerState") -> APIRouter:
    """Create the task router bound to *state*."""
    router = APIRouter(prefix="/api/tasks", tags=["tasks"])

    @router.get("", response_model=TaskListResponse)
    async def list_tasks(
        project: Optional[str] = Query(None),
        include_completed: bool = Query(True),
    ) -> TaskListResponse:
        with state.lock:
            tasks = state.tasks.list(project=project, include_completed=include_completed)
        data = [task_payload(t) for t in tasks]
        return TaskListResponse(tasks=data, total=len(data))

    @router.post("", response_model=TaskResponse, status_code=201)
    async def create_task(body: CreateTaskRequest) -> TaskResponse:
        with state.lock:
            task_id = state.tasks.add(body.description, priority=body.priority, project=body.project)
            task = state.tasks.get(task_id)
        return TaskResponse(task=task_payload(task))

    @router.get("/export", response_class=PlainTextResponse)
    async def export_tasks(extended: bool = Query(False)) -> str:
        with state.lock:
            return state.tasks.dumps(extended=extended)

    @router.post("/import", response_model=IdsResponse, status_code=201)
    async def import_tasks(body: ImportRequest) -> IdsResponse:
        with state.lock:
            ids = state.tasks.load(body.text, extended=body.extended)
        return IdsResponse(ids=ids, total=len(ids))

    @router.post("/cleanup", response_model=CleanupResponse)
    async def cleanup() -> CleanupResponse:
        with state.lock:
            removed = state.tasks.cleanup()
        if removed:
            logger.info("Cleanup removed {} completed tasks", removed)
        return CleanupResponse(removed=removed)

    @router.get("/{task_id}", response_model=TaskResponse)
    async def get_task(task_id: str) -> TaskResponse:
        with state.lock:
            task = state.tasks.get(task_id)
        return TaskResponse(task=task_payload(task))

    @router.patch("/{task_id}", response_model=TaskResponse)
    async def update_task(task_id: str, body: UpdateTaskRequest) -> TaskResponse:
        sent = body.model_fields_set
        changes = {
            name: getattr(body, name) if name in sent else UNSET
            for name in ("priority", "description", "project")
        }
        with state.lock:
            task = state.tasks.edit(task_id, **changes)
        return TaskResponse(task=task_payload(task))

    @router.post("/{task_id}/complete", response_model=TaskResponse)
    async def complete_task(task_id: str) -> TaskResponse:
        with state.lock:
            task = state.tasks.flag_completed(task_id)
        return TaskResponse(task=task_payload(task))

    @router.post("/{task_id}/pending", response_model=TaskResponse)
    async def reopen_task(task_id: str) -> TaskResponse:
        with state.lock:
            task = state.tasks.flag_pending(task_id)
        return TaskResponse(task=task_payload(task))

    @router.post("/{task_id}/toggle", response_model=TaskResponse)
    async def toggle_task(task_id: str) -> TaskResponse:
        with state.lock:
            task = state.tasks.toggle(task_id)
        return TaskResponse(task=task_payload(task))

    @router.post("/{task_id}/raise-priority", response_model=TaskResponse)
    async def raise_priority(task_id: str) -> TaskResponse:
        with state.lock:
            task = state.tasks.raise_priority(task_id)
        return TaskResponse(task=task_payload(task))

    @router.post("/{task_id}/lower-priority", response_model=TaskResponse)
    async def lower_priority(task_id: str) -> TaskResponse:
        with state.lock:
            task = state.tasks.lower_priority(task_id)
        return TaskResponse(task=task_payload(task))

    return router


def create_project_router(state: "ServerState") -> APIRouter:
    """Projects have no storage of their own; these endpoints read and
    rewrite the project field of tasks."""
    router = APIRouter(prefix="/api/projects", tags=["projects"])

    @router.get("", response_model=ProjectListResponse)
    async def list_projects() -> ProjectListResponse:
        with state.lock:
            names = state.tasks.project_names()
        return ProjectListResponse(projects=sorted(names))

    @router.post("/{name}/rename", response_model=RenameProjectResponse)
    async def rename_project(name: str, body: RenameProjectRequest) -> RenameProjectResponse:
        with state.lock:
            moved = state.tasks.rename_project(name, body.name)
        return RenameProjectResponse(project=body.name.strip(), moved=moved)

    return router
