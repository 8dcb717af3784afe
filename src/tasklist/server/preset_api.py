"""Preset API endpoints: manage templates and inject them into the list."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel

from ..injector import inject
from .task_api import task_payload

if TYPE_CHECKING:
    from .api import ServerState


class CreatePresetRequest(BaseModel):
    name: str


class AddPresetTaskRequest(BaseModel):
    description: str
    priority: Optional[str] = None


class PresetResponse(BaseModel):
    preset: dict[str, Any]


class PresetListResponse(BaseModel):
    presets: list[dict[str, Any]]
    total: int


class InjectResponse(BaseModel):
    ids: list[str]
    tasks: list[dict[str, Any]]
    total: int


def create_preset_router(state: "ServerState") -> APIRouter:
    """Create the preset router bound to *state*."""
    router = APIRouter(prefix="/api/presets", tags=["presets"])

    @router.get("", response_model=PresetListResponse)
    async def list_presets() -> PresetListResponse:
        with state.lock:
            data = [p.to_dict() for p in state.presets.presets()]
        return PresetListResponse(presets=data, total=len(data))

    @router.post("", response_model=PresetResponse, status_code=201)
    async def create_preset(body: CreatePresetRequest) -> PresetResponse:
        with state.lock:
            preset = state.presets.create(body.name)
            return PresetResponse(preset=preset.to_dict())

    @router.get("/{name}", response_model=PresetResponse)
    async def get_preset(name: str) -> PresetResponse:
        with state.lock:
            return PresetResponse(preset=state.presets.get(name).to_dict())

    @router.delete("/{name}")
    async def delete_preset(name: str) -> dict[str, str]:
        with state.lock:
            state.presets.remove(name)
        return {"status": "deleted"}

    @router.post("/{name}/tasks", response_model=PresetResponse, status_code=201)
    async def add_preset_task(name: str, body: AddPresetTaskRequest) -> PresetResponse:
        with state.lock:
            preset = state.presets.get(name)
            preset.add_task(body.description, priority=body.priority)
            return PresetResponse(preset=preset.to_dict())

    @router.delete("/{name}/tasks/{index}", response_model=PresetResponse)
    async def remove_preset_task(name: str, index: int) -> PresetResponse:
        with state.lock:
            preset = state.presets.get(name)
            preset.remove_task(index)
            return PresetResponse(preset=preset.to_dict())

    @router.post("/{name}/inject", response_model=InjectResponse)
    async def inject_preset(name: str) -> InjectResponse:
        with state.lock:
            ids = inject(state.presets.get(name), state.tasks)
            tasks = [task_payload(state.tasks.get(tid)) for tid in ids]
        logger.info("Injected preset {} ({} tasks)", name, len(ids))
        return InjectResponse(ids=ids, tasks=tasks, total=len(ids))

    return router
