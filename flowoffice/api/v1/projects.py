from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from flowoffice.api.deps import get_context
from flowoffice.core.projects.service import (
    OutputItem,
    ProjectQuery,
    create_projects,
    get_projects,
)
from flowoffice.transport.context import ExecutionContext

router = APIRouter(prefix="/projects", tags=["Projects"])


# ---------- Schemas ----------


class CreateProjectsRequest(BaseModel):
    board_id: str | int
    subboard_id: str | int | None = None
    mappings: list[dict[str, Any] | None]
    continue_on_fail: bool = False
    batch_size: int | None = Field(default=None, ge=1)


class ProjectQueryRequest(ProjectQuery):
    continue_on_fail: bool = False


# ---------- Endpoints ----------


@router.post("/create", response_model=list[OutputItem], response_model_exclude_none=True)
async def create(data: CreateProjectsRequest, context: ExecutionContext = Depends(get_context)):
    return await create_projects(
        context,
        data.board_id,
        data.subboard_id,
        data.mappings,
        continue_on_fail=data.continue_on_fail,
        batch_size=data.batch_size,
    )


@router.post("/query", response_model=list[OutputItem], response_model_exclude_none=True)
async def query(data: ProjectQueryRequest, context: ExecutionContext = Depends(get_context)):
    return await get_projects(
        context,
        data,
        continue_on_fail=data.continue_on_fail,
    )
