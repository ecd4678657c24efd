from fastapi import APIRouter, Depends
from pydantic import BaseModel

from flowoffice.api.deps import get_context
from flowoffice.core.boards import service
from flowoffice.transport.context import ExecutionContext

router = APIRouter(prefix="/boards", tags=["Boards"])


# ---------- Schemas ----------


class StatusLabelResponse(BaseModel):
    label: str
    enum_key: str


class ColumnDescriptionResponse(BaseModel):
    column_key: str
    label: str
    column_type: str
    status_labels: list[StatusLabelResponse] | None = None


class BoardDescriptionResponse(BaseModel):
    board_id: int | None
    board_name: str | None = None
    columns: list[ColumnDescriptionResponse]


# ---------- Endpoints ----------


@router.get(
    "/{board_id}",
    response_model=BoardDescriptionResponse,
    response_model_exclude_none=True,
)
async def describe_board(board_id: str, context: ExecutionContext = Depends(get_context)):
    return await service.describe_board(context, board_id)
