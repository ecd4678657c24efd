from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from flowoffice.api.deps import get_context
from flowoffice.common.exceptions import BadRequestError, NotFoundError
from flowoffice.core.boards.service import parse_board_id
from flowoffice.core.switch_builder.builder import (
    build_switch_builder_items,
    fetch_status_columns_for_board,
)
from flowoffice.transport.context import ExecutionContext

router = APIRouter(tags=["Switch Builder"])


class SwitchBuilderRequest(BaseModel):
    board_id: str | int
    column_keys: list[str] = []
    status_value_expression: str | None = None
    include_deactivated: bool = False


@router.post("/switch-builder")
async def build_switches(
    data: SwitchBuilderRequest, context: ExecutionContext = Depends(get_context)
) -> list[dict[str, Any]]:
    board_id = parse_board_id(data.board_id)
    if board_id is None:
        raise BadRequestError("A board must be selected")

    columns = await fetch_status_columns_for_board(
        context, board_id, include_deactivated=data.include_deactivated
    )
    if data.column_keys:
        by_key = {column.column_key: column for column in columns}
        missing = [key for key in data.column_keys if key not in by_key]
        if missing:
            raise NotFoundError("Status column", ", ".join(missing))
        columns = [by_key[key] for key in data.column_keys]

    return build_switch_builder_items(columns, data.status_value_expression)
