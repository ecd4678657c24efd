from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from flowoffice.api.deps import get_context
from flowoffice.common.enums import ColumnTypeFilter
from flowoffice.core.boards import service
from flowoffice.core.boards.field_mapper import MappingField
from flowoffice.core.boards.navigator import NodeOption
from flowoffice.transport.context import ExecutionContext

router = APIRouter(prefix="/options", tags=["Options"])


# ---------- Schemas ----------


class MappingFieldsResponse(BaseModel):
    fields: list[MappingField]
    empty_fields_notice: str


# ---------- Endpoints ----------


@router.get(
    "/boards",
    response_model=list[NodeOption],
    response_model_exclude_none=True,
)
async def board_options(context: ExecutionContext = Depends(get_context)):
    return await service.load_board_options(context)


@router.get(
    "/boards/{board_id}/subboards",
    response_model=list[NodeOption],
    response_model_exclude_none=True,
)
async def subboard_options(board_id: str, context: ExecutionContext = Depends(get_context)):
    return await service.load_subboard_options(context, board_id)


@router.get(
    "/boards/{board_id}/columns",
    response_model=list[NodeOption],
    response_model_exclude_none=True,
)
async def column_options(
    board_id: str,
    type_filter: ColumnTypeFilter = ColumnTypeFilter.ALL,
    include_deactivated: bool = True,
    with_empty_status_choice: bool = False,
    context: ExecutionContext = Depends(get_context),
):
    return await service.load_column_options(
        context,
        board_id,
        type_filter,
        include_deactivated=include_deactivated,
        with_empty_status_choice=with_empty_status_choice,
    )


@router.get(
    "/boards/{board_id}/columns/{column_key}/labels",
    response_model=list[NodeOption],
    response_model_exclude_none=True,
)
async def status_label_options(
    board_id: str, column_key: str, context: ExecutionContext = Depends(get_context)
):
    return await service.load_status_label_options(context, board_id, column_key)


@router.get(
    "/boards/{board_id}/columns/{column_key}/type",
    response_model=list[NodeOption],
    response_model_exclude_none=True,
)
async def column_type(
    board_id: str, column_key: str, context: ExecutionContext = Depends(get_context)
):
    return await service.load_column_type(context, board_id, column_key)


@router.get("/boards/{board_id}/mapping-fields", response_model=MappingFieldsResponse)
async def mapping_fields(
    board_id: str,
    include_deactivated: bool = True,
    context: ExecutionContext = Depends(get_context),
) -> Any:
    return await service.load_mapping_fields(
        context, board_id, include_deactivated=include_deactivated
    )
