"""Dynamic option loaders and the board description action.

Each call fetches a fresh board tree; nothing is cached between calls.
"""

from __future__ import annotations

from typing import Any

from flowoffice.common.enums import ColumnType, ColumnTypeFilter
from flowoffice.common.exceptions import BadRequestError
from flowoffice.common.logging import get_logger
from flowoffice.core.boards import navigator
from flowoffice.core.boards.field_mapper import MappingField, build_mapping_fields
from flowoffice.core.boards.navigator import NodeOption
from flowoffice.core.boards.status_labels import decode_status_labels
from flowoffice.transport import endpoints
from flowoffice.transport.context import ExecutionContext
from flowoffice.transport.invoker import invoke_endpoint
from flowoffice.transport.schemas import BoardTree

logger = get_logger("boards.service")

NO_STATUS_COLUMN = "(no status column selected)"


def parse_board_id(raw: Any) -> int | None:
    """Coerce a board selector to an int; blank selectors mean "nothing selected"."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise BadRequestError(f"Invalid board id: {raw!r}")


async def fetch_board_tree(context: ExecutionContext) -> BoardTree:
    return await invoke_endpoint(endpoints.LIST_BOARDS, context)


async def load_board_options(context: ExecutionContext) -> list[NodeOption]:
    return navigator.list_board_options(await fetch_board_tree(context))


async def load_subboard_options(context: ExecutionContext, board_id: Any) -> list[NodeOption]:
    selected = parse_board_id(board_id)
    if selected is None:
        return []
    return navigator.list_subboard_options(await fetch_board_tree(context), selected)


async def load_column_options(
    context: ExecutionContext,
    board_id: Any,
    type_filter: ColumnTypeFilter = ColumnTypeFilter.ALL,
    *,
    include_deactivated: bool = True,
    with_empty_status_choice: bool = False,
) -> list[NodeOption]:
    empty_choice = NodeOption(name=NO_STATUS_COLUMN, value=NO_STATUS_COLUMN)
    prefix = [empty_choice] if with_empty_status_choice else []

    selected = parse_board_id(board_id)
    if selected is None:
        return prefix

    tree = await fetch_board_tree(context)
    return prefix + navigator.list_column_options(
        tree, selected, type_filter, include_deactivated=include_deactivated
    )


async def load_status_label_options(
    context: ExecutionContext, board_id: Any, column_key: str | None
) -> list[NodeOption]:
    selected = parse_board_id(board_id)
    if selected is None or not column_key or column_key == NO_STATUS_COLUMN:
        return []
    return navigator.list_status_label_options(await fetch_board_tree(context), selected, column_key)


async def load_column_type(
    context: ExecutionContext, board_id: Any, column_key: str | None
) -> list[NodeOption]:
    selected = parse_board_id(board_id)
    if selected is None or not column_key:
        return []

    board = navigator.resolve_board(await fetch_board_tree(context), selected)
    if board is None:
        return []
    column = navigator.find_column(board, column_key)
    if column is None:
        return []

    return [
        NodeOption(
            name=column.column_type.value,
            value=column.column_type.value,
            description=f"Detected type for {column_key}",
        )
    ]


async def load_mapping_fields(
    context: ExecutionContext, board_id: Any, *, include_deactivated: bool = True
) -> dict[str, Any]:
    selected = parse_board_id(board_id)
    if selected is None:
        return {"fields": [], "empty_fields_notice": "No board selected."}

    board = navigator.resolve_board(await fetch_board_tree(context), selected)
    if board is None:
        return {"fields": [], "empty_fields_notice": "Board not found."}

    fields: list[MappingField] = build_mapping_fields(board, include_deactivated=include_deactivated)
    return {"fields": fields, "empty_fields_notice": "No columns found for the selected board."}


async def describe_board(context: ExecutionContext, board_id: Any) -> dict[str, Any]:
    """Output one board's columns, with decoded labels for status columns."""
    selected = parse_board_id(board_id)
    if selected is None:
        return {"board_id": None, "columns": []}

    board = navigator.resolve_board(await fetch_board_tree(context), selected)
    if board is None:
        logger.info("Board %s not found while describing it", selected)
        return {"board_id": selected, "board_name": None, "columns": []}

    columns = []
    for column in board.column_schema:
        entry: dict[str, Any] = {
            "column_key": column.column_key,
            "label": column.label,
            "column_type": column.column_type.value,
        }
        if column.column_type is ColumnType.STATUS:
            entry["status_labels"] = [
                {"label": label.label, "enum_key": label.enum_key}
                for label in decode_status_labels(column)
            ]
        columns.append(entry)

    return {"board_id": board.board_id, "board_name": board.name, "columns": columns}
