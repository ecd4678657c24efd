"""Read-only queries over a fetched board tree.

Every function is pure: the tree comes from one ``list-boards`` call made by
the caller and is never mutated. Lookups that feed dropdowns return empty
lists for unknown boards or columns; ``get_board`` raises instead, for call
sites that must tell a vanished board apart from an empty one.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import assert_never

from pydantic import BaseModel

from flowoffice.common.enums import ColumnType, ColumnTypeFilter
from flowoffice.common.exceptions import NotFoundError
from flowoffice.core.boards.status_labels import decode_status_labels
from flowoffice.transport.schemas import Board, BoardTree, Column


class NodeOption(BaseModel):
    name: str
    value: str | int
    description: str | None = None


def iter_boards(tree: BoardTree) -> Iterator[tuple[list[str], Board]]:
    """Yield ``(group path, board)`` for every board, in source order."""
    for group in tree.board_groups:
        for item in group.boards:
            if item.type == "board":
                yield [group.group_name], item.board
            elif item.type == "group":
                for board in item.boards:
                    yield [group.group_name, item.group_name], board
            else:
                assert_never(item)


def list_board_options(tree: BoardTree) -> list[NodeOption]:
    return [
        NodeOption(name=" / ".join([*path, board.name]), value=board.board_id)
        for path, board in iter_boards(tree)
    ]


def resolve_board(tree: BoardTree, board_id: int) -> Board | None:
    for _, board in iter_boards(tree):
        if board.board_id == board_id:
            return board
    return None


def get_board(tree: BoardTree, board_id: int) -> Board:
    board = resolve_board(tree, board_id)
    if board is None:
        raise NotFoundError("Board", str(board_id))
    return board


def find_column(board: Board, column_key: str) -> Column | None:
    for column in board.column_schema:
        if column.column_key == column_key:
            return column
    return None


def list_subboard_options(tree: BoardTree, board_id: int) -> list[NodeOption]:
    board = resolve_board(tree, board_id)
    if board is None:
        return []
    return [NodeOption(name=sb.display_name, value=sb.subboard_id) for sb in board.subboards]


def column_matches(column: Column, type_filter: ColumnTypeFilter) -> bool:
    if type_filter is ColumnTypeFilter.ALL:
        return True
    if type_filter is ColumnTypeFilter.STATUS_ONLY:
        return column.column_type is ColumnType.STATUS
    if type_filter is ColumnTypeFilter.NON_STATUS:
        return column.column_type is not ColumnType.STATUS
    assert_never(type_filter)


def list_column_options(
    tree: BoardTree,
    board_id: int,
    type_filter: ColumnTypeFilter = ColumnTypeFilter.ALL,
    *,
    include_deactivated: bool = True,
) -> list[NodeOption]:
    type_filter = ColumnTypeFilter(type_filter)
    board = resolve_board(tree, board_id)
    if board is None:
        return []

    options = []
    for column in board.column_schema:
        if not column_matches(column, type_filter):
            continue
        if column.deactivated and not include_deactivated:
            continue
        options.append(
            NodeOption(
                name=f"{column.label} ({column.column_type.value})",
                value=column.column_key,
                description=f"Column type: {column.column_type.value}",
            )
        )
    return options


def list_status_label_options(tree: BoardTree, board_id: int, column_key: str) -> list[NodeOption]:
    board = resolve_board(tree, board_id)
    if board is None:
        return []

    column = find_column(board, column_key)
    if column is None or column.column_type is not ColumnType.STATUS:
        return []

    return [NodeOption(name=label.label, value=label.enum_key) for label in decode_status_labels(column)]
