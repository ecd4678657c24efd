"""Paste-ready Switch node definitions for status columns.

The generated workflow fragment contains one Switch node with one rule per
status label, routing on the label's stable key. It is self-contained: the
node, every condition and the instance carry freshly generated ids, and every
output has an (empty) connection slot.
"""

from __future__ import annotations

import json
import uuid
from typing import Any

from pydantic import BaseModel

from flowoffice.common.enums import ColumnType
from flowoffice.common.logging import get_logger
from flowoffice.config import settings
from flowoffice.core.boards import navigator
from flowoffice.core.boards.service import fetch_board_tree
from flowoffice.core.boards.status_labels import decode_status_labels
from flowoffice.transport.context import ExecutionContext
from flowoffice.transport.schemas import StatusLabel

logger = get_logger("switch_builder")

SWITCH_NODE_TYPE = "n8n-nodes-base.switch"
SWITCH_NODE_VERSION = 3.3


class StatusColumnDefinition(BaseModel):
    board_id: int
    board_name: str | None = None
    column_key: str
    column_label: str
    labels: list[StatusLabel]


class SwitchClipboard(BaseModel):
    workflow: dict[str, Any]
    json_text: str
    node_name: str
    output_count: int


def _new_id() -> str:
    return str(uuid.uuid4())


def _rule_for_label(label: StatusLabel, expression: str) -> dict[str, Any]:
    return {
        "conditions": {
            "options": {
                "caseSensitive": True,
                "leftValue": "",
                "typeValidation": "strict",
                "version": 2,
            },
            "conditions": [
                {
                    "id": _new_id(),
                    "leftValue": expression,
                    "rightValue": f'={{{{ "{label.enum_key}" }}}}',
                    "operator": {"type": "string", "operation": "equals"},
                }
            ],
            "combinator": "and",
        },
        "renameOutput": True,
        "outputKey": label.label,
    }


def build_switch_clipboard(
    board_id: int,
    column_key: str,
    column_label: str,
    labels: list[StatusLabel],
    *,
    board_name: str | None = None,
    status_value_expression: str | None = None,
    node_name: str | None = None,
) -> SwitchClipboard:
    expression = status_value_expression or settings.STATUS_VALUE_EXPRESSION
    name = node_name or f"Switch Status: {column_label}"
    rules = [_rule_for_label(label, expression) for label in labels]

    node = {
        "parameters": {"rules": {"values": rules}, "options": {}},
        "type": SWITCH_NODE_TYPE,
        "typeVersion": SWITCH_NODE_VERSION,
        "position": [0, 0],
        "id": _new_id(),
        "name": name,
    }
    workflow = {
        "nodes": [node],
        "connections": {name: {"main": [[] for _ in range(max(len(rules), 1))]}},
        "pinData": {},
        "meta": {"templateCredsSetupCompleted": True, "instanceId": uuid.uuid4().hex},
    }

    logger.debug(
        "Built switch for column %s on board %s (%s) with %d outputs",
        column_key,
        board_id,
        board_name or "unnamed",
        len(rules),
    )
    return SwitchClipboard(
        workflow=workflow,
        json_text=json.dumps(workflow, indent=2),
        node_name=name,
        output_count=len(rules),
    )


def build_switch_builder_items(
    columns: list[StatusColumnDefinition], status_value_expression: str | None = None
) -> list[dict[str, Any]]:
    items = []
    for column in columns:
        clipboard = build_switch_clipboard(
            column.board_id,
            column.column_key,
            column.column_label,
            column.labels,
            board_name=column.board_name,
            status_value_expression=status_value_expression,
        )
        items.append({
            "board_id": column.board_id,
            "board_name": column.board_name,
            "column_key": column.column_key,
            "column_label": column.column_label,
            "label_count": len(column.labels),
            "labels": [label.model_dump(by_alias=True) for label in column.labels],
            "switch_node_name": clipboard.node_name,
            "switch_node_json": clipboard.json_text,
            "switch_node_workflow": clipboard.workflow,
            "output_count": clipboard.output_count,
        })
    return items


async def fetch_status_columns_for_board(
    context: ExecutionContext, board_id: int, *, include_deactivated: bool = False
) -> list[StatusColumnDefinition]:
    board = navigator.get_board(await fetch_board_tree(context), board_id)
    return [
        StatusColumnDefinition(
            board_id=board.board_id,
            board_name=board.name,
            column_key=column.column_key,
            column_label=column.label,
            labels=decode_status_labels(column),
        )
        for column in board.column_schema
        if column.column_type is ColumnType.STATUS and (include_deactivated or not column.deactivated)
    ]
