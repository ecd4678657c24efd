import json

import pytest

from flowoffice.common.exceptions import NotFoundError
from flowoffice.core.switch_builder.builder import (
    SWITCH_NODE_TYPE,
    build_switch_builder_items,
    build_switch_clipboard,
    fetch_status_columns_for_board,
)
from flowoffice.transport.schemas import StatusLabel

EXPRESSION = "={{ $json.status.to.labelKey }}"

SALES_LABELS = [
    StatusLabel(label="Open", enum_key="open", background_color="#fff"),
    StatusLabel(label="Won", enum_key="won", background_color="#0f0"),
]


def _conditions(clipboard):
    rules = clipboard.workflow["nodes"][0]["parameters"]["rules"]["values"]
    return [rule["conditions"]["conditions"][0] for rule in rules]


def test_two_label_switch():
    clipboard = build_switch_clipboard(1, "stage", "Stage", SALES_LABELS)

    assert clipboard.output_count == 2
    assert clipboard.node_name == "Switch Status: Stage"

    conditions = _conditions(clipboard)
    assert len({c["id"] for c in conditions}) == 2
    assert [c["leftValue"] for c in conditions] == [EXPRESSION, EXPRESSION]
    assert [c["rightValue"] for c in conditions] == ['={{ "open" }}', '={{ "won" }}']
    assert all(c["operator"] == {"type": "string", "operation": "equals"} for c in conditions)


def test_switch_node_shape():
    clipboard = build_switch_clipboard(1, "stage", "Stage", SALES_LABELS, node_name="Route")
    node = clipboard.workflow["nodes"][0]

    assert node["type"] == SWITCH_NODE_TYPE
    assert node["typeVersion"] == 3.3
    assert node["name"] == "Route"
    rules = node["parameters"]["rules"]["values"]
    assert [rule["outputKey"] for rule in rules] == ["Open", "Won"]
    assert all(rule["renameOutput"] for rule in rules)
    assert rules[0]["conditions"]["options"]["caseSensitive"] is True
    assert rules[0]["conditions"]["options"]["typeValidation"] == "strict"

    assert clipboard.workflow["connections"] == {"Route": {"main": [[], []]}}
    assert "-" not in clipboard.workflow["meta"]["instanceId"]
    assert json.loads(clipboard.json_text) == clipboard.workflow


def test_ids_are_fresh_per_call():
    first = build_switch_clipboard(1, "stage", "Stage", SALES_LABELS)
    second = build_switch_clipboard(1, "stage", "Stage", SALES_LABELS)

    assert first.workflow["nodes"][0]["id"] != second.workflow["nodes"][0]["id"]
    assert {c["id"] for c in _conditions(first)}.isdisjoint(c["id"] for c in _conditions(second))


def test_custom_expression():
    clipboard = build_switch_clipboard(
        1, "stage", "Stage", SALES_LABELS, status_value_expression="={{ $json.stage }}"
    )

    assert {c["leftValue"] for c in _conditions(clipboard)} == {"={{ $json.stage }}"}


def test_empty_label_set_keeps_one_output_slot():
    clipboard = build_switch_clipboard(1, "stage", "Stage", [])

    assert clipboard.output_count == 0
    assert clipboard.workflow["connections"]["Switch Status: Stage"]["main"] == [[]]


@pytest.mark.asyncio
async def test_status_columns_skip_deactivated_by_default(flowoffice_client):
    columns = await fetch_status_columns_for_board(flowoffice_client, 2)

    assert [c.column_key for c in columns] == ["phase"]
    assert columns[0].board_name == "North"

    everything = await fetch_status_columns_for_board(flowoffice_client, 2, include_deactivated=True)
    assert [c.column_key for c in everything] == ["phase", "old_phase"]


@pytest.mark.asyncio
async def test_status_columns_for_unknown_board(flowoffice_client):
    with pytest.raises(NotFoundError):
        await fetch_status_columns_for_board(flowoffice_client, 999)


@pytest.mark.asyncio
async def test_builder_items(flowoffice_client):
    columns = await fetch_status_columns_for_board(flowoffice_client, 1)

    items = build_switch_builder_items(columns)

    assert len(items) == 1
    item = items[0]
    assert item["column_key"] == "stage"
    assert item["label_count"] == 2
    assert item["output_count"] == 2
    assert item["labels"][0] == {"label": "Open", "enumKey": "open", "backgroundColor": "#fff"}
    assert json.loads(item["switch_node_json"]) == item["switch_node_workflow"]
