import pytest

from flowoffice.common.enums import TriggerMatchMode
from flowoffice.core.webhooks.receiver import (
    STATUS_CHANGED_EVENT,
    handle_delivery,
    is_ping,
    matches_filters,
)
from flowoffice.core.webhooks.schemas import TriggerFilters
from flowoffice.transport.schemas import StatusChangedDelivery


def _delivery_body(from_key="open", to_key="won", column_key="stage") -> dict:
    status = {
        "columnKey": column_key,
        "columnLabel": "Stage",
        "to": {"labelKey": to_key, "labelName": to_key.title()},
        "occurredAt": "2024-05-01T10:00:00Z",
    }
    if from_key is not None:
        status["from"] = {"labelKey": from_key, "labelName": from_key.title()}
    return {
        "type": "project.status_changed",
        "deliveryId": "d-1",
        "projectId": 42,
        "boardId": 1,
        "subBoardId": None,
        "status": status,
        "cells": {"name": "Roof repair"},
    }


def _filters(from_labels=(), to_labels=()) -> TriggerFilters:
    return TriggerFilters(
        board_id=1,
        status_column_key="stage",
        from_status_labels=list(from_labels),
        to_status_labels=list(to_labels),
    )


def test_ping_detection():
    assert is_ping({"hook_id": 5})
    assert not is_ping({"hook_id": 5, "action": {}})
    assert not is_ping(_delivery_body())


def test_delivery_aliases():
    delivery = StatusChangedDelivery.model_validate(_delivery_body())

    assert delivery.status.from_.label_key == "open"
    assert delivery.status.to.label_key == "won"
    assert delivery.cells == {"name": "Roof repair"}


@pytest.mark.parametrize(
    ("filters", "body", "expected"),
    [
        (_filters(), _delivery_body(), True),
        (_filters(to_labels=["won"]), _delivery_body(), True),
        (_filters(to_labels=["lost"]), _delivery_body(), False),
        (_filters(from_labels=["open"]), _delivery_body(), True),
        (_filters(from_labels=["open"]), _delivery_body(from_key=None), False),
        (_filters(from_labels=["open"], to_labels=["won"]), _delivery_body(), True),
        (_filters(from_labels=["open"], to_labels=["lost"]), _delivery_body(), False),
        (_filters(), _delivery_body(column_key="phase"), False),
    ],
)
def test_matches_filters_all_mode(filters, body, expected):
    delivery = StatusChangedDelivery.model_validate(body)

    assert matches_filters(delivery, filters, TriggerMatchMode.ALL) is expected


def test_any_mode_needs_only_one_side():
    delivery = StatusChangedDelivery.model_validate(_delivery_body())
    filters = _filters(from_labels=["open"], to_labels=["lost"])

    assert matches_filters(delivery, filters, TriggerMatchMode.ANY)
    assert not matches_filters(delivery, filters, TriggerMatchMode.ALL)


def test_any_mode_with_one_side_set_behaves_like_all():
    delivery = StatusChangedDelivery.model_validate(_delivery_body())

    assert not matches_filters(delivery, _filters(to_labels=["lost"]), TriggerMatchMode.ANY)


@pytest.mark.asyncio
async def test_ping_is_acknowledged_without_event(event_bus):
    outcome = await handle_delivery("t1", {"hook_id": 1}, event_bus, _filters())

    assert outcome.acknowledged
    assert not outcome.emitted
    assert event_bus.pending("t1") == 0


@pytest.mark.asyncio
async def test_matching_delivery_emits_event(event_bus):
    body = _delivery_body()

    outcome = await handle_delivery("t1", body, event_bus, _filters(to_labels=["won"]))

    assert outcome.emitted
    events = event_bus.drain("t1")
    assert len(events) == 1
    assert events[0]["event"] == STATUS_CHANGED_EVENT
    assert events[0]["data"] == body
    assert event_bus.drain("t1") == []


@pytest.mark.asyncio
async def test_filtered_delivery_emits_nothing(event_bus):
    outcome = await handle_delivery("t1", _delivery_body(), event_bus, _filters(to_labels=["lost"]))

    assert outcome.acknowledged
    assert outcome.reason == "filtered"
    assert event_bus.pending("t1") == 0


@pytest.mark.asyncio
async def test_unknown_shape_is_forwarded_raw(event_bus):
    body = {"type": "something.else", "payload": [1, 2]}

    outcome = await handle_delivery("t1", body, event_bus, _filters(to_labels=["won"]))

    assert outcome.emitted
    assert event_bus.drain("t1")[0]["data"] == body
