from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from flowoffice.common.enums import TriggerMatchMode
from flowoffice.common.events import WorkflowEventBus
from flowoffice.common.logging import get_logger
from flowoffice.core.webhooks.schemas import DeliveryOutcome, TriggerFilters
from flowoffice.transport.schemas import StatusChangedDelivery

logger = get_logger("webhooks.receiver")

STATUS_CHANGED_EVENT = "project.status_changed"


def is_ping(body: dict[str, Any]) -> bool:
    """Health-check deliveries carry a probe id and no action payload."""
    return "hook_id" in body and "action" not in body


def matches_filters(
    delivery: StatusChangedDelivery,
    filters: TriggerFilters,
    mode: TriggerMatchMode = TriggerMatchMode.ALL,
) -> bool:
    if delivery.status.column_key != filters.status_column_key:
        return False

    from_key = delivery.status.from_.label_key if delivery.status.from_ else None
    to_key = delivery.status.to.label_key

    from_set = bool(filters.from_status_labels)
    to_set = bool(filters.to_status_labels)
    from_ok = not from_set or from_key in filters.from_status_labels
    to_ok = not to_set or to_key in filters.to_status_labels

    if TriggerMatchMode(mode) is TriggerMatchMode.ANY and from_set and to_set:
        return from_ok or to_ok
    return from_ok and to_ok


async def handle_delivery(
    trigger_id: str,
    body: dict[str, Any],
    bus: WorkflowEventBus,
    filters: TriggerFilters | None = None,
    mode: TriggerMatchMode = TriggerMatchMode.ALL,
) -> DeliveryOutcome:
    if is_ping(body):
        logger.info("Acknowledged ping for trigger %s", trigger_id)
        return DeliveryOutcome(acknowledged=True, reason="ping")

    try:
        delivery = StatusChangedDelivery.model_validate(body)
    except ValidationError as e:
        # Forward unknown shapes untouched rather than losing the event
        logger.warning(
            "Delivery for trigger %s does not match the status-change shape (%d errors)",
            trigger_id,
            e.error_count(),
        )
        delivery = None

    if delivery is not None and filters is not None and not matches_filters(delivery, filters, mode):
        logger.info("Delivery %s filtered out for trigger %s", delivery.delivery_id, trigger_id)
        return DeliveryOutcome(acknowledged=True, reason="filtered")

    await bus.emit(trigger_id, STATUS_CHANGED_EVENT, body)
    return DeliveryOutcome(acknowledged=True, emitted=True)
