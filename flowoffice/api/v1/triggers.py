from fastapi import APIRouter, Depends
from pydantic import BaseModel

from flowoffice.api.deps import get_context, get_event_bus, get_static_data_store
from flowoffice.common.enums import SubscriptionState
from flowoffice.common.events import WorkflowEventBus
from flowoffice.common.exceptions import BadRequestError
from flowoffice.common.logging import get_logger
from flowoffice.config import settings
from flowoffice.core.boards.service import parse_board_id
from flowoffice.core.webhooks.manager import (
    WebhookSubscriptionManager,
    filters_scope,
    load_trigger_filters,
    save_trigger_filters,
    subscription_scope,
)
from flowoffice.core.webhooks.schemas import TriggerFilters
from flowoffice.core.webhooks.store import StaticDataStore
from flowoffice.transport.context import ExecutionContext

logger = get_logger("api.triggers")

router = APIRouter(prefix="/triggers", tags=["Triggers"])


# ---------- Schemas ----------


class TriggerStateResponse(BaseModel):
    trigger_id: str
    state: SubscriptionState
    callback_url: str
    client_subscription_id: str | None = None
    subscription_id: str | None = None
    config_hash: str | None = None


class TriggerDeleteResponse(BaseModel):
    trigger_id: str
    remote_deleted: bool


class TriggerEvent(BaseModel):
    event: str
    data: dict
    trigger_id: str
    timestamp: str


# ---------- Helpers ----------


def callback_url_for(trigger_id: str) -> str:
    return f"{settings.APP_URL.rstrip('/')}/api/v1/webhooks/{trigger_id}"


def _manager(
    trigger_id: str,
    context: ExecutionContext,
    store: StaticDataStore,
    filters: TriggerFilters,
) -> WebhookSubscriptionManager:
    return WebhookSubscriptionManager(
        context, store, subscription_scope(trigger_id), callback_url_for(trigger_id), filters
    )


# ---------- Endpoints ----------


@router.put("/{trigger_id}", response_model=TriggerStateResponse)
async def activate_trigger(
    trigger_id: str,
    filters: TriggerFilters,
    context: ExecutionContext = Depends(get_context),
    store: StaticDataStore = Depends(get_static_data_store),
):
    if parse_board_id(filters.board_id) is None or not filters.status_column_key:
        raise BadRequestError("A board and a status column must be selected")
    parse_board_id(filters.sub_board_id)

    manager = _manager(trigger_id, context, store, filters)
    await save_trigger_filters(store, trigger_id, filters)
    record = await manager.ensure()

    return TriggerStateResponse(
        trigger_id=trigger_id,
        state=SubscriptionState.PROVISIONED,
        callback_url=manager.callback_url,
        client_subscription_id=record.client_subscription_id,
        subscription_id=record.subscription_id,
        config_hash=record.config_hash,
    )


@router.get("/{trigger_id}", response_model=TriggerStateResponse)
async def verify_trigger(
    trigger_id: str,
    context: ExecutionContext = Depends(get_context),
    store: StaticDataStore = Depends(get_static_data_store),
):
    filters = await load_trigger_filters(store, trigger_id)
    if filters is None:
        return TriggerStateResponse(
            trigger_id=trigger_id,
            state=SubscriptionState.ABSENT,
            callback_url=callback_url_for(trigger_id),
        )

    manager = _manager(trigger_id, context, store, filters)
    state = await manager.verify()
    record = await manager.load_record()
    return TriggerStateResponse(
        trigger_id=trigger_id,
        state=state,
        callback_url=manager.callback_url,
        client_subscription_id=record.client_subscription_id if record else None,
        subscription_id=record.subscription_id if record else None,
        config_hash=record.config_hash if record else None,
    )


@router.delete("/{trigger_id}", response_model=TriggerDeleteResponse)
async def deactivate_trigger(
    trigger_id: str,
    context: ExecutionContext = Depends(get_context),
    store: StaticDataStore = Depends(get_static_data_store),
    bus: WorkflowEventBus = Depends(get_event_bus),
):
    filters = await load_trigger_filters(store, trigger_id)
    manager = _manager(
        trigger_id,
        context,
        store,
        filters or TriggerFilters(board_id="", status_column_key=""),
    )

    remote_deleted = await manager.teardown()
    if not remote_deleted:
        logger.warning("Deactivating trigger %s despite failed remote delete", trigger_id)
        await manager.forget()

    await store.clear(filters_scope(trigger_id))
    dropped = len(bus.drain(trigger_id))
    if dropped:
        logger.info("Dropped %d undrained events for trigger %s", dropped, trigger_id)

    return TriggerDeleteResponse(trigger_id=trigger_id, remote_deleted=remote_deleted)


@router.get("/{trigger_id}/events", response_model=list[TriggerEvent])
async def drain_events(trigger_id: str, bus: WorkflowEventBus = Depends(get_event_bus)):
    return bus.drain(trigger_id)
