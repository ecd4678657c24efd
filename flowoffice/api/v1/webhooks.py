import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from flowoffice.api.deps import get_event_bus, get_static_data_store
from flowoffice.common.enums import TriggerMatchMode
from flowoffice.common.events import WorkflowEventBus
from flowoffice.common.exceptions import BadRequestError, NotFoundError
from flowoffice.config import settings
from flowoffice.core.webhooks.manager import load_trigger_filters
from flowoffice.core.webhooks.receiver import handle_delivery, is_ping
from flowoffice.core.webhooks.store import StaticDataStore

router = APIRouter(tags=["Webhooks"])


class WebhookResponse(BaseModel):
    status: str
    message: str


@router.post("/webhooks/{trigger_id}", response_model=WebhookResponse)
async def receive_status_change(
    trigger_id: str,
    request: Request,
    store: StaticDataStore = Depends(get_static_data_store),
    bus: WorkflowEventBus = Depends(get_event_bus),
):
    """Receive a project-status-changed delivery from FlowOffice."""
    body = await request.body()
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise BadRequestError("Invalid JSON payload")
    if not isinstance(payload, dict):
        raise BadRequestError("Webhook payload must be a JSON object")

    filters = await load_trigger_filters(store, trigger_id)
    if filters is None and not is_ping(payload):
        raise NotFoundError("Trigger", trigger_id)

    outcome = await handle_delivery(
        trigger_id, payload, bus, filters, TriggerMatchMode(settings.TRIGGER_MATCH_MODE)
    )
    if outcome.reason == "ping":
        return PlainTextResponse("OK")
    if not outcome.emitted:
        return WebhookResponse(status="ignored", message=f"Delivery {outcome.reason}")
    return WebhookResponse(status="ok", message="Event emitted")
