"""Lifecycle of the project-status-changed webhook subscription.

One subscription exists per configured trigger. Its local identity (client
subscription id and signing secret) lives in the static-data store under the
trigger's scope and survives filter edits, so the remote side is always
upserted under the same key. Staleness is detected by comparing the stored
configuration hash with one computed from the live filters.
"""

from __future__ import annotations

import hashlib
import json
import secrets

from pydantic import ValidationError

from flowoffice.common.enums import SubscriptionState
from flowoffice.common.exceptions import ExternalServiceError, TransportError
from flowoffice.common.logging import get_logger
from flowoffice.config import settings
from flowoffice.core.webhooks.schemas import TriggerFilters, WebhookSubscriptionRecord
from flowoffice.core.webhooks.store import StaticDataStore
from flowoffice.transport import endpoints
from flowoffice.transport.context import ExecutionContext
from flowoffice.transport.invoker import invoke_endpoint
from flowoffice.transport.schemas import SubscriptionOutput, SubscriptionUpsertInput

logger = get_logger("webhooks.manager")


def build_config_hash(callback_url: str, filters: TriggerFilters) -> str:
    payload = json.dumps(
        {
            "webhookUrl": callback_url,
            "boardId": filters.board_id,
            "statusColumnKey": filters.status_column_key,
            "fromStatusLabels": sorted(filters.from_status_labels),
            "toStatusLabels": sorted(filters.to_status_labels),
            "subBoardId": filters.sub_board_id,
        },
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def generate_client_subscription_id(scope: str) -> str:
    return f"flowoffice:{settings.INSTANCE_ID}:{scope}:{secrets.token_hex(8)}"


def generate_signing_secret() -> str:
    return secrets.token_urlsafe(33)


class WebhookSubscriptionManager:
    def __init__(
        self,
        context: ExecutionContext,
        store: StaticDataStore,
        scope: str,
        callback_url: str,
        filters: TriggerFilters,
    ):
        self.context = context
        self.store = store
        self.scope = scope
        self.callback_url = callback_url
        self.filters = filters

    @property
    def config_hash(self) -> str:
        return build_config_hash(self.callback_url, self.filters)

    async def load_record(self) -> WebhookSubscriptionRecord | None:
        data = await self.store.get(self.scope)
        if not data:
            return None
        try:
            return WebhookSubscriptionRecord.model_validate(data)
        except ValidationError:
            logger.warning("Ignoring invalid subscription record for %s", self.scope)
            return None

    async def verify(self) -> SubscriptionState:
        state, _ = await self._verify()
        return state

    async def _verify(self) -> tuple[SubscriptionState, WebhookSubscriptionRecord | None]:
        record = await self.load_record()
        if record is None:
            logger.info("No subscription record for %s", self.scope)
            return SubscriptionState.ABSENT, None

        if record.config_hash != self.config_hash:
            logger.info("Subscription config hash mismatch for %s", self.scope)
            return SubscriptionState.STALE, record

        endpoint = endpoints.GET_SUBSCRIPTION.format(
            client_subscription_id=record.client_subscription_id
        )
        try:
            remote = await invoke_endpoint(endpoint, self.context, lenient=True)
        except ExternalServiceError as e:
            logger.error("Subscription check failed for %s: %s", self.scope, e.detail)
            return SubscriptionState.STALE, record

        if isinstance(remote, SubscriptionOutput):
            active = remote.active
        else:
            active = isinstance(remote, dict) and bool(remote.get("active"))
        if not active:
            logger.info("Subscription for %s exists but is inactive", self.scope)
            return SubscriptionState.STALE, record

        return SubscriptionState.PROVISIONED, record

    async def ensure(self) -> WebhookSubscriptionRecord:
        """Create or update the remote subscription; idempotent."""
        state, record = await self._verify()
        if state is SubscriptionState.PROVISIONED and record is not None:
            return record

        client_subscription_id = (
            record.client_subscription_id if record else generate_client_subscription_id(self.scope)
        )
        signing_secret = record.signing_secret if record else generate_signing_secret()
        config_hash = self.config_hash

        body = SubscriptionUpsertInput(
            callback_url=self.callback_url,
            board_id=int(self.filters.board_id),
            status_column_key=self.filters.status_column_key,
            sub_board_id=int(self.filters.sub_board_id) if self.filters.sub_board_id.strip() else None,
            from_status_label_keys=list(self.filters.from_status_labels),
            to_status_label_keys=list(self.filters.to_status_labels),
            signing_secret=signing_secret,
            config_hash=config_hash,
        )
        endpoint = endpoints.UPSERT_SUBSCRIPTION.format(client_subscription_id=client_subscription_id)
        remote = await invoke_endpoint(endpoint, self.context, body)

        new_record = WebhookSubscriptionRecord(
            subscription_id=remote.id,
            client_subscription_id=client_subscription_id,
            signing_secret=signing_secret,
            config_hash=config_hash,
        )
        await self.store.put(self.scope, new_record.model_dump(by_alias=True))
        logger.info("Upserted subscription %s for %s", remote.id, self.scope)
        return new_record

    async def teardown(self) -> bool:
        """Delete the remote subscription. Returns False when the delete failed."""
        record = await self.load_record()
        if record is None:
            return True

        endpoint = endpoints.DELETE_SUBSCRIPTION.format(
            client_subscription_id=record.client_subscription_id
        )
        try:
            await invoke_endpoint(endpoint, self.context, lenient=True)
        except TransportError as e:
            if e.upstream_status != 404:
                logger.error("Failed to delete subscription for %s: %s", self.scope, e.detail)
                return False
            logger.info("Subscription for %s was already gone", self.scope)

        await self.forget()
        return True

    async def forget(self) -> None:
        await self.store.clear(self.scope)


def subscription_scope(trigger_id: str) -> str:
    return f"trigger:{trigger_id}"


def filters_scope(trigger_id: str) -> str:
    return f"trigger:{trigger_id}:filters"


async def load_trigger_filters(store: StaticDataStore, trigger_id: str) -> TriggerFilters | None:
    data = await store.get(filters_scope(trigger_id))
    if not data:
        return None
    try:
        return TriggerFilters.model_validate(data)
    except ValidationError:
        logger.warning("Ignoring invalid filters stored for trigger %s", trigger_id)
        return None


async def save_trigger_filters(
    store: StaticDataStore, trigger_id: str, filters: TriggerFilters
) -> None:
    await store.put(filters_scope(trigger_id), filters.model_dump())
