from pydantic import BaseModel, field_validator

from flowoffice.transport.schemas import WireModel


class WebhookSubscriptionRecord(WireModel):
    subscription_id: str | None = None
    client_subscription_id: str
    signing_secret: str
    config_hash: str


class TriggerFilters(BaseModel):
    board_id: str
    status_column_key: str
    from_status_labels: list[str] = []
    to_status_labels: list[str] = []
    sub_board_id: str = ""

    @field_validator("board_id", "sub_board_id", mode="before")
    @classmethod
    def _coerce_id(cls, value):
        return "" if value is None else str(value)


class DeliveryOutcome(BaseModel):
    acknowledged: bool = False
    emitted: bool = False
    reason: str | None = None
