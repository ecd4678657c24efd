"""Wire contracts of the FlowOffice v1 API.

Attribute names are snake_case; the camelCase wire names are aliases, so
models validate raw API payloads and dump back to them with ``by_alias=True``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from flowoffice.common.enums import ColumnType


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------- Boards ----------


class Column(WireModel):
    column_key: str
    label: str
    column_type: ColumnType
    column_config: str | None = Field(default=None, alias="columnJSON")
    deactivated: bool | None = None
    disable_editing: bool | None = None


SUBBOARD_ID_KEYS = ("subboardId", "subBoardId", "boardId", "id", "value")


class Subboard(WireModel):
    subboard_id: int = Field(
        validation_alias=AliasChoices(*SUBBOARD_ID_KEYS),
    )
    name: str | None = Field(default=None, validation_alias=AliasChoices("name", "label"))

    @property
    def display_name(self) -> str:
        return self.name if self.name is not None else str(self.subboard_id)


class Board(WireModel):
    board_id: int
    name: str
    column_schema: list[Column]
    subboards: list[Subboard] = Field(
        default_factory=list,
        validation_alias=AliasChoices("subboards", "subBoards"),
    )

    @field_validator("subboards", mode="before")
    @classmethod
    def _skip_subboards_without_id(cls, value):
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        return [
            entry
            for entry in value
            if not isinstance(entry, dict)
            or any(entry.get(key) is not None for key in (*SUBBOARD_ID_KEYS, "subboard_id"))
        ]


class BoardEntry(WireModel):
    type: Literal["board"]
    board: Board


class BoardSubGroup(WireModel):
    type: Literal["group"]
    group_id: str
    group_name: str
    boards: list[Board]


BoardItem = Annotated[BoardEntry | BoardSubGroup, Field(discriminator="type")]


class BoardGroup(WireModel):
    group_name: str
    boards: list[BoardItem]


class BoardTree(WireModel):
    board_groups: list[BoardGroup]


class StatusLabel(WireModel):
    label: str
    enum_key: str
    background_color: str


# ---------- Projects ----------


class CreateProjectsInput(WireModel):
    projects: list[dict[str, Any]]
    board_id: int
    sub_board_id: int | None = None


class CreateProjectsOutput(WireModel):
    created: list[dict[str, Any]]


class StatusFilter(WireModel):
    status_column_key: str
    filter_label_keys_or_names: list[str]


class GetProjectsInput(WireModel):
    board_id: int | None = None
    sub_board_id: int | None = None
    name: str | None = None
    project_ids: list[int] | None = None
    project_uuids: list[str] | None = None
    status: StatusFilter | None = None
    skip: int | None = None


class NextPage(WireModel):
    skip: int


class GetProjectsOutput(WireModel):
    projects: list[dict[str, Any]]
    next_page: NextPage | None = None
    hit_limit: bool = False


# ---------- Webhook subscriptions ----------


class SubscriptionUpsertInput(WireModel):
    callback_url: str
    board_id: int
    status_column_key: str
    sub_board_id: int | None = None
    from_status_label_keys: list[str] = []
    to_status_label_keys: list[str] = []
    signing_secret: str
    config_hash: str


class SubscriptionOutput(WireModel):
    id: str
    active: bool
    config_hash: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SubscriptionDeleteOutput(WireModel):
    deleted: bool | None = None


class ApiKeyValidation(WireModel):
    valid: bool | None = None


# ---------- Inbound deliveries ----------


class StatusLabelRef(WireModel):
    label_key: str
    label_name: str | None = None


class StatusChange(WireModel):
    column_key: str
    column_label: str | None = None
    from_: StatusLabelRef | None = Field(default=None, alias="from")
    to: StatusLabelRef
    occurred_at: datetime | None = None


class StatusChangedDelivery(WireModel):
    type: str
    delivery_id: str
    project_id: int | str
    board_id: int
    sub_board_id: int | None = None
    status: StatusChange
    cells: dict[str, Any] = {}
