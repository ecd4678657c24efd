from __future__ import annotations

from pydantic import BaseModel

from flowoffice.common.enums import ColumnType, FieldType
from flowoffice.common.logging import get_logger
from flowoffice.core.boards.navigator import NodeOption
from flowoffice.core.boards.status_labels import decode_status_labels
from flowoffice.transport.schemas import Board

logger = get_logger("boards.field_mapper")

COLUMN_FIELD_TYPES: dict[ColumnType, FieldType] = {
    ColumnType.STATUS: FieldType.ENUMERATED,
    ColumnType.NUMBER: FieldType.NUMBER,
    ColumnType.RATING_STARS: FieldType.NUMBER,
    # TODO: interval values are sent as plain numbers until the API documents their unit
    ColumnType.INTERVAL: FieldType.NUMBER,
    ColumnType.DATE: FieldType.DATE_TIME,
    ColumnType.REMINDER_DATE: FieldType.DATE_TIME,
    ColumnType.CHECKBOX: FieldType.BOOLEAN,
    ColumnType.NAME: FieldType.STRING,
    ColumnType.TEXT: FieldType.STRING,
    ColumnType.PHONE: FieldType.STRING,
    ColumnType.EMAIL: FieldType.STRING,
    ColumnType.ADDRESS: FieldType.STRING,
    ColumnType.PERSON_NAME: FieldType.STRING,
    ColumnType.LINK: FieldType.URL,
    ColumnType.TIME_TRACKING: FieldType.UNSUPPORTED,
    ColumnType.FORMULA: FieldType.UNSUPPORTED,
    ColumnType.DOCUMENT: FieldType.UNSUPPORTED,
    ColumnType.WAREHOUSE: FieldType.UNSUPPORTED,
    ColumnType.CUSTOMER: FieldType.UNSUPPORTED,
    ColumnType.TEAM_MEMBER: FieldType.UNSUPPORTED,
    ColumnType.TASKS: FieldType.UNSUPPORTED,
    ColumnType.CLOUD: FieldType.UNSUPPORTED,
}

COLUMN_DISPLAY_NAMES: dict[ColumnType, str] = {
    ColumnType.NAME: "Name",
    ColumnType.TEXT: "Text",
    ColumnType.STATUS: "Status",
    ColumnType.NUMBER: "Number",
    ColumnType.DATE: "Date",
    ColumnType.CHECKBOX: "Checkbox",
    ColumnType.INTERVAL: "Interval",
    ColumnType.PHONE: "Phone",
    ColumnType.EMAIL: "Email",
    ColumnType.ADDRESS: "Address",
    ColumnType.RATING_STARS: "Rating Stars",
    ColumnType.REMINDER_DATE: "Contact again at",
    ColumnType.LINK: "Link",
    ColumnType.PERSON_NAME: "Person Name",
    ColumnType.TIME_TRACKING: "Time Evaluation",
    ColumnType.FORMULA: "Formula",
    ColumnType.DOCUMENT: "Document",
    ColumnType.WAREHOUSE: "Warehouse",
    ColumnType.CUSTOMER: "Customer",
    ColumnType.TEAM_MEMBER: "Team Member",
    ColumnType.TASKS: "Tasks",
    ColumnType.CLOUD: "Cloud",
}


def _check_exhaustive(table: dict[ColumnType, object], table_name: str) -> None:
    missing = set(ColumnType) - table.keys()
    if missing:
        names = ", ".join(sorted(m.value for m in missing))
        logger.critical("%s has no entry for column types: %s", table_name, names)
        raise RuntimeError(f"{table_name} is missing column types: {names}")


_check_exhaustive(COLUMN_FIELD_TYPES, "COLUMN_FIELD_TYPES")
_check_exhaustive(COLUMN_DISPLAY_NAMES, "COLUMN_DISPLAY_NAMES")


def map_to_field_type(column_type: ColumnType) -> FieldType:
    return COLUMN_FIELD_TYPES[ColumnType(column_type)]


def column_type_display_name(column_type: ColumnType) -> str:
    return COLUMN_DISPLAY_NAMES[ColumnType(column_type)]


class MappingField(BaseModel):
    id: str
    display_name: str
    required: bool = False
    default_match: bool = False
    can_be_used_to_match: bool = False
    display: bool = True
    read_only: bool = False
    type: FieldType | None = None
    options: list[NodeOption] | None = None


def build_mapping_fields(board: Board, *, include_deactivated: bool = True) -> list[MappingField]:
    """Describe every column of a board as a field of the field-mapping UI."""
    fields: list[MappingField] = []

    for column in board.column_schema:
        if column.deactivated and not include_deactivated:
            continue

        field_type = map_to_field_type(column.column_type)
        is_name = column.column_type is ColumnType.NAME
        unsupported = field_type is FieldType.UNSUPPORTED

        options = None
        if column.column_type is ColumnType.STATUS:
            options = [
                NodeOption(name=label.label, value=label.enum_key)
                for label in decode_status_labels(column)
            ]
        elif field_type is FieldType.ENUMERATED:
            logger.error(
                "Column type %s uses the '%s' field type, but does not list any options to choose from",
                column.column_type.value,
                field_type.value,
            )

        fields.append(
            MappingField(
                id=column.column_key,
                display_name=f"{column.label} ({column_type_display_name(column.column_type)})",
                required=is_name,
                default_match=is_name,
                can_be_used_to_match=is_name,
                read_only=unsupported,
                type=None if unsupported else field_type,
                options=options,
            )
        )

    return fields
