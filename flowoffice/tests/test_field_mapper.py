import pytest

from flowoffice.common.enums import ColumnType, FieldType
from flowoffice.common.exceptions import MalformedColumnConfig
from flowoffice.core.boards import navigator
from flowoffice.core.boards.field_mapper import (
    COLUMN_FIELD_TYPES,
    build_mapping_fields,
    column_type_display_name,
    map_to_field_type,
)


@pytest.mark.parametrize("column_type", list(ColumnType))
def test_every_column_type_maps_to_a_field_type(column_type):
    assert isinstance(map_to_field_type(column_type), FieldType)
    assert column_type_display_name(column_type)


def test_mapping_accepts_wire_values():
    assert map_to_field_type("erneut-kontaktieren") is FieldType.DATE_TIME
    assert map_to_field_type("status") is FieldType.ENUMERATED
    assert column_type_display_name("zeitauswertung") == "Time Evaluation"


def test_mapping_table_is_complete():
    assert set(COLUMN_FIELD_TYPES) == set(ColumnType)


def test_mapping_fields_for_sales_board(board_tree):
    fields = {f.id: f for f in build_mapping_fields(navigator.get_board(board_tree, 1))}

    name = fields["name"]
    assert name.display_name == "Project (Name)"
    assert name.required and name.default_match and name.can_be_used_to_match
    assert name.type is FieldType.STRING

    stage = fields["stage"]
    assert stage.type is FieldType.ENUMERATED
    assert [(o.name, o.value) for o in stage.options] == [("Open", "open"), ("Won", "won")]
    assert not stage.required

    assert fields["budget"].type is FieldType.NUMBER
    assert fields["website"].type is FieldType.URL


def test_unsupported_columns_are_read_only(board_tree):
    fields = {f.id: f for f in build_mapping_fields(navigator.get_board(board_tree, 1))}

    margin = fields["margin"]
    assert margin.read_only
    assert margin.type is None
    assert margin.display_name == "Margin (Formula)"


def test_deactivated_columns_can_be_excluded(board_tree):
    board = navigator.get_board(board_tree, 1)

    fields = build_mapping_fields(board, include_deactivated=False)

    assert "margin" not in {f.id for f in fields}


def test_undecodable_status_column_raises(board_tree):
    with pytest.raises(MalformedColumnConfig):
        build_mapping_fields(navigator.get_board(board_tree, 3))
