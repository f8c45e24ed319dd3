"""Tests for the tool catalogue and argument validation"""

import pytest

from sheets_errors import ArgumentValidationError
from sheets_tools import (
    TOOLS,
    CreateChartArgs,
    ToolDescriptor,
    ToolRegistry,
    UpdateCellsArgs,
    registry,
)

EXPECTED_REQUIRED = {
    "create_sheet": {"title", "credentials"},
    "get_data": {"spreadsheetId", "range", "credentials"},
    "update_cells": {"spreadsheetId", "range", "values", "credentials"},
    "add_formula": {"spreadsheetId", "range", "formula", "credentials"},
    "create_chart": {"spreadsheetId", "sheetId", "chartType", "sourceRange", "credentials"},
    "export_csv": {"spreadsheetId", "sheetId", "credentials"},
}


def test_catalogue_order_is_stable():
    names = [tool.name for tool in registry.list_tools()]
    assert names == list(EXPECTED_REQUIRED)
    assert registry.list_tools() is registry.list_tools()


@pytest.mark.parametrize("name,required", EXPECTED_REQUIRED.items())
def test_each_tool_listed_once_with_required_fields(name, required):
    matches = [tool for tool in registry.list_tools() if tool.name == name]
    assert len(matches) == 1
    assert set(matches[0].required) == required
    schema = matches[0].input_schema
    assert schema["type"] == "object"
    assert set(schema["properties"]) == required
    for field in schema["properties"].values():
        assert field["description"]


def test_sheet_ids_are_numbers_and_values_is_string_grid():
    chart = registry.get("create_chart").input_schema["properties"]
    assert chart["sheetId"]["type"] == "number"
    values = registry.get("update_cells").input_schema["properties"]["values"]
    assert values["type"] == "array"
    assert values["items"] == {"type": "array", "items": {"type": "string"}}


def test_to_dict_uses_wire_names():
    listed = registry.get("get_data").to_dict()
    assert listed["name"] == "get_data"
    assert listed["description"] == "Get data from a spreadsheet range"
    assert listed["inputSchema"]["required"] == ["spreadsheetId", "range", "credentials"]


def test_lookup_and_membership():
    assert registry.get("nope") is None
    assert "export_csv" in registry
    assert "nope" not in registry
    assert len(registry) == 6


def test_duplicate_names_rejected():
    with pytest.raises(ValueError):
        ToolRegistry([TOOLS[0], TOOLS[0]])


class TestParseArguments:

    def test_returns_typed_record(self):
        args = registry.parse_arguments("create_chart", {
            "spreadsheetId": "abc",
            "sheetId": 7,
            "chartType": "LINE",
            "sourceRange": "A1:B5",
            "credentials": "{}",
        })
        assert isinstance(args, CreateChartArgs)
        assert args.sheetId == 7
        assert args.chartType == "LINE"

    def test_missing_field_is_named(self):
        with pytest.raises(ArgumentValidationError) as exc_info:
            registry.parse_arguments("get_data", {"spreadsheetId": "abc", "credentials": "{}"})
        error = exc_info.value
        assert error.tool_name == "get_data"
        assert str(error).startswith("Invalid arguments for get_data: range: ")

    def test_wrong_type(self):
        with pytest.raises(ArgumentValidationError, match="sheetId"):
            registry.parse_arguments("export_csv", {
                "spreadsheetId": "abc",
                "sheetId": "first",
                "credentials": "{}",
            })

    @pytest.mark.parametrize("tool_name", ["create_chart", "export_csv"])
    @pytest.mark.parametrize("sheet_id", [True, False, "3", 3.5])
    def test_sheet_id_must_be_a_whole_number(self, tool_name, sheet_id):
        with pytest.raises(ArgumentValidationError, match=f"Invalid arguments for {tool_name}: sheetId"):
            registry.parse_arguments(tool_name, {
                "spreadsheetId": "abc",
                "sheetId": sheet_id,
                "chartType": "BAR",
                "sourceRange": "A1:B2",
                "credentials": "{}",
            })

    def test_integral_float_sheet_id(self):
        args = registry.parse_arguments("export_csv", {
            "spreadsheetId": "abc",
            "sheetId": 3.0,
            "credentials": "{}",
        })
        assert args.sheetId == 3
        assert isinstance(args.sheetId, int)

    def test_none_arguments(self):
        with pytest.raises(ArgumentValidationError) as exc_info:
            registry.parse_arguments("create_sheet", None)
        assert len(exc_info.value.problems) == 2

    def test_non_mapping_arguments(self):
        with pytest.raises(ArgumentValidationError, match="arguments"):
            registry.parse_arguments("create_sheet", ["title"])

    def test_extra_fields_ignored(self):
        args = registry.parse_arguments("create_sheet", {
            "title": "Budget",
            "credentials": "{}",
            "unused": True,
        })
        assert args.title == "Budget"

    def test_values_grid_keeps_scalars(self):
        args = registry.parse_arguments("update_cells", {
            "spreadsheetId": "abc",
            "range": "A1:C1",
            "values": [["=SUM(B1:C1)", 2, 3.5]],
            "credentials": "{}",
        })
        assert isinstance(args, UpdateCellsArgs)
        assert args.values == [["=SUM(B1:C1)", 2, 3.5]]

    def test_values_must_be_two_dimensional(self):
        with pytest.raises(ArgumentValidationError, match="values"):
            registry.parse_arguments("update_cells", {
                "spreadsheetId": "abc",
                "range": "A1",
                "values": ["flat"],
                "credentials": "{}",
            })


def test_descriptors_are_frozen():
    with pytest.raises(AttributeError):
        TOOLS[0].name = "renamed"
    assert all(isinstance(tool, ToolDescriptor) for tool in TOOLS)
