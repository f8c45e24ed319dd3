"""
Tool catalogue for the Sheets Wizard server.

Each tool has a name, a description, the JSON input schema advertised to MCP
clients, and a pydantic model that turns the raw argument mapping into a typed
record before any handler runs.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sheets_errors import ArgumentValidationError

CREDENTIALS_DESCRIPTION = "JSON string containing OAuth2 credentials"
SPREADSHEET_ID_DESCRIPTION = "ID of the spreadsheet"

CellValue = bool | int | float | str


class ToolArguments(BaseModel):
    """Base for typed tool arguments"""

    model_config = ConfigDict(extra="ignore")

    credentials: str = Field(..., description=CREDENTIALS_DESCRIPTION)


class CreateSheetArgs(ToolArguments):
    title: str = Field(..., description="Title of the new spreadsheet")


class GetDataArgs(ToolArguments):
    spreadsheetId: str = Field(..., description=SPREADSHEET_ID_DESCRIPTION)
    range: str = Field(..., description="A1 notation range (e.g., 'Sheet1!A1:D10')")


class UpdateCellsArgs(ToolArguments):
    spreadsheetId: str = Field(..., description=SPREADSHEET_ID_DESCRIPTION)
    range: str = Field(..., description="A1 notation range (e.g., 'Sheet1!A1:D10')")
    values: list[list[CellValue]] = Field(..., description="2D array of values to update")


class AddFormulaArgs(ToolArguments):
    spreadsheetId: str = Field(..., description=SPREADSHEET_ID_DESCRIPTION)
    range: str = Field(..., description="A1 notation range (e.g., 'Sheet1!A1')")
    formula: str = Field(..., description="Formula to add (e.g., '=SUM(A1:A10)')")


class SheetArguments(ToolArguments):
    """Arguments addressing one sheet of a spreadsheet by its numeric id"""

    spreadsheetId: str = Field(..., description=SPREADSHEET_ID_DESCRIPTION)
    sheetId: int = Field(..., description="ID of the sheet")

    @field_validator("sheetId", mode="before")
    @classmethod
    def _validate_sheet_id(cls, value):
        # booleans and numeric strings are rejected, not coerced
        if isinstance(value, (bool, str)):
            raise ValueError("sheetId must be a number")
        return value


class CreateChartArgs(SheetArguments):
    chartType: str = Field(..., description="Type of chart (COLUMN, LINE, PIE, BAR, etc.)")
    sourceRange: str = Field(..., description="A1 notation range for chart data")


class ExportCsvArgs(SheetArguments):
    pass


def _string(description: str) -> dict:
    return {"type": "string", "description": description}


def _number(description: str) -> dict:
    return {"type": "number", "description": description}


def _object_schema(properties: dict, required: list[str]) -> dict:
    return {
        "type": "object",
        "properties": {**properties, "credentials": _string(CREDENTIALS_DESCRIPTION)},
        "required": [*required, "credentials"],
    }


@dataclass(frozen=True)
class ToolDescriptor:
    """Static description of one tool"""

    name: str
    description: str
    input_schema: dict
    arguments: type[ToolArguments]

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(self.input_schema.get("required", ()))

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


TOOLS: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="create_sheet",
        description="Create a new Google Spreadsheet",
        input_schema=_object_schema(
            {"title": _string("Title of the new spreadsheet")},
            ["title"],
        ),
        arguments=CreateSheetArgs,
    ),
    ToolDescriptor(
        name="get_data",
        description="Get data from a spreadsheet range",
        input_schema=_object_schema(
            {
                "spreadsheetId": _string(SPREADSHEET_ID_DESCRIPTION),
                "range": _string("A1 notation range (e.g., 'Sheet1!A1:D10')"),
            },
            ["spreadsheetId", "range"],
        ),
        arguments=GetDataArgs,
    ),
    ToolDescriptor(
        name="update_cells",
        description="Update cells in a spreadsheet range",
        input_schema=_object_schema(
            {
                "spreadsheetId": _string(SPREADSHEET_ID_DESCRIPTION),
                "range": _string("A1 notation range (e.g., 'Sheet1!A1:D10')"),
                "values": {
                    "type": "array",
                    "description": "2D array of values to update",
                    "items": {
                        "type": "array",
                        "items": {"type": "string"},
                    },
                },
            },
            ["spreadsheetId", "range", "values"],
        ),
        arguments=UpdateCellsArgs,
    ),
    ToolDescriptor(
        name="add_formula",
        description="Add a formula to a specific cell or range",
        input_schema=_object_schema(
            {
                "spreadsheetId": _string(SPREADSHEET_ID_DESCRIPTION),
                "range": _string("A1 notation range (e.g., 'Sheet1!A1')"),
                "formula": _string("Formula to add (e.g., '=SUM(A1:A10)')"),
            },
            ["spreadsheetId", "range", "formula"],
        ),
        arguments=AddFormulaArgs,
    ),
    ToolDescriptor(
        name="create_chart",
        description="Create a chart in the spreadsheet",
        input_schema=_object_schema(
            {
                "spreadsheetId": _string(SPREADSHEET_ID_DESCRIPTION),
                "sheetId": _number("ID of the sheet to add the chart to"),
                "chartType": _string("Type of chart (COLUMN, LINE, PIE, BAR, etc.)"),
                "sourceRange": _string("A1 notation range for chart data"),
            },
            ["spreadsheetId", "sheetId", "chartType", "sourceRange"],
        ),
        arguments=CreateChartArgs,
    ),
    ToolDescriptor(
        name="export_csv",
        description="Export a sheet as CSV format",
        input_schema=_object_schema(
            {
                "spreadsheetId": _string(SPREADSHEET_ID_DESCRIPTION),
                "sheetId": _number("ID of the sheet to export"),
            },
            ["spreadsheetId", "sheetId"],
        ),
        arguments=ExportCsvArgs,
    ),
)


def _format_problem(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
    return f"{location}: {error.get('msg', 'invalid value')}"


class ToolRegistry:
    """Read-only, ordered catalogue of tools"""

    def __init__(self, tools=TOOLS):
        self._tools = tuple(tools)
        self._by_name = {tool.name: tool for tool in self._tools}
        if len(self._by_name) != len(self._tools):
            raise ValueError("Tool names must be unique")

    def list_tools(self) -> tuple[ToolDescriptor, ...]:
        return self._tools

    def get(self, name: str) -> ToolDescriptor | None:
        return self._by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self):
        return iter(self._tools)

    def __len__(self) -> int:
        return len(self._tools)

    def parse_arguments(self, name: str, arguments: Any) -> ToolArguments:
        """Validate a raw argument mapping into the tool's typed record"""
        descriptor = self._by_name[name]
        if arguments is None:
            arguments = {}
        try:
            return descriptor.arguments.model_validate(arguments)
        except ValidationError as e:
            raise ArgumentValidationError(
                name, [_format_problem(error) for error in e.errors()]
            ) from e


registry = ToolRegistry()
