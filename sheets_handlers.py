"""
Operation handlers for the Sheets Wizard tools.

Each handler receives its typed arguments and a Google Sheets v4 service,
issues its remote call(s) and reshapes the response into a JSON-serializable
summary.
"""

from dataclasses import dataclass

from sheets_tools import (
    AddFormulaArgs,
    CreateChartArgs,
    CreateSheetArgs,
    ExportCsvArgs,
    GetDataArgs,
    UpdateCellsArgs,
)

USER_ENTERED = "USER_ENTERED"
DEFAULT_SHEET_TITLE = "Sheet1"
CHART_TITLE = "Chart"


@dataclass(frozen=True)
class ChartWindow:
    """Grid window a chart reads from and the cell it is anchored to.

    Row and column indices are 0-based; end indices are exclusive.
    """

    start_row: int = 0
    end_row: int = 10
    domain_column: int = 0
    series_column: int = 1
    anchor_row: int = 0
    anchor_column: int = 3


# create_chart always charts rows 0-9 of columns A (categories) and B (values);
# the sourceRange argument is not consulted. Pass another window to
# build_chart_request for a different layout.
DEFAULT_CHART_WINDOW = ChartWindow()


def _grid_range(sheet_id: int, window: ChartWindow, column: int) -> dict:
    return {
        "sourceRange": {
            "sources": [
                {
                    "sheetId": sheet_id,
                    "startRowIndex": window.start_row,
                    "endRowIndex": window.end_row,
                    "startColumnIndex": column,
                    "endColumnIndex": column + 1,
                }
            ]
        }
    }


def build_chart_request(sheet_id: int, chart_type: str, window: ChartWindow = DEFAULT_CHART_WINDOW) -> dict:
    """Build the addChart batchUpdate request for a basic chart"""
    return {
        "addChart": {
            "chart": {
                "spec": {
                    "title": CHART_TITLE,
                    "basicChart": {
                        "chartType": chart_type,
                        "legendPosition": "BOTTOM_LEGEND",
                        "axis": [
                            {"position": "BOTTOM_AXIS"},
                            {"position": "LEFT_AXIS"},
                        ],
                        "domains": [
                            {"domain": _grid_range(sheet_id, window, window.domain_column)}
                        ],
                        "series": [
                            {"series": _grid_range(sheet_id, window, window.series_column)}
                        ],
                    },
                },
                "position": {
                    "overlayPosition": {
                        "anchorCell": {
                            "sheetId": sheet_id,
                            "rowIndex": window.anchor_row,
                            "columnIndex": window.anchor_column,
                        }
                    }
                },
            }
        }
    }


def rows_to_csv(values: list) -> str:
    """Join cells with commas and rows with newlines, without quoting"""
    return "\n".join(
        ",".join("" if cell is None else str(cell) for cell in row)
        for row in values
    )


async def create_sheet(args: CreateSheetArgs, service) -> dict:
    """Create a new spreadsheet with the given title"""
    response = service.spreadsheets().create(
        body={"properties": {"title": args.title}}
    ).execute()

    return {
        "spreadsheetId": response.get("spreadsheetId"),
        "spreadsheetUrl": response.get("spreadsheetUrl"),
        "title": args.title,
    }


async def get_data(args: GetDataArgs, service) -> dict:
    """Read the values of a range"""
    response = service.spreadsheets().values().get(
        spreadsheetId=args.spreadsheetId,
        range=args.range,
    ).execute()

    values = response.get("values") or []
    return {
        "range": response.get("range"),
        "values": values,
        "rowCount": len(values),
    }


async def update_cells(args: UpdateCellsArgs, service) -> dict:
    """Write a grid of values, parsed as if typed by a user"""
    response = service.spreadsheets().values().update(
        spreadsheetId=args.spreadsheetId,
        range=args.range,
        valueInputOption=USER_ENTERED,
        body={"values": args.values},
    ).execute()

    return {
        "updatedRange": response.get("updatedRange"),
        "updatedRows": response.get("updatedRows"),
        "updatedColumns": response.get("updatedColumns"),
        "updatedCells": response.get("updatedCells"),
    }


async def add_formula(args: AddFormulaArgs, service) -> dict:
    """Write a single formula at the anchor cell of a range"""
    response = service.spreadsheets().values().update(
        spreadsheetId=args.spreadsheetId,
        range=args.range,
        valueInputOption=USER_ENTERED,
        body={"values": [[args.formula]]},
    ).execute()

    return {
        "formula": args.formula,
        "range": response.get("updatedRange"),
        "success": True,
    }


async def create_chart(args: CreateChartArgs, service, window: ChartWindow = DEFAULT_CHART_WINDOW) -> dict:
    """Add a basic chart over the fixed chart window of a sheet"""
    service.spreadsheets().batchUpdate(
        spreadsheetId=args.spreadsheetId,
        body={"requests": [build_chart_request(args.sheetId, args.chartType, window)]},
    ).execute()

    return {
        "chartType": args.chartType,
        "success": True,
        "spreadsheetId": args.spreadsheetId,
    }


def find_sheet_title(spreadsheet: dict, sheet_id: int) -> str:
    """Title of the sheet with the given id, or Sheet1 when it is not found"""
    for sheet in spreadsheet.get("sheets") or []:
        properties = sheet.get("properties") or {}
        if properties.get("sheetId") == sheet_id:
            return properties.get("title") or DEFAULT_SHEET_TITLE
    return DEFAULT_SHEET_TITLE


async def export_csv(args: ExportCsvArgs, service) -> dict:
    """Export a whole sheet as comma separated text"""
    spreadsheet = service.spreadsheets().get(
        spreadsheetId=args.spreadsheetId
    ).execute()
    sheet_title = find_sheet_title(spreadsheet, args.sheetId)

    response = service.spreadsheets().values().get(
        spreadsheetId=args.spreadsheetId,
        range=sheet_title,
    ).execute()

    values = response.get("values") or []
    return {
        "csv": rows_to_csv(values),
        "rowCount": len(values),
        "sheetTitle": sheet_title,
    }


HANDLERS = {
    "create_sheet": create_sheet,
    "get_data": get_data,
    "update_cells": update_cells,
    "add_formula": add_formula,
    "create_chart": create_chart,
    "export_csv": export_csv,
}
