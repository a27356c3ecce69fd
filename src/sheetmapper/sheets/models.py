"""Data models and error types for Google Sheets operations."""

from typing import Optional

from pydantic import BaseModel, Field


def index_to_col_letter(index: int) -> str:
    """Convert 0-based index to column letter(s)."""
    result = ""
    index += 1
    while index > 0:
        index -= 1
        result = chr(ord("A") + (index % 26)) + result
        index //= 26
    return result


def quote_sheet_title(title: str) -> str:
    """Quote a sheet title for use in A1 notation."""
    return "'" + title.replace("'", "''") + "'"


class SheetsError(Exception):
    """Base exception for spreadsheet lookup and range failures."""

    pass


class WorkbookNotFoundError(SheetsError):
    """Exception raised when a spreadsheet cannot be resolved by id."""

    def __init__(self, spreadsheet_id: str):
        self.spreadsheet_id = spreadsheet_id
        super().__init__(f"Spreadsheet not found: {spreadsheet_id}")


class SheetNotFoundError(SheetsError):
    """Exception raised when a sheet name does not exist in a spreadsheet."""

    def __init__(self, spreadsheet_id: str, sheet_name: str):
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        super().__init__(f"Sheet '{sheet_name}' not found in spreadsheet {spreadsheet_id}")


class RangeDimensionError(SheetsError, ValueError):
    """Exception raised when a range or value grid has invalid dimensions."""

    pass


class GridRange(BaseModel):
    """A rectangular block of cells on one sheet, 1-based like the Sheets UI."""

    sheet_title: str
    row: int = Field(ge=1)
    column: int = Field(ge=1)
    num_rows: int = Field(ge=1)
    num_columns: int = Field(ge=1)

    @property
    def last_row(self) -> int:
        return self.row + self.num_rows - 1

    @property
    def last_column(self) -> int:
        return self.column + self.num_columns - 1

    @property
    def a1_notation(self) -> str:
        """Render the range in A1 notation, e.g. 'Sheet1'!A1:C10."""
        start = f"{index_to_col_letter(self.column - 1)}{self.row}"
        end = f"{index_to_col_letter(self.last_column - 1)}{self.last_row}"
        return f"{quote_sheet_title(self.sheet_title)}!{start}:{end}"

    def check_values(self, values: list[list]) -> None:
        """Raise RangeDimensionError unless values exactly fill this range."""
        if len(values) != self.num_rows:
            raise RangeDimensionError(
                f"Range {self.a1_notation} has {self.num_rows} rows, got {len(values)}"
            )
        for offset, row in enumerate(values):
            if len(row) != self.num_columns:
                raise RangeDimensionError(
                    f"Range {self.a1_notation} has {self.num_columns} columns, "
                    f"row {self.row + offset} has {len(row)}"
                )


class SheetProperties(BaseModel):
    """Basic properties of a sheet (tab) inside a spreadsheet."""

    sheet_id: int
    title: str
    index: int = 0
    row_count: int = 0
    col_count: int = 0

    @classmethod
    def from_api(cls, properties: dict) -> "SheetProperties":
        grid = properties.get("gridProperties", {})
        return cls(
            sheet_id=properties["sheetId"],
            title=properties["title"],
            index=properties.get("index", 0),
            row_count=grid.get("rowCount", 0),
            col_count=grid.get("columnCount", 0),
        )


class DeveloperMetadata(BaseModel):
    """A developer-attached key/value pair located on a sheet."""

    key: str
    value: Optional[str] = None
    metadata_id: Optional[int] = None
    visibility: str = "DOCUMENT"

    @classmethod
    def from_api(cls, metadata: dict) -> "DeveloperMetadata":
        return cls(
            key=metadata["metadataKey"],
            value=metadata.get("metadataValue"),
            metadata_id=metadata.get("metadataId"),
            visibility=metadata.get("visibility", "DOCUMENT"),
        )
