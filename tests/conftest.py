"""Pytest configuration and shared fixtures."""

from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest

from sheetmapper.config import Settings
from sheetmapper.sheets import DeveloperMetadata, GoogleSheetsClient, Sheet, SheetProperties
from sheetmapper.sheets.client import to_cell_value


class FakeSheet(Sheet):
    """In-memory sheet backed by a list-of-lists grid.

    Every primitive call is recorded in ``calls`` as ``(name, args)``.
    """

    def __init__(self, rows=None, title="Sheet1", sheet_id=0, metadata=None, value_input_option="RAW"):
        super().__init__(
            client=None,
            spreadsheet_id="fake-spreadsheet",
            properties=SheetProperties(sheet_id=sheet_id, title=title),
        )
        self.grid = [list(row) for row in (rows or [])]
        self.metadata = list(metadata or [])
        self.value_input_option = value_input_option
        self.calls = []

    def _row_has_content(self, row):
        return any(cell != "" for cell in row)

    def get_last_row(self):
        for index in range(len(self.grid), 0, -1):
            if self._row_has_content(self.grid[index - 1]):
                return index
        return 0

    def get_last_column(self):
        last = 0
        for row in self.grid:
            for index, cell in enumerate(row, start=1):
                if cell != "":
                    last = max(last, index)
        return last

    def _ensure_size(self, rows, columns):
        while len(self.grid) < rows:
            self.grid.append([])
        for row in self.grid:
            row.extend([""] * (columns - len(row)))

    def get_used_values(self):
        self.calls.append(("get_used_values", ()))
        return self.rows()

    def _store(self, value):
        """Mimic how the API stores a written value for the input option."""
        if self.value_input_option != "USER_ENTERED" or not isinstance(value, str):
            return value
        if value.upper() in ("TRUE", "FALSE"):
            return value.upper() == "TRUE"
        for parse in (int, float):
            try:
                return parse(value)
            except ValueError:
                pass
        return value

    def get_values(self, grid_range):
        self.calls.append(("get_values", (grid_range,)))
        self._ensure_size(grid_range.last_row, grid_range.last_column)
        return [
            list(self.grid[r - 1][grid_range.column - 1 : grid_range.last_column])
            for r in range(grid_range.row, grid_range.last_row + 1)
        ]

    def _write(self, grid_range, values):
        grid_range.check_values(values)
        self._ensure_size(grid_range.last_row, grid_range.last_column)
        for offset, row in enumerate(values):
            for col_offset, value in enumerate(row):
                self.grid[grid_range.row - 1 + offset][grid_range.column - 1 + col_offset] = self._store(to_cell_value(value))

    def set_values(self, grid_range, values):
        self.calls.append(("set_values", (grid_range, values)))
        self._write(grid_range, values)
        return {}

    def batch_set_values(self, updates):
        self.calls.append(("batch_set_values", (updates,)))
        for grid_range, values in updates:
            self._write(grid_range, values)
        return {}

    def clear_content(self, grid_range):
        self.calls.append(("clear_content", (grid_range,)))
        self._ensure_size(grid_range.last_row, grid_range.last_column)
        for r in range(grid_range.row, grid_range.last_row + 1):
            for c in range(grid_range.column, grid_range.last_column + 1):
                self.grid[r - 1][c - 1] = ""

    def insert_rows_after(self, after_position, how_many):
        self.calls.append(("insert_rows_after", (after_position, how_many)))
        for _ in range(how_many):
            self.grid.insert(after_position, [])

    def delete_rows(self, row_position, how_many):
        self.calls.append(("delete_rows", (row_position, how_many)))
        del self.grid[row_position - 1 : row_position - 1 + how_many]

    def get_developer_metadata(self):
        self.calls.append(("get_developer_metadata", ()))
        return self.metadata

    def call_names(self):
        return [name for name, _ in self.calls]

    def rows(self):
        """Used area with trailing blanks trimmed, as the Sheets API returns it."""
        last_row = self.get_last_row()
        last_col = self.get_last_column()
        return [list(row[:last_col]) + [""] * (last_col - len(row)) for row in self.grid[:last_row]]


@pytest.fixture
def fake_sheet():
    """Factory for in-memory sheets."""

    def _make(rows=None, **kwargs):
        return FakeSheet(rows, **kwargs)

    return _make


@pytest.fixture
def metadata_entry():
    def _make(key, value, metadata_id=None):
        return DeveloperMetadata(key=key, value=value, metadata_id=metadata_id)

    return _make


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Create settings with test values."""
    creds_file = tmp_path / "credentials.json"
    token_file = tmp_path / "token.json"
    creds_file.write_text('{"installed": {"client_id": "test"}}')

    return Settings(
        google_credentials_path=creds_file,
        google_token_path=token_file,
        google_service_account_path=None,
        value_input_option="RAW",
        value_render_option="UNFORMATTED_VALUE",
    )


@pytest.fixture
def mock_service() -> MagicMock:
    """Create a mocked Sheets API discovery service."""
    return MagicMock()


@pytest.fixture
def sheets_client(mock_settings, mock_service) -> GoogleSheetsClient:
    """A real client wired to the mocked discovery service."""
    return GoogleSheetsClient(settings=mock_settings, service=mock_service)


@pytest.fixture
def mock_sheets_client() -> Mock:
    """Create a mocked Google Sheets client."""
    return Mock(spec=GoogleSheetsClient)
