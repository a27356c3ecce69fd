"""Google Sheets API client and sheet handles."""

import logging
from datetime import date, datetime
from typing import Any, Optional

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..config import Settings, settings as default_settings
from .models import (
    DeveloperMetadata,
    GridRange,
    RangeDimensionError,
    SheetNotFoundError,
    SheetProperties,
    WorkbookNotFoundError,
    quote_sheet_title,
)

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def to_cell_value(value: Any) -> Any:
    """Convert a record field into a JSON value the Sheets API accepts.

    Dates are sent as ISO strings. Under RAW input they are stored and read
    back as those strings; only USER_ENTERED turns them into date cells.
    """
    if value is None:
        return ""
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class GoogleSheetsClient:
    """Client for interacting with Google Sheets API."""

    def __init__(self, settings: Optional[Settings] = None, service=None):
        self.settings = settings or default_settings
        self._service = service
        self._credentials = None

    def _get_credentials(self):
        """Get service-account credentials, or get/refresh OAuth2 credentials."""
        if self.settings.google_service_account_path:
            return service_account.Credentials.from_service_account_file(
                str(self.settings.google_service_account_path), scopes=SCOPES
            )

        creds = None
        token_path = self.settings.google_token_path

        if token_path.exists():
            creds = Credentials.from_authorized_user_file(str(token_path), SCOPES)

        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                creds.refresh(Request())
            else:
                credentials_path = self.settings.google_credentials_path
                if not credentials_path.exists():
                    raise FileNotFoundError(
                        f"Google credentials file not found at {credentials_path}. "
                        "Please download it from Google Cloud Console."
                    )
                flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), SCOPES)
                creds = flow.run_local_server(port=0)

            # Save credentials for next run
            token_path.parent.mkdir(parents=True, exist_ok=True)
            with open(token_path, "w") as token:
                token.write(creds.to_json())

        return creds

    @property
    def service(self):
        """Get or create the Sheets API service."""
        if self._service is None:
            self._credentials = self._get_credentials()
            self._service = build("sheets", "v4", credentials=self._credentials)
        return self._service

    def open_by_id(self, spreadsheet_id: str) -> "Workbook":
        """Resolve a spreadsheet by id.

        Raises WorkbookNotFoundError on a 404; any other HttpError propagates.
        """
        try:
            result = (
                self.service.spreadsheets()
                .get(spreadsheetId=spreadsheet_id, fields="spreadsheetId,properties.title,sheets.properties")
                .execute()
            )
        except HttpError as e:
            if e.resp.status == 404:
                raise WorkbookNotFoundError(spreadsheet_id) from e
            raise

        logger.debug(f"Opened spreadsheet {spreadsheet_id}")
        return Workbook(
            client=self,
            spreadsheet_id=result["spreadsheetId"],
            title=result.get("properties", {}).get("title", ""),
            sheets=[SheetProperties.from_api(s["properties"]) for s in result.get("sheets", [])],
        )


class Workbook:
    """A resolved spreadsheet and the sheets it contained when opened."""

    def __init__(
        self,
        client: GoogleSheetsClient,
        spreadsheet_id: str,
        title: str,
        sheets: list[SheetProperties],
    ):
        self.client = client
        self.id = spreadsheet_id
        self.title = title
        self._sheets = sheets

    def add_sheet_properties(self, properties: SheetProperties) -> None:
        """Register a sheet created through this handle (e.g. by Sheet.copy_to)."""
        self._sheets.append(properties)

    def sheets(self) -> list["Sheet"]:
        return [Sheet(self.client, self.id, props) for props in self._sheets]

    def get_sheet_by_name(self, name: str) -> "Sheet":
        """Return the sheet titled name, or raise SheetNotFoundError."""
        for props in self._sheets:
            if props.title == name:
                return Sheet(self.client, self.id, props)
        raise SheetNotFoundError(self.id, name)


class Sheet:
    """Handle on one sheet (tab), exposing the primitive range operations."""

    def __init__(self, client: GoogleSheetsClient, spreadsheet_id: str, properties: SheetProperties):
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.properties = properties

    def __repr__(self) -> str:
        return f"Sheet(spreadsheet_id={self.spreadsheet_id!r}, title={self.title!r})"

    @property
    def sheet_id(self) -> int:
        return self.properties.sheet_id

    @property
    def title(self) -> str:
        return self.properties.title

    @property
    def _values(self):
        return self.client.service.spreadsheets().values()

    def _batch_update(self, requests: list[dict]) -> dict:
        return (
            self.client.service.spreadsheets()
            .batchUpdate(spreadsheetId=self.spreadsheet_id, body={"requests": requests})
            .execute()
        )

    def _used_values(self) -> list[list]:
        """Read every value of the sheet; the API trims trailing empty rows and cells."""
        result = (
            self._values.get(
                spreadsheetId=self.spreadsheet_id,
                range=quote_sheet_title(self.title),
                valueRenderOption=self.client.settings.value_render_option,
                dateTimeRenderOption="FORMATTED_STRING",
            )
            .execute()
        )
        return result.get("values", [])

    def get_used_values(self) -> list[list]:
        """Read the used area in one request, padded to a rectangle with ''."""
        rows = self._used_values()
        width = max((len(row) for row in rows), default=0)
        logger.debug(f"Read used area of '{self.title}': {len(rows)}x{width}")
        return [list(row) + [""] * (width - len(row)) for row in rows]

    def get_last_row(self) -> int:
        """Position of the last row that has content, 0 if the sheet is empty."""
        return len(self._used_values())

    def get_last_column(self) -> int:
        """Position of the last column that has content, 0 if the sheet is empty."""
        return max((len(row) for row in self._used_values()), default=0)

    def get_range(self, row: int, column: int, num_rows: int, num_columns: int) -> GridRange:
        if min(row, column, num_rows, num_columns) < 1:
            raise RangeDimensionError(
                f"Invalid range on '{self.title}': row={row}, column={column}, "
                f"num_rows={num_rows}, num_columns={num_columns}"
            )
        return GridRange(
            sheet_title=self.title,
            row=row,
            column=column,
            num_rows=num_rows,
            num_columns=num_columns,
        )

    def get_values(self, grid_range: GridRange) -> list[list]:
        """Read a range as a rectangular grid, padding trimmed cells with ''."""
        result = (
            self._values.get(
                spreadsheetId=self.spreadsheet_id,
                range=grid_range.a1_notation,
                valueRenderOption=self.client.settings.value_render_option,
                dateTimeRenderOption="FORMATTED_STRING",
            )
            .execute()
        )
        rows = result.get("values", [])
        grid = []
        for offset in range(grid_range.num_rows):
            row = list(rows[offset]) if offset < len(rows) else []
            row.extend([""] * (grid_range.num_columns - len(row)))
            grid.append(row[: grid_range.num_columns])
        logger.debug(f"Read {grid_range.a1_notation}")
        return grid

    def set_values(self, grid_range: GridRange, values: list[list]) -> dict:
        """Write values into a range whose dimensions they must match exactly."""
        grid_range.check_values(values)
        return (
            self._values.update(
                spreadsheetId=self.spreadsheet_id,
                range=grid_range.a1_notation,
                valueInputOption=self.client.settings.value_input_option,
                body={"values": [[to_cell_value(v) for v in row] for row in values]},
            )
            .execute()
        )

    def batch_set_values(self, updates: list[tuple[GridRange, list[list]]]) -> dict:
        """Write several ranges in one request."""
        if not updates:
            return {"totalUpdatedCells": 0}

        data = []
        for grid_range, values in updates:
            grid_range.check_values(values)
            data.append(
                {
                    "range": grid_range.a1_notation,
                    "values": [[to_cell_value(v) for v in row] for row in values],
                }
            )

        body = {
            "valueInputOption": self.client.settings.value_input_option,
            "data": data,
        }
        return self._values.batchUpdate(spreadsheetId=self.spreadsheet_id, body=body).execute()

    def clear_content(self, grid_range: GridRange) -> None:
        """Clear values in a range, leaving formatting in place."""
        self._values.clear(
            spreadsheetId=self.spreadsheet_id, range=grid_range.a1_notation, body={}
        ).execute()

    def insert_rows_after(self, after_position: int, how_many: int) -> None:
        self._batch_update(
            [
                {
                    "insertDimension": {
                        "range": {
                            "sheetId": self.sheet_id,
                            "dimension": "ROWS",
                            "startIndex": after_position,
                            "endIndex": after_position + how_many,
                        },
                        "inheritFromBefore": after_position > 0,
                    }
                }
            ]
        )

    def delete_rows(self, row_position: int, how_many: int) -> None:
        self._batch_update(
            [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": self.sheet_id,
                            "dimension": "ROWS",
                            "startIndex": row_position - 1,
                            "endIndex": row_position - 1 + how_many,
                        }
                    }
                }
            ]
        )

    def copy_to(self, workbook: Workbook) -> "Sheet":
        """Copy this sheet into another spreadsheet and return the copy."""
        result = (
            self.client.service.spreadsheets()
            .sheets()
            .copyTo(
                spreadsheetId=self.spreadsheet_id,
                sheetId=self.sheet_id,
                body={"destinationSpreadsheetId": workbook.id},
            )
            .execute()
        )
        properties = SheetProperties.from_api(result)
        workbook.add_sheet_properties(properties)
        return Sheet(workbook.client, workbook.id, properties)

    def set_name(self, name: str) -> "Sheet":
        self._batch_update(
            [
                {
                    "updateSheetProperties": {
                        "properties": {"sheetId": self.sheet_id, "title": name},
                        "fields": "title",
                    }
                }
            ]
        )
        # Mutated in place so the owning Workbook sees the new title
        self.properties.title = name
        return self

    def get_developer_metadata(self) -> list[DeveloperMetadata]:
        """List developer metadata attached directly to this sheet."""
        body = {
            "dataFilters": [
                {
                    "developerMetadataLookup": {
                        "metadataLocation": {"sheetId": self.sheet_id},
                        "locationMatchingStrategy": "EXACT_LOCATION",
                    }
                }
            ]
        }
        result = (
            self.client.service.spreadsheets()
            .developerMetadata()
            .search(spreadsheetId=self.spreadsheet_id, body=body)
            .execute()
        )
        return [
            DeveloperMetadata.from_api(match["developerMetadata"])
            for match in result.get("matchedDeveloperMetadata", [])
        ]
