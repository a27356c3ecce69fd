"""Google Sheets API integration."""

from .client import GoogleSheetsClient, Workbook, Sheet
from .models import (
    GridRange,
    SheetProperties,
    DeveloperMetadata,
    SheetsError,
    WorkbookNotFoundError,
    SheetNotFoundError,
    RangeDimensionError,
)

__all__ = [
    "GoogleSheetsClient",
    "Workbook",
    "Sheet",
    "GridRange",
    "SheetProperties",
    "DeveloperMetadata",
    "SheetsError",
    "WorkbookNotFoundError",
    "SheetNotFoundError",
    "RangeDimensionError",
]
