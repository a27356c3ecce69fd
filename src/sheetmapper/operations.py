"""Row-level sheet operations: append, overwrite, clear and copy."""

import logging

from .codec import Record, encode_rows
from .sheets import Sheet, Workbook

logger = logging.getLogger(__name__)


def append(sheet: Sheet, keys: list[str], data: list[Record]) -> None:
    """Write records below the last used row, without a header row."""
    if not data:
        return

    start = sheet.get_last_row() + 1
    grid_range = sheet.get_range(start, 1, len(data), len(keys))
    sheet.set_values(grid_range, encode_rows(keys, data))
    logger.info(f"Appended {len(data)} rows to '{sheet.title}' at row {start}")


def overwrite(sheet: Sheet, header: list[str], data: list[Record]) -> None:
    """Replace the whole used area with a header row and one row per record.

    Blank rows are inserted before the old rows are deleted so the sheet
    never drops to zero rows, which would break ranges that reference it
    (conditional formatting, named ranges).
    """
    last_row = sheet.get_last_row()
    if last_row > 0:
        sheet.insert_rows_after(last_row, len(data) + 1)
        sheet.delete_rows(1, last_row)

    grid_range = sheet.get_range(1, 1, len(data) + 1, len(header))
    values = [list(header)] + encode_rows(header, data)
    sheet.set_values(grid_range, values)
    logger.info(f"Overwrote '{sheet.title}' with {len(data)} rows (replaced {last_row})")


def clear_contents(sheet: Sheet, start_row: int, num_columns: int) -> None:
    """Clear values from start_row to the last row; formatting is kept."""
    if num_columns < 1:
        return

    num_rows = sheet.get_last_row() - (start_row - 1)
    if num_rows < 1:
        return

    sheet.clear_content(sheet.get_range(start_row, 1, num_rows, num_columns))
    logger.info(f"Cleared {num_rows} rows from '{sheet.title}' starting at row {start_row}")


def copy_sheet(src: Sheet, dest: Workbook, new_name: str) -> Sheet:
    copied = src.copy_to(dest)
    copied.set_name(new_name)
    logger.info(f"Copied '{src.title}' to spreadsheet {dest.id} as '{new_name}'")
    return copied
