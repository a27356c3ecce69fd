"""Upsert of record batches against existing sheet rows."""

import logging
from typing import Any, Callable, Hashable

from pydantic import BaseModel, Field

from .codec import Record, decode_sheet, encode_rows
from .operations import append
from .sheets import Sheet

logger = logging.getLogger(__name__)


class UpsertResult(BaseModel):
    """Outcome of an update_or_insert_by call."""

    updated_rows: list[int] = Field(default_factory=list)  # 1-based sheet rows
    appended: int = 0


def dedupe_by(data: list[Record], to_key: Callable[[Record], Hashable]) -> list[Record]:
    """Keep the first record for each key, preserving order."""
    seen: set = set()
    kept = []
    for item in data:
        key = to_key(item)
        if key not in seen:
            seen.add(key)
            kept.append(item)
    return kept


def update_or_insert_by(
    sheet: Sheet,
    header: list[str],
    data: list[Record],
    to_key: Callable[[Record], Any],
    duplicate: bool = False,
) -> UpsertResult:
    """
    Update rows whose key matches an incoming record, append the rest.

    A matched row is rewritten with the existing fields overlaid by the
    incoming ones, so partial records leave other columns untouched. Only the
    first matching row is updated unless duplicate is set.

    Args:
        sheet: Sheet whose first row is the header
        header: Column order used when writing rows
        data: Incoming records; later records sharing a key are dropped
        to_key: Extracts the identifier compared with ==
        duplicate: Update every matching row instead of only the first

    Returns:
        The rows updated in place and the number of records appended
    """
    result = UpsertResult()
    if not data:
        return result

    incoming = dedupe_by(data, to_key)
    existing = decode_sheet(sheet)

    updates = []
    new_records = []
    for upd in incoming:
        current_key = to_key(upd)
        found = False
        for i, prev in enumerate(existing):
            if to_key(prev) != current_key:
                continue
            found = True
            merged = {**prev, **upd}
            row = i + 2
            updates.append((sheet.get_range(row, 1, 1, len(header)), encode_rows(header, [merged])))
            result.updated_rows.append(row)
            if not duplicate:
                break

        if not found:
            new_records.append(upd)

    if updates:
        sheet.batch_set_values(updates)
        logger.info(f"Updated {len(updates)} rows in '{sheet.title}'")

    if new_records:
        append(sheet, header, new_records)
        result.appended = len(new_records)

    return result
