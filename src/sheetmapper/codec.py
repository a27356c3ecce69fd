"""Row codec: converts header-aligned cell grids to records and back."""

import logging
from typing import Any, Callable, TypeVar

from .sheets import GridRange, Sheet

logger = logging.getLogger(__name__)

T = TypeVar("T")

Record = dict[str, Any]
Decoder = Callable[[list[str], list[Any]], T]


def raw_decoder(keys: list[str], values: list[Any]) -> Record:
    """Pair each header key with the cell at the same position.

    Cells missing from a short row decode to None.
    """
    return {key: values[n] if n < len(values) else None for n, key in enumerate(keys)}


def decode_values_with(values: list[list[Any]], decoder: Decoder[T]) -> list[T]:
    """Decode a grid whose first row holds the keys."""
    if not values:
        return []
    keys = values[0]
    return [decoder(keys, row) for row in values[1:]]


def decode_range_with(sheet: Sheet, grid_range: GridRange, decoder: Decoder[T]) -> list[T]:
    return decode_values_with(sheet.get_values(grid_range), decoder)


def decode_range(sheet: Sheet, grid_range: GridRange) -> list[Record]:
    return decode_range_with(sheet, grid_range, raw_decoder)


def decode_sheet_with(sheet: Sheet, decoder: Decoder[T]) -> list[T]:
    """Decode the used area of a sheet, read in one request.

    An empty sheet gives an empty list.
    """
    values = sheet.get_used_values()
    if not values:
        logger.debug(f"Sheet '{sheet.title}' is empty")
    return decode_values_with(values, decoder)


def decode_sheet(sheet: Sheet) -> list[Record]:
    return decode_sheet_with(sheet, raw_decoder)


def decode_sheet_metadata(sheet: Sheet) -> dict[str, Any]:
    """Fold the sheet's developer metadata into one mapping, last key wins."""
    bag: dict[str, Any] = {}
    for metadata in sheet.get_developer_metadata():
        bag[metadata.key] = metadata.value
    return bag


def encode_rows(keys: list[str], data: list[Record]) -> list[list[Any]]:
    """Lay records out as rows ordered by keys; absent fields become None."""
    return [[entry.get(key) for key in keys] for entry in data]
