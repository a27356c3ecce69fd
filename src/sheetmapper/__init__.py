"""Object-relational mapping over Google Sheets worksheets."""

from .codec import (
    raw_decoder,
    decode_values_with,
    decode_range,
    decode_range_with,
    decode_sheet,
    decode_sheet_with,
    decode_sheet_metadata,
    encode_rows,
)
from .operations import append, overwrite, clear_contents, copy_sheet
from .merge import UpsertResult, update_or_insert_by
from .mapper import Mapper, MapperInit, create_mapper

__all__ = [
    "raw_decoder",
    "decode_values_with",
    "decode_range",
    "decode_range_with",
    "decode_sheet",
    "decode_sheet_with",
    "decode_sheet_metadata",
    "encode_rows",
    "append",
    "overwrite",
    "clear_contents",
    "copy_sheet",
    "UpsertResult",
    "update_or_insert_by",
    "Mapper",
    "MapperInit",
    "create_mapper",
]
