"""Repository-style mapper binding one sheet to a record shape."""

import logging
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel

from .codec import Record, decode_sheet, decode_sheet_metadata
from .merge import UpsertResult, update_or_insert_by
from .operations import overwrite
from .sheets import GoogleSheetsClient, Sheet

logger = logging.getLogger(__name__)

Id = Union[str, int]


class MapperInit(BaseModel):
    """Binding of a sheet to its persisted columns and identifier."""

    sheet_id: str  # spreadsheet id, from the URL
    sheet_name: str
    keys: list[str]
    to_id: Callable[[Record], Id]


class Mapper:
    """Reads and writes records of one sheet.

    The sheet is resolved once, at construction. Every operation reads the
    sheet afresh; nothing is cached between calls.
    """

    def __init__(self, init: MapperInit, client: Optional[GoogleSheetsClient] = None):
        self.init = init
        self.client = client or GoogleSheetsClient()
        self.sheet = self.open_sheet(self.client, init.sheet_id, init.sheet_name)

    @staticmethod
    def open_sheet(client: GoogleSheetsClient, sheet_id: str, sheet_name: str) -> Sheet:
        workbook = client.open_by_id(sheet_id)
        sheet = workbook.get_sheet_by_name(sheet_name)
        logger.debug(f"Mapper bound to {sheet_id}/'{sheet_name}'")
        return sheet

    @property
    def keys(self) -> list[str]:
        return self.init.keys

    def read_all(self) -> list[Record]:
        return decode_sheet(self.sheet)

    def find_by_id(self, id: Id) -> Optional[Record]:
        for item in self.read_all():
            if self.init.to_id(item) == id:
                return item
        return None

    def upsert(self, data: list[Record]) -> UpsertResult:
        return update_or_insert_by(self.sheet, self.keys, data, self.init.to_id)

    def delete_by(self, pred: Callable[[Record], bool]) -> int:
        """Rewrite the sheet without the records matching pred.

        Returns the number of records removed.
        """
        records = self.read_all()
        remaining = [item for item in records if not pred(item)]
        overwrite(self.sheet, self.keys, remaining)
        removed = len(records) - len(remaining)
        logger.info(f"Deleted {removed} records from '{self.sheet.title}'")
        return removed

    def metadata(self) -> dict[str, Any]:
        return decode_sheet_metadata(self.sheet)


def create_mapper(
    sheet_id: str,
    sheet_name: str,
    keys: list[str],
    to_id: Callable[[Record], Id],
    client: Optional[GoogleSheetsClient] = None,
) -> Mapper:
    return Mapper(MapperInit(sheet_id=sheet_id, sheet_name=sheet_name, keys=keys, to_id=to_id), client)
