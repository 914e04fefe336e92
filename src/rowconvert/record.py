"""
Cursor row to structured (JSON-compatible) record conversion.
"""
import logging
from typing import Any

from rowconvert.adapters.column_info import ColumnDescriptor
from rowconvert.adapters.structure import CursorRow
from rowconvert.adapters.type_conversion import record_value
from rowconvert.utils import get_time_zone

logger = logging.getLogger(__name__)


class RowToRecordConverter:
    """Convert cursor rows into ordered field-name -> value records.

    Every column produces exactly one field, nulls included. Values of types
    without a record rule pass through unchanged, since the analytics sink
    accepts semi-structured data.

    Args:
        use_column_alias: Name fields by the column's display alias when it has one
        time_zone: Zone name used for timestamp formatting (process local when None)
    """

    def __init__(self, use_column_alias: bool = False, time_zone: str | None = None) -> None:
        self.use_column_alias = bool(use_column_alias)
        self.zone = get_time_zone(time_zone)

    def field_name(self, column: ColumnDescriptor) -> str:
        """Return the alias under the alias policy when non-empty, else the name.
        """
        if self.use_column_alias and column.alias:
            return column.alias
        return column.name

    def convert(self, row: CursorRow) -> dict[str, Any]:
        return {
            self.field_name(column): record_value(column, value, self.zone)
            for column, value in row
            }

    __call__ = convert

    def __repr__(self) -> str:
        return f'RowToRecordConverter(use_column_alias={self.use_column_alias!r})'
