"""
Cursor row conversion for typed table stores and analytics warehouses.

A row read from a database cursor converts to either:
- a Mutation: insert-or-update change record for a strongly typed table store
  (strict, unsupported column types raise UnsupportedColumnType)
- a record: ordered, JSON-compatible dict for an analytics sink
  (permissive, unrecognized types pass through)

Conversions can be called either as:
- Module functions: rowconvert.to_record(row, use_column_alias=True)
- Converter methods: rowconvert.record_converter(True).convert(row)

Converters hold only fixed configuration and may be shared between threads.
"""
__version__ = '0.1.0'

from collections.abc import Iterable, Mapping
from typing import Any

from rowconvert.adapters import ColumnDescriptor, CursorRow, MutationType
from rowconvert.adapters import RecordType, SqlType, cursor_row
from rowconvert.adapters import columns_from_cursor_description
from rowconvert.config.table_names import TableNameRules
from rowconvert.exceptions import ConversionError, InvalidColumnValue
from rowconvert.exceptions import TruncationWarning, UnsupportedColumnType
from rowconvert.mutation import Mutation, RowToMutationConverter
from rowconvert.options import ConverterOptions
from rowconvert.record import RowToRecordConverter


def mutation_converter(table: str, columns_to_ignore: Iterable[str] | str | None = None,
                       table_name_rules: TableNameRules | Mapping[str, str] | None = None,
                       time_zone: str | None = None) -> RowToMutationConverter:
    """Build a converter from cursor rows to mutations for `table`.
    """
    return RowToMutationConverter(table, columns_to_ignore, table_name_rules, time_zone)


def record_converter(use_column_alias: bool = False,
                     time_zone: str | None = None) -> RowToRecordConverter:
    """Build a converter from cursor rows to structured records.
    """
    return RowToRecordConverter(use_column_alias, time_zone)


def to_mutation(row: CursorRow, table: str, columns_to_ignore: Iterable[str] | str | None = None,
                table_name_rules: TableNameRules | Mapping[str, str] | None = None,
                time_zone: str | None = None) -> Mutation:
    """Convert one cursor row into a mutation for `table`.

    Raises UnsupportedColumnType if any non-null column has no mutation rule.
    """
    return mutation_converter(table, columns_to_ignore, table_name_rules, time_zone).convert(row)


def to_record(row: CursorRow, use_column_alias: bool = False,
              time_zone: str | None = None) -> dict[str, Any]:
    """Convert one cursor row into a structured record.
    """
    return record_converter(use_column_alias, time_zone).convert(row)


__all__ = [
    'mutation_converter',
    'record_converter',
    'to_mutation',
    'to_record',
    'cursor_row',
    'columns_from_cursor_description',
    'ColumnDescriptor',
    'CursorRow',
    'ConverterOptions',
    'Mutation',
    'MutationType',
    'RecordType',
    'RowToMutationConverter',
    'RowToRecordConverter',
    'SqlType',
    'TableNameRules',
    'ConversionError',
    'InvalidColumnValue',
    'TruncationWarning',
    'UnsupportedColumnType',
]
