"""
Cursor row to table-store mutation conversion.
"""
import datetime
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from rowconvert.adapters.structure import CursorRow
from rowconvert.adapters.type_conversion import is_null, mutation_value
from rowconvert.config.table_names import TableNameRules
from rowconvert.utils import get_time_zone

logger = logging.getLogger(__name__)

MutationValue = str | int | bool | float | datetime.datetime


def ignore_set(columns: Iterable[str] | str | None) -> frozenset[str]:
    """Normalize column names to ignore into a frozenset.

    A string is one comma separated list of names, never a sequence of
    characters.

    >>> sorted(ignore_set('secret, internal_id,,'))
    ['internal_id', 'secret']
    >>> ignore_set('id')
    frozenset({'id'})
    >>> ignore_set(None)
    frozenset()
    """
    if isinstance(columns, str):
        columns = columns.split(',')
        return frozenset(name.strip() for name in columns if name.strip())
    return frozenset(columns or ())


@dataclass(frozen=True)
class Mutation:
    """Insert-or-update change record for one destination row.

    Never holds ignored columns or None values: nulls are omitted, not
    encoded.
    """

    table: str
    values: dict[str, MutationValue] = field(default_factory=dict)
    operation: str = 'insert_or_update'

    @property
    def columns(self) -> tuple[str, ...]:
        return tuple(self.values)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.
        """
        return {'table': self.table, 'operation': self.operation, 'values': dict(self.values)}

    def write_args(self) -> tuple[str, tuple[str, ...], list[tuple]]:
        """Return (table, columns, [values]) as taken by batch insert_or_update APIs.
        """
        return self.table, self.columns, [tuple(self.values.values())]


class RowToMutationConverter:
    """Convert cursor rows into insert-or-update mutations for one table.

    Stateless after construction and safe to share between threads: every
    call reads only the row it is given and the fixed configuration.

    Args:
        table: Physical source table name; normalized through the rules
        columns_to_ignore: Column names never written to the mutation, or a
            comma separated string of them
        table_name_rules: Prefix-to-canonical table name rules
        time_zone: Zone name for naive temporal values (process local when None)
    """

    def __init__(self, table: str,
                 columns_to_ignore: Iterable[str] | str | None = None,
                 table_name_rules: TableNameRules | Mapping[str, str] | None = None,
                 time_zone: str | None = None) -> None:
        self.table = TableNameRules.coerce(table_name_rules).normalize(table)
        self.columns_to_ignore = ignore_set(columns_to_ignore)
        self.zone = get_time_zone(time_zone)
        logger.debug(f'Mutation converter for table {self.table} '
                     f'ignoring {sorted(self.columns_to_ignore)}')

    def convert(self, row: CursorRow) -> Mutation:
        """Convert one row; any unsupported column type fails the whole row.

        Raises
            UnsupportedColumnType: A non-null, non-ignored column has no rule
            InvalidColumnValue: A value cannot be read as its column's type
        """
        values = {}
        for column, value in row:
            if is_null(value) or column.name in self.columns_to_ignore:
                continue
            values[column.name] = mutation_value(column, value, self.zone)
        return Mutation(self.table, values)

    __call__ = convert

    def __repr__(self) -> str:
        return f'RowToMutationConverter(table={self.table!r})'


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
