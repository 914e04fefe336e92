"""
Row structure adapters to provide a consistent interface across database backends.

These adapters handle ONLY the structure of cursor rows (pairing values with
column metadata, accessing by name/index). They do NOT perform any type
conversion, which is the job of the converters built on top of them.
"""
from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Self

from rowconvert.adapters.column_info import ColumnDescriptor
from rowconvert.adapters.column_info import columns_from_cursor_description


def row_values(columns: Sequence[ColumnDescriptor], row: Any) -> tuple:
    """Extract values from a fetched row in column order.

    Supports plain sequences, mappings (psycopg `dict_row`) and `sqlite3.Row`
    objects.
    """
    if hasattr(row, 'keys') and callable(row.keys):
        # sqlite3.Row and dicts: look up by name, iterating a Row yields values
        return tuple(row[col.name] for col in columns)
    return tuple(row)


class CursorRow:
    """One fetched row paired with its column metadata.

    Read-only; iterating yields `(ColumnDescriptor, value)` pairs in cursor
    order.
    """

    __slots__ = ('columns', 'values')

    def __init__(self, columns: Sequence[ColumnDescriptor], values: Sequence[Any]) -> None:
        if len(columns) != len(values):
            raise ValueError(
                f'Row has {len(values)} values for {len(columns)} columns')
        self.columns = tuple(col.with_value_type(value) for col, value in zip(columns, values))
        self.values = tuple(values)

    @classmethod
    def from_values(cls, columns: Sequence[ColumnDescriptor], row: Any) -> Self:
        """Build a CursorRow from a fetched row of any supported shape.
        """
        return cls(columns, row_values(columns, row))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Self:
        """Build an untyped CursorRow from a name-to-value mapping.

        Column types are inferred from the values, as for SQLite cursors.
        """
        columns = [ColumnDescriptor(name=name, position=i) for i, name in enumerate(data)]
        return cls(columns, tuple(data.values()))

    def __iter__(self) -> Iterator[tuple[ColumnDescriptor, Any]]:
        return iter(zip(self.columns, self.values))

    def __len__(self) -> int:
        return len(self.columns)

    def __getitem__(self, key: int | str) -> Any:
        """Get a value by position or by column name.
        """
        if isinstance(key, int):
            return self.values[key]
        for col, value in self:
            if col.name == key:
                return value
        raise KeyError(key)

    def __repr__(self) -> str:
        pairs = ', '.join(f'{col.name}={value!r}' for col, value in self)
        return f'CursorRow({pairs})'


def cursor_row(cursor: Any, row: Any, dialect: str | None = None) -> CursorRow:
    """Pair one fetched row with the metadata of the cursor it came from.

    Args:
        cursor: DB-API cursor whose description describes `row`
        row: A row returned by `cursor.fetchone()` or iteration
        dialect: Database dialect; detected from the cursor when omitted

    Returns
        CursorRow instance
    """
    columns = columns_from_cursor_description(cursor, dialect)
    return CursorRow.from_values(columns, row)
