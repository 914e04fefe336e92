"""
Column information abstraction across database backends.
"""
import logging
from dataclasses import dataclass, replace
from typing import Any, Self

from rowconvert.adapters.type_mapping import SqlType, resolve_python_type
from rowconvert.adapters.type_mapping import resolve_type
from rowconvert.utils import get_dialect_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColumnDescriptor:
    """Representation of a cursor column with type information and metadata

    Technical implementation details:
    - `type_code` is a `SqlType` member when the driver's code is known,
      otherwise the raw driver code (kept so error messages can name it)
    - `type_name` is the driver's own name for the type when it has one
      ('timestamptz', 'DATETIME'), else the SqlType name in lower case
    - `alias` is the query's display label, '' when the reader has none
    - `position` is the zero-based column index in the cursor
    """

    name: str
    type_code: Any = None
    type_name: str | None = None
    alias: str = ''
    position: int = 0

    @property
    def is_array(self) -> bool:
        """Whether the column holds SQL arrays.
        """
        return self.type_code == SqlType.ARRAY

    @property
    def is_resolved(self) -> bool:
        return self.type_code is not None

    @classmethod
    def from_cursor_description(cls, description_item: Any, position: int = 0,
                                dialect: str | None = None) -> Self:
        """Create a ColumnDescriptor from a cursor description item.

        Args:
            description_item: One item from cursor.description (a sequence or
                a psycopg `Column`)
            position: Zero-based column index
            dialect: Database dialect used to interpret integer type codes

        Returns
            ColumnDescriptor instance
        """
        if hasattr(description_item, 'type_code'):
            name, type_code = description_item.name, description_item.type_code
        else:
            name = description_item[0]
            type_code = description_item[1] if len(description_item) > 1 else None

        sql_type, type_name = resolve_type(type_code, dialect)
        return cls(name=str(name), type_code=sql_type, type_name=type_name,
                   position=position)

    def with_value_type(self, value: Any) -> Self:
        """Fill in an unresolved type from a runtime value.

        SQLite cursors report no type codes, so the column type is taken from
        the value the row actually carries. Resolved columns and null values
        are returned unchanged.
        """
        if self.is_resolved or value is None:
            return self
        sql_type = resolve_python_type(type(value))
        if sql_type is None:
            logger.debug(f'No SQL type for {type(value).__name__} in column {self.name}')
            return self
        return replace(self, type_code=sql_type, type_name=self.type_name or sql_type.name.lower())

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization.
        """
        return {
            'name': self.name,
            'alias': self.alias,
            'type_code': int(self.type_code) if isinstance(self.type_code, int) else self.type_code,
            'type_name': self.type_name,
            'position': self.position,
            }

    @staticmethod
    def get_names(columns: list[Self]) -> list[str]:
        """Get column names from a list of ColumnDescriptor objects.
        """
        return [col.name for col in columns]


def columns_from_cursor_description(cursor: Any, dialect: str | None = None) -> list[ColumnDescriptor]:
    """Create ColumnDescriptor objects directly from a cursor description.

    Args:
        cursor: Database cursor with a description attribute
        dialect: Database dialect; detected from the cursor when omitted

    Returns
        List of ColumnDescriptor objects
    """
    if cursor.description is None:
        return []

    if dialect is None:
        dialect = get_dialect_name(cursor)

    return [
        ColumnDescriptor.from_cursor_description(desc_item, position, dialect)
        for position, desc_item in enumerate(cursor.description)
        ]
