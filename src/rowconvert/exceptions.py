"""
Conversion-specific exception classes.
"""
from typing import Any


class ConversionError(Exception):
    """Base class for all row conversion errors.
    """


class UnsupportedColumnType(ConversionError):
    """A column's SQL type has no mutation conversion rule.

    Fatal to the row being converted; no partial mutation is returned.
    """

    def __init__(self, column: str, type_code: Any, type_name: str | None = None) -> None:
        self.column = column
        self.type_code = type_code
        self.type_name = type_name
        super().__init__(f'Not supported: {column},{type_code}:{type_name}')


class InvalidColumnValue(ConversionError):
    """A value cannot be read as its column's declared type.
    """

    def __init__(self, column: str, value: Any, reason: str) -> None:
        self.column = column
        self.value = value
        super().__init__(f'Invalid value {value!r} in column {column}: {reason}')


class TruncationWarning(UserWarning):
    """A large text value was truncated to the maximum supported length.
    """
