"""
Type conversion utilities for cursor values.

This module converts one column value read from a cursor into the value a
destination expects (Database → destination direction only). It provides two
independent rule sets, each dispatched through an explicit table keyed by an
enumeration from `rowconvert.adapters.type_mapping`:

1. Mutation rules (`MUTATION_RULES`): strict conversion to the typed table
   store's value types (str, int64, bool, float, aware UTC datetime)
2. Record rules (`RECORD_RULES`): conversion to JSON-compatible values with
   canonical date/time strings, materialized large text and arrays

Driver values arrive in many shapes; besides the standard library types the
rules accept NumPy scalars, pandas timestamps/NA and PyArrow scalars/arrays
as produced by DataFrame or Arrow based readers.

Usage:
    column = ColumnDescriptor('created', SqlType.TIMESTAMP, 'timestamp')

    # Typed table store
    mutation_value(column, value, zone)

    # Analytics record
    record_value(column, value, zone)
"""
import datetime
import logging
import numbers
import warnings
from collections.abc import Callable
from typing import Any

import dateutil.parser
import numpy as np
import pandas as pd
import pyarrow as pa
from dateutil import tz
from rowconvert.adapters.column_info import ColumnDescriptor
from rowconvert.adapters.type_mapping import MutationType, RecordType
from rowconvert.adapters.type_mapping import mutation_type_for, record_type_for
from rowconvert.exceptions import InvalidColumnValue, TruncationWarning
from rowconvert.exceptions import UnsupportedColumnType
from rowconvert.utils import get_time_zone

logger = logging.getLogger(__name__)

# Constants
MAX_CLOB_LENGTH = 2**31 - 1
INT64_MIN = -2**63
INT64_MAX = 2**63 - 1
EPOCH_DATE = datetime.date(1970, 1, 1)
CALENDAR_FIELDS = ('year', 'month', 'day', 'hour', 'minute', 'second', 'microsecond')
TRUE_STRINGS: set[str] = {'1', 'true', 't', 'y', 'yes'}
FALSE_STRINGS: set[str] = {'0', 'false', 'f', 'n', 'no'}

Rule = Callable[[Any, ColumnDescriptor, datetime.tzinfo], Any]


def is_null(value: Any) -> bool:
    """Check whether a cursor value represents SQL NULL.

    >>> is_null(None), is_null(pd.NA), is_null(pd.NaT)
    (True, True, True)
    >>> is_null(np.datetime64('NaT'))
    True
    >>> is_null(float('nan')), is_null('')
    (False, False)
    """
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    if isinstance(value, np.datetime64):
        return bool(np.isnat(value))
    if isinstance(value, pa.Scalar):
        return not value.is_valid
    return False


def _unwrap_scalar(value: Any) -> Any:
    """Convert NumPy and PyArrow scalars to plain Python values.

    >>> _unwrap_scalar(np.int32(42))
    42
    >>> _unwrap_scalar(pa.scalar(1.5))
    1.5
    """
    if isinstance(value, pa.Scalar):
        return value.as_py()
    if isinstance(value, np.datetime64):
        return pd.Timestamp(value).to_pydatetime().replace(tzinfo=tz.UTC)
    if isinstance(value, np.generic):
        return value.item()
    return value


def _parse_temporal(value: Any, column: ColumnDescriptor) -> Any:
    """Bring a date/time value into a datetime-like shape.

    Strings (SQLite stores dates as text) are parsed as ISO 8601; NumPy
    datetime64 values become aware UTC datetimes; pandas timestamps become
    standard datetimes.
    """
    value = _unwrap_scalar(value)
    if isinstance(value, bytes | bytearray):
        value = value.decode()
    if isinstance(value, str):
        try:
            return dateutil.parser.isoparse(value.strip())
        except ValueError as e:
            raise InvalidColumnValue(column.name, value, 'not an ISO 8601 date/time') from e
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def _as_datetime(value: Any, column: ColumnDescriptor) -> datetime.datetime:
    """Read a temporal value as a datetime, placing bare times on 1970-01-01.
    """
    value = _parse_temporal(value, column)
    if isinstance(value, datetime.datetime):
        return value
    if isinstance(value, datetime.date):
        return datetime.datetime.combine(value, datetime.time())
    if isinstance(value, datetime.time):
        return datetime.datetime.combine(EPOCH_DATE, value)
    raise InvalidColumnValue(column.name, value, 'not a date/time value')


def _in_zone(value: datetime.datetime, zone: datetime.tzinfo) -> datetime.datetime:
    """Express a datetime in `zone`; naive values are wall time in that zone.
    """
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=zone)
    return value.astimezone(zone)


def has_calendar_fields(value: Any) -> bool:
    """Whether a value exposes zone-naive calendar fields directly.

    >>> has_calendar_fields(datetime.datetime(2024, 3, 5, 10, 15))
    True
    >>> has_calendar_fields(datetime.datetime(2024, 3, 5, tzinfo=tz.UTC))
    False
    >>> has_calendar_fields(datetime.date(2024, 3, 5))
    False
    """
    return all(hasattr(value, field) for field in CALENDAR_FIELDS) \
        and getattr(value, 'tzinfo', None) is None


# Mutation rules

def to_string(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> str:
    return str(value)


def to_int64(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> int:
    """Parse a value as a 64-bit signed integer.
    """
    value = _unwrap_scalar(value)
    if isinstance(value, int):
        number = int(value)
    else:
        try:
            number = int(str(value).strip())
        except ValueError as e:
            raise InvalidColumnValue(column.name, value, 'not a 64-bit integer') from e
    if not INT64_MIN <= number <= INT64_MAX:
        raise InvalidColumnValue(column.name, value, 'out of 64-bit integer range')
    return number


def to_bool(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> bool:
    """Read a value as a boolean.

    BIT columns may arrive as bytes (b'\\x01'), numbers or flag strings.
    """
    value = _unwrap_scalar(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, bytes | bytearray):
        return int.from_bytes(value, 'big') != 0
    if isinstance(value, numbers.Number):
        return value != 0
    if isinstance(value, str):
        flag = value.strip().lower()
        if flag in TRUE_STRINGS:
            return True
        if flag in FALSE_STRINGS:
            return False
    raise InvalidColumnValue(column.name, value, 'not a boolean')


def to_float64(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> float:
    value = _unwrap_scalar(value)
    if isinstance(value, numbers.Number) and not isinstance(value, complex):
        return float(value)
    raise InvalidColumnValue(column.name, value, 'not a number')


def to_timestamp(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> datetime.datetime:
    """Convert to an aware UTC datetime preserving the instant.
    """
    return _in_zone(_as_datetime(value, column), zone).astimezone(tz.UTC)


MUTATION_RULES: dict[MutationType, Rule] = {
    MutationType.STRING: to_string,
    MutationType.INT64: to_int64,
    MutationType.BOOL: to_bool,
    MutationType.FLOAT64: to_float64,
    MutationType.TIMESTAMP: to_timestamp,
    }


# Record rules

def format_date(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> str:
    """Format the calendar date as yyyy-MM-dd, ignoring any time of day.
    """
    value = _parse_temporal(value, column)
    if not all(hasattr(value, field) for field in ('year', 'month', 'day')):
        raise InvalidColumnValue(column.name, value, 'not a date')
    return f'{value.year:04d}-{value.month:02d}-{value.day:02d}'


def format_datetime(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> str:
    """Format a DATETIME column.

    Zone-naive calendar values format as yyyy-MM-dd HH:mm:ss.SSSSSS; any other
    representation is an instant and formats like a TIMESTAMP.
    """
    value = _parse_temporal(value, column)
    if has_calendar_fields(value):
        return (f'{value.year:04d}-{value.month:02d}-{value.day:02d} '
                f'{value.hour:02d}:{value.minute:02d}:{value.second:02d}.{value.microsecond:06d}')
    return format_timestamp(value, column, zone)


def format_timestamp(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> str:
    """Format as yyyy-MM-dd HH:mm:ss.SSSSSS+HH:MM in `zone`.

    >>> format_timestamp(datetime.datetime(2024, 3, 5, 10, 15, 30, tzinfo=tz.UTC),
    ...                  ColumnDescriptor('ts'), tz.UTC)
    '2024-03-05 10:15:30.000000+00:00'
    """
    value = _in_zone(_as_datetime(value, column), zone)
    return value.isoformat(sep=' ', timespec='microseconds')


def read_clob(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> str:
    """Materialize a large text value, truncating past MAX_CLOB_LENGTH.

    Accepts text, bytes, or a LOB object exposing `size()` and
    `read(offset, amount)` with a 1-based offset (oracledb style).
    """
    if isinstance(value, bytes | bytearray | memoryview):
        value = bytes(value).decode()
    if isinstance(value, str):
        length = len(value)
    elif hasattr(value, 'size') and hasattr(value, 'read'):
        length = value.size()
    else:
        raise InvalidColumnValue(column.name, value, 'not a character large object')

    if length > MAX_CLOB_LENGTH:
        logger.warning(f'The Clob value size {length} in column {column.name} '
                       f'exceeds {MAX_CLOB_LENGTH} and will be truncated.')
        warnings.warn(f'Clob in column {column.name} truncated from {length} characters',
                      TruncationWarning, stacklevel=2)

    if isinstance(value, str):
        return value[:MAX_CLOB_LENGTH]
    return value.read(1, min(length, MAX_CLOB_LENGTH))


def to_list(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> Any:
    """Materialize an array value into a list, one level deep.

    Elements are taken as the driver returned them; nested array metadata is
    not unwrapped.
    """
    if isinstance(value, pa.Array | pa.ChunkedArray):
        return value.to_pylist()
    if isinstance(value, pa.Scalar):
        return value.as_py()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, str | bytes):
        logger.debug(f'Array column {column.name} returned {type(value).__name__}, passing through')
        return value
    return [element for element in value]


def passthrough(value: Any, column: ColumnDescriptor, zone: datetime.tzinfo) -> Any:
    return value


RECORD_RULES: dict[RecordType, Rule] = {
    RecordType.ARRAY: to_list,
    RecordType.DATE: format_date,
    RecordType.DATETIME: format_datetime,
    RecordType.TIMESTAMP: format_timestamp,
    RecordType.CLOB: read_clob,
    RecordType.RAW: passthrough,
    }


def mutation_value(column: ColumnDescriptor, value: Any,
                   zone: datetime.tzinfo | None = None) -> Any:
    """Convert a non-null value for the typed table store.

    Args:
        column: Column the value was read from
        value: Non-null cursor value
        zone: Zone for naive temporal values (process local when None)

    Returns
        str, int, bool, float or aware UTC datetime

    Raises
        UnsupportedColumnType: The column's SQL type has no mutation rule
        InvalidColumnValue: The value cannot be read as the column's type
    """
    mutation_type = mutation_type_for(column.type_code)
    if mutation_type is None:
        raise UnsupportedColumnType(column.name, column.type_code, column.type_name)
    return MUTATION_RULES[mutation_type](value, column, zone or get_time_zone())


def record_value(column: ColumnDescriptor, value: Any,
                 zone: datetime.tzinfo | None = None) -> Any:
    """Convert a value for a structured (JSON-compatible) record.

    Nulls become None; unrecognized types pass through unchanged.
    """
    if is_null(value):
        return None
    record_type = record_type_for(column.type_name, column.is_array)
    return RECORD_RULES[record_type](value, column, zone or get_time_zone())


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
