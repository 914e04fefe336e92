"""
Type resolution system for cursor columns.

This module maps the type information a driver exposes in its cursor
description to a single SQL type vocabulary (the JDBC type codes, `SqlType`)
and from there to the two destination type sets:

1. `MutationType` for the typed table store (strict, total table)
2. `RecordType` for the semi-structured analytics record (keyed by type name)

Driver type information arrives in several shapes, resolved in this order:

1. `SqlType` members or plain JDBC codes
2. PostgreSQL OIDs (psycopg), looked up in the psycopg types registry
3. Python type objects (pyodbc style descriptions)
4. Type-name strings (SQLite declared types, generic SQL names)

The module focuses solely on type identification, not conversion.
"""
import datetime
import decimal
import logging
import re
import uuid
from enum import Enum, IntEnum
from typing import Any

import numpy as np
from psycopg.postgres import types

logger = logging.getLogger(__name__)


class SqlType(IntEnum):
    """JDBC SQL type codes (java.sql.Types)."""

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    DATALINK = 70
    BOOLEAN = 16
    ROWID = -8
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    NCLOB = 2011
    SQLXML = 2009
    REF_CURSOR = 2012
    TIME_WITH_TIMEZONE = 2013
    TIMESTAMP_WITH_TIMEZONE = 2014


class MutationType(Enum):
    """Value types accepted by the table store's mutation API."""

    STRING = 'string'
    INT64 = 'int64'
    BOOL = 'bool'
    FLOAT64 = 'float64'
    TIMESTAMP = 'timestamp'


class RecordType(Enum):
    """Conversion rules for structured (JSON-compatible) records."""

    ARRAY = 'array'
    DATE = 'date'
    DATETIME = 'datetime'
    TIMESTAMP = 'timestamp'
    CLOB = 'clob'
    RAW = 'raw'


# Every SqlType member is listed; None means the store has no matching type.
MUTATION_TYPES: dict[SqlType, MutationType | None] = {
    SqlType.CHAR: MutationType.STRING,
    SqlType.VARCHAR: MutationType.STRING,
    SqlType.LONGVARCHAR: MutationType.STRING,
    SqlType.BIGINT: MutationType.INT64,
    SqlType.INTEGER: MutationType.INT64,
    SqlType.SMALLINT: MutationType.INT64,
    SqlType.TINYINT: MutationType.INT64,
    SqlType.BOOLEAN: MutationType.BOOL,
    SqlType.BIT: MutationType.BOOL,
    SqlType.DOUBLE: MutationType.FLOAT64,
    SqlType.FLOAT: MutationType.FLOAT64,
    SqlType.REAL: MutationType.FLOAT64,
    SqlType.TIMESTAMP: MutationType.TIMESTAMP,
    SqlType.TIME: MutationType.TIMESTAMP,
    SqlType.NUMERIC: None,
    SqlType.DECIMAL: None,
    SqlType.DATE: None,
    SqlType.BINARY: None,
    SqlType.VARBINARY: None,
    SqlType.LONGVARBINARY: None,
    SqlType.NULL: None,
    SqlType.OTHER: None,
    SqlType.JAVA_OBJECT: None,
    SqlType.DISTINCT: None,
    SqlType.STRUCT: None,
    SqlType.ARRAY: None,
    SqlType.BLOB: None,
    SqlType.CLOB: None,
    SqlType.REF: None,
    SqlType.DATALINK: None,
    SqlType.ROWID: None,
    SqlType.NCHAR: None,
    SqlType.NVARCHAR: None,
    SqlType.LONGNVARCHAR: None,
    SqlType.NCLOB: None,
    SqlType.SQLXML: None,
    SqlType.REF_CURSOR: None,
    SqlType.TIME_WITH_TIMEZONE: None,
    SqlType.TIMESTAMP_WITH_TIMEZONE: None,
    }

# Lower-cased type names with a record rule; every other name is RAW.
RECORD_TYPES: dict[str, RecordType] = {
    'date': RecordType.DATE,
    'datetime': RecordType.DATETIME,
    'timestamp': RecordType.TIMESTAMP,
    'timestamptz': RecordType.TIMESTAMP,
    'timestamp with time zone': RecordType.TIMESTAMP,
    'timestamp without time zone': RecordType.TIMESTAMP,
    'clob': RecordType.CLOB,
    'nclob': RecordType.CLOB,
    }


def mutation_type_for(type_code: Any) -> MutationType | None:
    """Return the mutation type for a SQL type code, None when unsupported.

    >>> mutation_type_for(SqlType.VARCHAR)
    <MutationType.STRING: 'string'>
    >>> mutation_type_for(-5)
    <MutationType.INT64: 'int64'>
    >>> mutation_type_for(91) is None
    True
    >>> mutation_type_for(424242) is None
    True
    """
    try:
        sql_type = SqlType(type_code)
    except ValueError:
        return None
    return MUTATION_TYPES[sql_type]


def base_type_name(type_name: str | None) -> str:
    """Lower-case a declared type name and drop any size or precision.

    >>> base_type_name('TIMESTAMP(6)')
    'timestamp'
    >>> base_type_name('Timestamp(3) With Time Zone')
    'timestamp with time zone'
    >>> base_type_name(None)
    ''
    """
    name = re.sub(r'\([^)]*\)', ' ', type_name or '')
    return ' '.join(name.lower().split())


def record_type_for(type_name: str | None, is_array: bool = False) -> RecordType:
    """Return the record rule for a type name.

    Array columns are recognized before the name lookup.

    >>> record_type_for('DATETIME')
    <RecordType.DATETIME: 'datetime'>
    >>> record_type_for('int4', is_array=True)
    <RecordType.ARRAY: 'array'>
    >>> record_type_for('DATETIME(3)')
    <RecordType.DATETIME: 'datetime'>
    >>> record_type_for('money')
    <RecordType.RAW: 'raw'>
    """
    if is_array:
        return RecordType.ARRAY
    return RECORD_TYPES.get(base_type_name(type_name), RecordType.RAW)


oid = lambda x: types.get(x).oid

postgres_types: dict[int, SqlType] = {}
for v in [oid('varchar'), oid('name'), oid('text')]:
    postgres_types[v] = SqlType.VARCHAR
postgres_types[oid('bpchar')] = SqlType.CHAR
postgres_types[oid('int2')] = SqlType.SMALLINT
postgres_types[oid('int4')] = SqlType.INTEGER
for v in [oid('int8'), oid('oid')]:
    postgres_types[v] = SqlType.BIGINT
postgres_types[oid('float4')] = SqlType.REAL
postgres_types[oid('float8')] = SqlType.DOUBLE
postgres_types[oid('numeric')] = SqlType.NUMERIC
postgres_types[oid('bool')] = SqlType.BOOLEAN
postgres_types[oid('date')] = SqlType.DATE
for v in [oid('time'), oid('timetz')]:
    postgres_types[v] = SqlType.TIME
for v in [oid('timestamp'), oid('timestamptz')]:
    postgres_types[v] = SqlType.TIMESTAMP
postgres_types[oid('bytea')] = SqlType.BINARY
postgres_types[oid('xml')] = SqlType.SQLXML
for v in [oid('json'), oid('jsonb'), oid('uuid')]:
    postgres_types[v] = SqlType.OTHER
for k in tuple(postgres_types):
    postgres_types[types.get(k).array_oid] = SqlType.ARRAY


python_types: dict[type, SqlType] = {
    bool: SqlType.BOOLEAN,
    int: SqlType.BIGINT,
    float: SqlType.DOUBLE,
    decimal.Decimal: SqlType.DECIMAL,
    str: SqlType.VARCHAR,
    datetime.datetime: SqlType.TIMESTAMP,
    datetime.date: SqlType.DATE,
    datetime.time: SqlType.TIME,
    bytes: SqlType.VARBINARY,
    bytearray: SqlType.VARBINARY,
    uuid.UUID: SqlType.OTHER,
    list: SqlType.ARRAY,
    tuple: SqlType.ARRAY,
    np.bool_: SqlType.BOOLEAN,
    np.integer: SqlType.BIGINT,
    np.floating: SqlType.DOUBLE,
    np.datetime64: SqlType.TIMESTAMP,
    np.ndarray: SqlType.ARRAY,
    }


named_types: dict[str, SqlType] = {
    'varchar': SqlType.VARCHAR,
    'character varying': SqlType.VARCHAR,
    'varchar2': SqlType.VARCHAR,
    'nvarchar': SqlType.NVARCHAR,
    'nvarchar2': SqlType.NVARCHAR,
    'char': SqlType.CHAR,
    'character': SqlType.CHAR,
    'bpchar': SqlType.CHAR,
    'nchar': SqlType.NCHAR,
    'text': SqlType.LONGVARCHAR,
    'tinytext': SqlType.LONGVARCHAR,
    'mediumtext': SqlType.LONGVARCHAR,
    'longtext': SqlType.LONGVARCHAR,
    'longvarchar': SqlType.LONGVARCHAR,
    'ntext': SqlType.LONGNVARCHAR,
    'bigint': SqlType.BIGINT,
    'int8': SqlType.BIGINT,
    'integer': SqlType.INTEGER,
    'int': SqlType.INTEGER,
    'int4': SqlType.INTEGER,
    'mediumint': SqlType.INTEGER,
    'smallint': SqlType.SMALLINT,
    'int2': SqlType.SMALLINT,
    'tinyint': SqlType.TINYINT,
    'boolean': SqlType.BOOLEAN,
    'bool': SqlType.BOOLEAN,
    'bit': SqlType.BIT,
    'double': SqlType.DOUBLE,
    'double precision': SqlType.DOUBLE,
    'float8': SqlType.DOUBLE,
    'float': SqlType.FLOAT,
    'real': SqlType.REAL,
    'float4': SqlType.REAL,
    'numeric': SqlType.NUMERIC,
    'decimal': SqlType.DECIMAL,
    'number': SqlType.NUMERIC,
    'date': SqlType.DATE,
    'time': SqlType.TIME,
    'timetz': SqlType.TIME,
    'time without time zone': SqlType.TIME,
    'time with time zone': SqlType.TIME,
    'datetime': SqlType.TIMESTAMP,
    'datetime2': SqlType.TIMESTAMP,
    'timestamp': SqlType.TIMESTAMP,
    'timestamptz': SqlType.TIMESTAMP,
    'timestamp without time zone': SqlType.TIMESTAMP,
    'timestamp with time zone': SqlType.TIMESTAMP,
    'binary': SqlType.BINARY,
    'varbinary': SqlType.VARBINARY,
    'bytea': SqlType.BINARY,
    'blob': SqlType.BLOB,
    'clob': SqlType.CLOB,
    'nclob': SqlType.NCLOB,
    'xml': SqlType.SQLXML,
    'array': SqlType.ARRAY,
    }


def resolve_postgres_type(type_code: int) -> tuple[SqlType | int, str | None]:
    """Resolve a PostgreSQL OID to a SQL type and the registry type name.

    Array OIDs resolve to ARRAY and are named like pg_type does (`_int4`).
    Unknown OIDs are returned unchanged with no name.
    """
    sql_type = postgres_types.get(type_code)
    info = types.get(type_code)
    if info is None:
        logger.debug(f'Unknown PostgreSQL type OID: {type_code}')
        return sql_type or type_code, None
    if sql_type == SqlType.ARRAY or type_code == info.array_oid:
        return SqlType.ARRAY, f'_{info.name}'
    return sql_type or SqlType.OTHER, info.name


def resolve_python_type(python_type: type) -> SqlType | None:
    """Resolve a Python type (or a value's type) by walking its MRO.

    >>> resolve_python_type(bool)
    <SqlType.BOOLEAN: 16>
    >>> resolve_python_type(datetime.datetime)
    <SqlType.TIMESTAMP: 93>
    >>> resolve_python_type(object) is None
    True
    """
    for cls in python_type.__mro__:
        if cls in python_types:
            return python_types[cls]
    return None


def resolve_type_name(type_name: str) -> SqlType | None:
    """Resolve a declared type name such as `VARCHAR(20)` or `int4[]`.

    >>> resolve_type_name('VARCHAR(20)')
    <SqlType.VARCHAR: 12>
    >>> resolve_type_name('int4[]')
    <SqlType.ARRAY: 2003>
    >>> resolve_type_name('geometry') is None
    True
    """
    name = base_type_name(type_name)
    if name.endswith('[]'):
        return SqlType.ARRAY
    return named_types.get(name)


def resolve_type(type_code: Any, dialect: str | None = None) -> tuple[Any, str | None]:
    """
    Central function for type resolution across the codebase.

    Args:
        type_code: Type code from a cursor description item
        dialect: Database dialect ('postgresql', 'sqlite', 'sqlserver', ...)

    Returns
        Tuple of (SqlType, or the raw code when unknown; type name or None)
    """
    if type_code is None:
        return None, None

    if isinstance(type_code, SqlType):
        return type_code, type_code.name.lower()

    if isinstance(type_code, type):
        sql_type = resolve_python_type(type_code)
        if sql_type is None:
            return type_code, type_code.__name__.lower()
        return sql_type, sql_type.name.lower()

    if isinstance(type_code, str):
        return resolve_type_name(type_code) or type_code, type_code

    if isinstance(type_code, int) and dialect == 'postgresql':
        return resolve_postgres_type(type_code)

    try:
        sql_type = SqlType(type_code)
    except ValueError:
        logger.debug(f'Unknown type code {type_code!r} for dialect {dialect}')
        return type_code, None
    return sql_type, sql_type.name.lower()


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
