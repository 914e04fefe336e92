"""
Tests for cursor row structure - pairing values with columns, no type conversion.
"""
import sqlite3

import pytest
from rowconvert.adapters.column_info import ColumnDescriptor
from rowconvert.adapters.structure import CursorRow, cursor_row, row_values
from rowconvert.adapters.type_mapping import SqlType


@pytest.fixture
def columns():
    return [
        ColumnDescriptor('id', SqlType.BIGINT, 'bigint', position=0),
        ColumnDescriptor('name', SqlType.VARCHAR, 'varchar', position=1),
    ]


def test_row_values_from_tuple(columns):
    """Test sequences are taken positionally"""
    assert row_values(columns, (1, 'a')) == (1, 'a')


def test_row_values_from_mapping(columns):
    """Test mappings are read in column order, not key order"""
    assert row_values(columns, {'name': 'a', 'id': 1}) == (1, 'a')


def test_row_values_from_sqlite_row(columns):
    """Test sqlite3.Row objects are read by column name"""
    cn = sqlite3.connect(':memory:')
    cn.row_factory = sqlite3.Row
    row = cn.execute("SELECT 'a' AS name, 1 AS id").fetchone()
    assert row_values(columns, row) == (1, 'a')
    cn.close()


def test_cursor_row_access(columns):
    """Test positional and named access"""
    row = CursorRow(columns, (7, 'Bob'))

    assert len(row) == 2
    assert row[0] == 7
    assert row['name'] == 'Bob'
    with pytest.raises(KeyError):
        row['missing']
    assert [(col.name, value) for col, value in row] == [('id', 7), ('name', 'Bob')]


def test_cursor_row_length_mismatch(columns):
    """Test rows must carry one value per column"""
    with pytest.raises(ValueError, match='1 values for 2 columns'):
        CursorRow(columns, (1,))


def test_cursor_row_infers_unresolved_types():
    """Test columns without a type code take it from the value"""
    row = CursorRow([ColumnDescriptor('n'), ColumnDescriptor('s'), ColumnDescriptor('x')],
                    (3, 'text', None))

    assert row.columns[0].type_code == SqlType.BIGINT
    assert row.columns[1].type_code == SqlType.VARCHAR
    assert row.columns[2].type_code is None


def test_cursor_row_from_mapping():
    """Test untyped rows built from plain dicts"""
    row = CursorRow.from_mapping({'id': 1, 'flag': True})

    assert [col.name for col in row.columns] == ['id', 'flag']
    assert row.columns[1].type_code == SqlType.BOOLEAN
    assert row.columns[1].position == 1


def test_cursor_row_helper(create_mock_cursor):
    """Test cursor_row pairs a fetched row with its cursor's metadata"""
    cursor = create_mock_cursor('postgresql', [('id', 20), ('name', 25)])

    row = cursor_row(cursor, (1, 'x'))

    assert row.columns[0].type_name == 'int8'
    assert row.columns[1].type_code == SqlType.VARCHAR
    assert row.values == (1, 'x')
    assert repr(row) == "CursorRow(id=1, name='x')"
