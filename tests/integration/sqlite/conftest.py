"""
Fixtures for SQLite-specific integration tests.
"""
import sqlite3

import pytest
from rowconvert import ColumnDescriptor


@pytest.fixture
def sqlite_conn():
    """Create an in-memory SQLite database with declared column types"""
    conn = sqlite3.connect(':memory:')

    conn.execute("""
    CREATE TABLE customers (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        born DATE,
        seen DATETIME,
        balance REAL,
        note TEXT
    )
    """)
    conn.execute("""
    INSERT INTO customers (id, name, born, seen, balance, note) VALUES
    (1, 'Alice', '2024-03-05', '2024-03-05 10:15:30', 10.5, NULL),
    (2, 'Bob', '1999-12-31', '2000-01-01 00:00:00.250000', 0.0, 'vip')
    """)
    conn.commit()

    yield conn
    conn.close()


@pytest.fixture
def declared_columns(sqlite_conn):
    """Column descriptors built from the table's declared types"""
    def columns(table):
        info = sqlite_conn.execute(f'PRAGMA table_info({table})').fetchall()
        return [ColumnDescriptor.from_cursor_description((name, decltype), cid)
                for cid, name, decltype, *_ in info]
    return columns
