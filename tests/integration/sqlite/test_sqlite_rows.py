"""
Convert rows fetched from SQLite.

SQLite cursors report no type codes, so rows are typed either from the
table's declared column types or from the values themselves.
"""
import datetime
import sqlite3

import pytest
from dateutil import tz
from rowconvert import CursorRow, SqlType, UnsupportedColumnType
from rowconvert import cursor_row, to_mutation, to_record


def fetch_declared(conn, columns):
    rows = conn.execute('SELECT * FROM customers ORDER BY id').fetchall()
    return [CursorRow.from_values(columns, row) for row in rows]


class TestDeclaredTypes:
    """Rows typed by the declared column types"""

    def test_descriptors(self, declared_columns):
        columns = {col.name: col for col in declared_columns('customers')}

        assert columns['id'].type_code == SqlType.INTEGER
        assert columns['name'].type_code == SqlType.LONGVARCHAR
        assert columns['born'].type_code == SqlType.DATE
        assert columns['seen'].type_code == SqlType.TIMESTAMP
        assert columns['seen'].type_name == 'DATETIME'

    def test_record(self, sqlite_conn, declared_columns):
        alice, bob = fetch_declared(sqlite_conn, declared_columns('customers'))

        assert to_record(alice) == {
            'id': 1,
            'name': 'Alice',
            'born': '2024-03-05',
            'seen': '2024-03-05 10:15:30.000000',
            'balance': 10.5,
            'note': None,
        }
        assert to_record(bob)['seen'] == '2000-01-01 00:00:00.250000'

    def test_mutation_rejects_date_column(self, sqlite_conn, declared_columns):
        alice, _ = fetch_declared(sqlite_conn, declared_columns('customers'))

        with pytest.raises(UnsupportedColumnType, match='born'):
            to_mutation(alice, 'customers')

    def test_mutation_with_date_ignored(self, sqlite_conn, declared_columns):
        alice, bob = fetch_declared(sqlite_conn, declared_columns('customers'))

        mutation = to_mutation(alice, 'customers', columns_to_ignore=['born'], time_zone='UTC')

        assert mutation.values == {
            'id': 1,
            'name': 'Alice',
            'seen': datetime.datetime(2024, 3, 5, 10, 15, 30, tzinfo=tz.UTC),
            'balance': 10.5,
        }
        assert to_mutation(bob, 'customers', columns_to_ignore=['born']).values['note'] == 'vip'


class TestInferredTypes:
    """Rows typed from their values through the plain cursor description"""

    def test_cursor_row(self, sqlite_conn):
        cursor = sqlite_conn.execute('SELECT id, name, balance, note FROM customers WHERE id = 1')
        row = cursor_row(cursor, cursor.fetchone())

        assert [col.type_code for col in row.columns] == [
            SqlType.BIGINT, SqlType.VARCHAR, SqlType.DOUBLE, None]

        assert to_mutation(row, 'customers').values == {'id': 1, 'name': 'Alice', 'balance': 10.5}
        assert to_record(row) == {'id': 1, 'name': 'Alice', 'balance': 10.5, 'note': None}

    def test_sqlite_row_factory(self, sqlite_conn):
        sqlite_conn.row_factory = sqlite3.Row
        cursor = sqlite_conn.execute('SELECT name, id FROM customers WHERE id = 2')
        row = cursor_row(cursor, cursor.fetchone())

        assert row['name'] == 'Bob'
        assert to_record(row) == {'name': 'Bob', 'id': 2}

    def test_query_label_is_the_column_name(self, sqlite_conn):
        """Test the cursor label is the column name under either alias policy"""
        cursor = sqlite_conn.execute('SELECT id AS ident, name AS customer FROM customers WHERE id = 1')
        row = cursor_row(cursor, cursor.fetchone())

        assert [col.name for col in row.columns] == ['ident', 'customer']
        assert [col.alias for col in row.columns] == ['', '']
        assert to_record(row, use_column_alias=False) == {'ident': 1, 'customer': 'Alice'}
        assert to_record(row, use_column_alias=True) == {'ident': 1, 'customer': 'Alice'}
        assert to_mutation(row, 'customers').values == {'ident': 1, 'customer': 'Alice'}


class TestSizedDeclaredTypes:
    """Declared types carrying a size or precision"""

    @pytest.fixture
    def events(self, sqlite_conn, declared_columns):
        sqlite_conn.execute('CREATE TABLE events (ts TIMESTAMP(6), dt DATETIME(3), code VARCHAR(8))')
        sqlite_conn.execute("""
        INSERT INTO events (ts, dt, code) VALUES
        ('2024-03-05 10:15:30', '2024-03-05 10:15:30.123', 'A1')
        """)
        columns = declared_columns('events')
        return CursorRow.from_values(columns, sqlite_conn.execute('SELECT * FROM events').fetchone())

    def test_descriptors(self, events):
        assert [col.type_code for col in events.columns] == [
            SqlType.TIMESTAMP, SqlType.TIMESTAMP, SqlType.VARCHAR]
        assert [col.type_name for col in events.columns] == [
            'TIMESTAMP(6)', 'DATETIME(3)', 'VARCHAR(8)']

    def test_record(self, events):
        assert to_record(events, time_zone='UTC') == {
            'ts': '2024-03-05 10:15:30.000000+00:00',
            'dt': '2024-03-05 10:15:30.123000',
            'code': 'A1',
        }

    def test_mutation(self, events):
        assert to_mutation(events, 'events', time_zone='UTC').values == {
            'ts': datetime.datetime(2024, 3, 5, 10, 15, 30, tzinfo=tz.UTC),
            'dt': datetime.datetime(2024, 3, 5, 10, 15, 30, 123000, tzinfo=tz.UTC),
            'code': 'A1',
        }
