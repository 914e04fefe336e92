"""
Tests for the module level conversion functions.
"""
import pytest
import rowconvert
from rowconvert import SqlType, UnsupportedColumnType


def test_to_mutation(mixed_row, fixed_instant):
    mutation = rowconvert.to_mutation(mixed_row, 'customers_01',
                                      columns_to_ignore=['score'],
                                      table_name_rules={'customers': 'customers'})

    assert mutation.table == 'customers'
    assert mutation.values == {'id': 42, 'name': 'Alice', 'active': True,
                               'updated': fixed_instant}


def test_to_mutation_unsupported(make_row):
    row = make_row(('payload', SqlType.BLOB, 'blob', b'\x00'))

    with pytest.raises(UnsupportedColumnType, match='payload'):
        rowconvert.to_mutation(row, 't')


def test_to_record(mixed_row):
    record = rowconvert.to_record(mixed_row, use_column_alias=True, time_zone='UTC')

    assert record['customer_name'] == 'Alice'
    assert record['updated'] == '2024-03-05 10:15:30.000000+00:00'
    assert record['note'] is None


def test_converters_are_reusable(mixed_row):
    to_record = rowconvert.record_converter(time_zone='UTC')
    to_mutation = rowconvert.mutation_converter('customers')

    assert to_record(mixed_row) == to_record(mixed_row)
    assert to_mutation(mixed_row) == to_mutation(mixed_row)


def test_to_mutation_ignore_string(make_row):
    row = make_row(('id', SqlType.BIGINT, 'bigint', 1),
                   ('i', SqlType.BIGINT, 'bigint', 2))

    assert rowconvert.to_mutation(row, 't', columns_to_ignore='id').values == {'i': 2}
    assert rowconvert.mutation_converter('t', columns_to_ignore='id').columns_to_ignore == {'id'}
