"""
Row conversion adapters package.

This package provides the following components:

- type_mapping: SQL type resolution and the two destination dispatch tables
- column_info: Column metadata read from cursor descriptions
- structure: Cursor row structure (pairing values with columns, no conversion)
- type_conversion: Value conversion rules for mutations and records

Type conversion principles:
1. Type identification happens once per column, in type_mapping
2. Conversion happens per value, in type_conversion, through tables keyed by
   MutationType and RecordType so every supported type has exactly one rule

The ColumnDescriptor and CursorRow classes do NOT perform conversions - they
only handle metadata and structure.
"""
from rowconvert.adapters.column_info import ColumnDescriptor
from rowconvert.adapters.column_info import columns_from_cursor_description
from rowconvert.adapters.structure import CursorRow, cursor_row
from rowconvert.adapters.type_conversion import MUTATION_RULES, RECORD_RULES
from rowconvert.adapters.type_conversion import mutation_value, record_value
from rowconvert.adapters.type_mapping import MUTATION_TYPES, MutationType
from rowconvert.adapters.type_mapping import RecordType, SqlType, resolve_type
