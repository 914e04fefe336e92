from collections.abc import Mapping
from dataclasses import dataclass, field

from rowconvert.config.table_names import TableNameRules
from rowconvert.mutation import RowToMutationConverter, ignore_set
from rowconvert.record import RowToRecordConverter
from rowconvert.utils import get_time_zone

__all__ = ['ConverterOptions']


@dataclass
class ConverterOptions:
    """Options

    Supplied by the pipeline driver, one instance per job:
    - use_column_alias: Name record fields by column alias (default: False)
    - columns_to_ignore: Column names left out of mutations (iterable or comma separated string)
    - table_name_rules: Prefix -> canonical destination table name
    - time_zone: Zone name for temporal values (default: process local zone)
    """
    use_column_alias: bool = False
    columns_to_ignore: frozenset[str] = field(default_factory=frozenset)
    table_name_rules: Mapping[str, str] | TableNameRules | None = None
    time_zone: str | None = None

    def __post_init__(self):
        self.columns_to_ignore = ignore_set(self.columns_to_ignore)
        self.table_name_rules = TableNameRules.coerce(self.table_name_rules)
        get_time_zone(self.time_zone)

    def mutation_converter(self, table: str) -> RowToMutationConverter:
        """Build a mutation converter for one source table.
        """
        return RowToMutationConverter(
            table,
            columns_to_ignore=self.columns_to_ignore,
            table_name_rules=self.table_name_rules,
            time_zone=self.time_zone)

    def record_converter(self) -> RowToRecordConverter:
        """Build a record converter.
        """
        return RowToRecordConverter(
            use_column_alias=self.use_column_alias,
            time_zone=self.time_zone)
