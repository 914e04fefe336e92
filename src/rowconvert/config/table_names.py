"""
Configuration for destination table-name normalization.

Physical tables are often sharded or suffixed (`orders_0042`,
`orders_2024_03`) while the destination store holds one logical table. Rules
map a physical-name prefix to the canonical logical name.
"""
import json
import logging
import pathlib
from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_LOCATIONS = (
    '~/.config/rowconvert/table_names.json',
    '/etc/rowconvert/table_names.json',
    'table_names.json',  # Current directory
    )


class TableNameRules:
    """Prefix-to-canonical-name table applied to destination table names"""

    def __init__(self, rules: Mapping[str, str] | None = None, config_file=None):
        self._rules: dict[str, str] = {}

        if rules is not None:
            for prefix, canonical in rules.items():
                self.add_rule(prefix, canonical)
        elif config_file:
            self.load_config(config_file)
        else:
            # Try default locations
            for location in DEFAULT_LOCATIONS:
                path = pathlib.Path(location).expanduser()
                if path.exists():
                    self.load_config(path)
                    break

    @classmethod
    def coerce(cls, rules: 'TableNameRules | Mapping[str, str] | None') -> 'TableNameRules':
        """Accept a TableNameRules instance, a plain mapping, or None (no rules).
        """
        if isinstance(rules, TableNameRules):
            return rules
        return cls(rules or {})

    def load_config(self, config_file):
        """Load rules from a JSON object of prefix -> canonical name"""
        with pathlib.Path(config_file).open() as f:
            config = json.load(f)

        if not isinstance(config, dict):
            raise ValueError(f'Table name rules in {config_file} must be a JSON object')

        for prefix, canonical in config.items():
            self.add_rule(prefix, canonical)

        logger.info(f'Loaded {len(config)} table name rules from {config_file}')

    def add_rule(self, prefix: str, canonical: str) -> None:
        """Add a prefix rule"""
        if not prefix:
            raise ValueError('Table name prefix must not be empty')
        self._rules[prefix] = canonical

    @property
    def rules(self) -> dict[str, str]:
        return dict(self._rules)

    def normalize(self, table: str) -> str:
        """Return the canonical name for a physical table name.

        The longest matching prefix wins; names matching no prefix are
        returned unchanged.

        >>> rules = TableNameRules({'orders': 'orders', 'orders_archive': 'archive'})
        >>> rules.normalize('orders_0042')
        'orders'
        >>> rules.normalize('orders_archive_7')
        'archive'
        >>> rules.normalize('customers')
        'customers'
        """
        matches = [prefix for prefix in self._rules if table.startswith(prefix)]
        if not matches:
            return table
        canonical = self._rules[max(matches, key=len)]
        logger.debug(f'Normalized table name {table} to {canonical}')
        return canonical

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f'TableNameRules({self._rules!r})'


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
