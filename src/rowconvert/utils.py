"""Low-level utilities with no internal dependencies.

These helpers work with any DB-API cursor or connection and have no imports
from other rowconvert modules, making them safe to import without circular
dependency concerns.
"""
import datetime
import logging
from typing import Any

from dateutil import tz

logger = logging.getLogger(__name__)

DRIVER_DIALECTS = {
    'psycopg': 'postgresql',
    'psycopg2': 'postgresql',
    'sqlite3': 'sqlite',
    'pyodbc': 'sqlserver',
    }


def get_dialect_name(obj: Any) -> str | None:
    """Get dialect name for a database cursor or connection.

    Objects carrying a non-None `dialect` attribute win; otherwise the
    dialect is taken from the module that defines the object's class.
    Returns None for drivers it does not recognize.
    """
    dialect = getattr(obj, 'dialect', None)
    if dialect is not None:
        if isinstance(dialect, str):
            return dialect.lower()
        return str(dialect.name).lower()

    module = type(obj).__module__.split('.')[0]
    return DRIVER_DIALECTS.get(module)


def get_time_zone(name: str | None = None) -> datetime.tzinfo:
    """Resolve a time zone name, or the process local zone when None.

    >>> get_time_zone('UTC').utcoffset(datetime.datetime(2024, 3, 5))
    datetime.timedelta(0)
    """
    if name is None:
        return tz.tzlocal()
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f'Unknown time zone: {name}')
    return zone


if __name__ == '__main__':
    __import__('doctest').testmod(optionflags=4 | 8 | 32)
