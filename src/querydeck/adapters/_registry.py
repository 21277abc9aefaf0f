"""Lazy adapter loading: driver modules are imported only when a dialect is used."""

from __future__ import annotations

import importlib
from typing import NamedTuple

from querydeck.adapters._base import AdapterError, DatabaseAdapter, DatabaseType


class _Driver(NamedTuple):
    module: str
    class_name: str
    extra: str  # pip extra that installs the driver


_DRIVERS: dict[DatabaseType, _Driver] = {
    DatabaseType.POSTGRES: _Driver("querydeck.adapters.postgres", "PostgresAdapter", "postgres"),
    DatabaseType.MYSQL: _Driver("querydeck.adapters.mysql", "MySQLAdapter", "mysql"),
    DatabaseType.DUCKDB: _Driver("querydeck.adapters.duckdb", "DuckDBAdapter", "duckdb"),
}


def get_adapter(db_type: DatabaseType) -> type[DatabaseAdapter]:
    """Adapter class for `db_type`.

    A missing driver package surfaces as AdapterError naming the extra to install.
    """
    driver = _DRIVERS.get(db_type)
    if driver is None:
        raise AdapterError(f"no adapter for {db_type.value}")
    try:
        module = importlib.import_module(driver.module)
    except ImportError as e:
        raise AdapterError(
            f"Missing driver for {db_type.value} ({e.name}). "
            f"Install with: pip install 'querydeck[{driver.extra}]'"
        ) from e
    return getattr(module, driver.class_name)
