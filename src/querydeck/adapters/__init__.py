"""Database adapters, one per supported dialect."""

from querydeck.adapters._base import (
    AdapterError,
    Column,
    ConnectionConfig,
    DatabaseAdapter,
    DatabaseType,
    QueryResult,
    TypeTag,
)

__all__ = [
    "AdapterError",
    "Column",
    "ConnectionConfig",
    "DatabaseAdapter",
    "DatabaseType",
    "QueryResult",
    "TypeTag",
]
