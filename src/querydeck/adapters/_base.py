"""The adapter protocol and the dialect-agnostic result shape every renderer consumes."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


class DatabaseType(enum.Enum):
    POSTGRES = "postgres"
    MYSQL = "mysql"
    DUCKDB = "duckdb"


class TypeTag(enum.Enum):
    """Driver-independent column category used by every renderer."""

    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    TEMPORAL = "temporal"
    TEXT = "text"
    UNKNOWN = "unknown"  # Driver gave no usable type; coerce by Python value


@dataclass
class ConnectionConfig:
    id: str
    db_type: DatabaseType
    host: str = "localhost"
    port: int | None = None
    username: str = ""
    password: str = ""
    database: str = ""
    pagination: str | None = None  # {0}=query, {1}=offset, {2}=limit
    use_page: bool = True
    server_id: str | None = None
    params: dict[str, str] = field(default_factory=dict)


@dataclass
class Column:
    name: str
    type_name: str
    tag: TypeTag = TypeTag.UNKNOWN


@dataclass
class QueryResult:
    """Rows of a read statement plus the column metadata to interpret them."""

    columns: list[Column]
    rows: list[tuple]
    duration_ms: float | None = None

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def header(self) -> list[dict[str, str]]:
        return [{"name": c.name, "type": c.type_name} for c in self.columns]

    def slice(self, start: int, length: int) -> QueryResult:
        return QueryResult(
            columns=self.columns,
            rows=self.rows[start : start + length],
            duration_ms=self.duration_ms,
        )


class AdapterError(Exception):
    """Raised by adapters for connection/execution failures."""


@runtime_checkable
class DatabaseAdapter(Protocol):
    async def connect(self, config: ConnectionConfig) -> None: ...
    async def close(self) -> None: ...
    async def query(self, sql: str, *, max_rows: int | None = None) -> QueryResult: ...
    async def execute(self, sql: str) -> int: ...
    def objects_query(self) -> str:
        """Catalog query listing tables, views and functions.

        Columns: object_id, object_name, object_type.
        """
        ...
    def db_type(self) -> DatabaseType: ...
    def dialect(self) -> str: ...
    def default_pagination(self) -> str: ...
