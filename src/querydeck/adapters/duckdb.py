"""DuckDB adapter: in-process, file or in-memory."""

from __future__ import annotations

import time

import duckdb as _duckdb

from querydeck.adapters._base import (
    AdapterError,
    Column,
    ConnectionConfig,
    DatabaseType,
    QueryResult,
    TypeTag,
)

_OBJECTS_QUERY = """
SELECT NULL AS object_id, table_name AS object_name,
       CASE table_type WHEN 'VIEW' THEN 'view' ELSE 'table' END AS object_type
FROM information_schema.tables
WHERE table_schema = 'main'
ORDER BY object_type, object_name
"""


def tag_for(type_name: str) -> TypeTag:
    """Map a DuckDB description type code to a TypeTag.

    Older releases report coarse DB-API codes (NUMBER, STRING, DATETIME);
    NUMBER covers integers, floats and decimals alike, so it stays UNKNOWN.
    """
    name = type_name.upper()
    if name in ("BOOL", "BOOLEAN"):
        return TypeTag.BOOLEAN
    if name in ("DATE", "TIME", "DATETIME") or name.startswith("TIMESTAMP"):
        return TypeTag.TEMPORAL
    if name.startswith("DECIMAL"):
        return TypeTag.DECIMAL
    if name in ("DOUBLE", "FLOAT", "REAL"):
        return TypeTag.FLOAT
    if name.endswith(("INT", "INTEGER")):
        return TypeTag.INTEGER
    if name in ("STRING", "VARCHAR"):
        return TypeTag.TEXT
    return TypeTag.UNKNOWN


class DuckDBAdapter:
    """DuckDB adapter; needs no server."""

    def __init__(self) -> None:
        self._conn: _duckdb.DuckDBPyConnection | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        path = config.database or ":memory:"
        try:
            self._conn = _duckdb.connect(
                path, config={"custom_user_agent": "querydeck", **config.params}
            )
        except Exception as e:
            raise AdapterError(f"DuckDB connection failed: {e}") from e

    async def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _ensure_conn(self) -> _duckdb.DuckDBPyConnection:
        if self._conn is None:
            raise AdapterError("Not connected. Call connect() first.")
        return self._conn

    async def query(self, sql: str, *, max_rows: int | None = None) -> QueryResult:
        conn = self._ensure_conn()

        t0 = time.monotonic()
        try:
            result = conn.execute(sql)
            if result.description is None:
                columns, rows = [], []
            else:
                columns = [
                    Column(name=d[0], type_name=str(d[1]), tag=tag_for(str(d[1])))
                    for d in result.description
                ]
                rows = result.fetchall() if max_rows is None else result.fetchmany(max_rows)
        except Exception as e:
            raise AdapterError(f"DuckDB execution failed: {e}") from e
        duration_ms = (time.monotonic() - t0) * 1000

        return QueryResult(columns=columns, rows=list(rows), duration_ms=duration_ms)

    async def execute(self, sql: str) -> int:
        conn = self._ensure_conn()
        try:
            result = conn.execute(sql)
            # DML returns a single "Count" column; DDL returns nothing.
            if result.description and result.description[0][0] == "Count":
                row = result.fetchone()
                return int(row[0]) if row else 0
        except Exception as e:
            raise AdapterError(f"DuckDB execution failed: {e}") from e
        return 0

    def objects_query(self) -> str:
        return _OBJECTS_QUERY

    def db_type(self) -> DatabaseType:
        return DatabaseType.DUCKDB

    def dialect(self) -> str:
        return "duckdb"

    def default_pagination(self) -> str:
        return "SELECT * FROM ({0}) AS paged LIMIT {2} OFFSET {1}"
