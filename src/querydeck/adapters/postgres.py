"""PostgreSQL adapter — psycopg (async), types mapped from column OIDs."""

from __future__ import annotations

import time

import psycopg
from psycopg import postgres

from querydeck.adapters._base import (
    AdapterError,
    Column,
    ConnectionConfig,
    DatabaseType,
    QueryResult,
    TypeTag,
)

DEFAULT_PORT = 5432

# Built-in OIDs (pg_type.oid); anything else is rendered as text.
_OID_TAGS: dict[int, TypeTag] = {
    16: TypeTag.BOOLEAN,  # bool
    20: TypeTag.INTEGER,  # int8
    21: TypeTag.INTEGER,  # int2
    23: TypeTag.INTEGER,  # int4
    26: TypeTag.INTEGER,  # oid
    700: TypeTag.FLOAT,  # float4
    701: TypeTag.FLOAT,  # float8
    1700: TypeTag.DECIMAL,  # numeric
    1082: TypeTag.TEMPORAL,  # date
    1083: TypeTag.TEMPORAL,  # time
    1114: TypeTag.TEMPORAL,  # timestamp
    1184: TypeTag.TEMPORAL,  # timestamptz
    1266: TypeTag.TEMPORAL,  # timetz
}

_OBJECTS_QUERY = """
SELECT objects.object_id, objects.object_name, objects.object_type
FROM (
    SELECT pg_class.oid AS object_id, views.viewname AS object_name, 'view' AS object_type
    FROM pg_catalog.pg_views views
    LEFT JOIN pg_class ON pg_class.relname = views.viewname
    WHERE views.schemaname = 'public'
    UNION ALL
    SELECT pg_class.oid AS object_id, tables.tablename AS object_name, 'table' AS object_type
    FROM pg_catalog.pg_tables tables
    LEFT JOIN pg_class ON pg_class.relname = tables.tablename
    WHERE tables.schemaname = 'public'
    UNION ALL
    SELECT functions.oid AS object_id, functions.proname AS object_name, 'function' AS object_type
    FROM pg_catalog.pg_proc functions
    WHERE functions.pronamespace IN (
        SELECT oid FROM pg_catalog.pg_namespace WHERE nspname = 'public'
    )
) objects
ORDER BY objects.object_type, objects.object_name
"""


def column_for(name: str, oid: int) -> Column:
    info = postgres.types.get(oid)
    type_name = info.name if info is not None else str(oid)
    return Column(name=name, type_name=type_name, tag=_OID_TAGS.get(oid, TypeTag.TEXT))


class PostgresAdapter:
    """PostgreSQL adapter using psycopg (async)."""

    def __init__(self) -> None:
        self._conn: psycopg.AsyncConnection | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        try:
            self._conn = await psycopg.AsyncConnection.connect(
                host=config.host,
                port=config.port or DEFAULT_PORT,
                user=config.username or None,
                password=config.password or None,
                dbname=config.database or None,
                autocommit=True,
                **{"application_name": "querydeck", **config.params},
            )
        except Exception as e:
            raise AdapterError(f"PostgreSQL connection failed: {e}") from e

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    def _ensure_conn(self) -> psycopg.AsyncConnection:
        if self._conn is None:
            raise AdapterError("Not connected. Call connect() first.")
        return self._conn

    async def query(self, sql: str, *, max_rows: int | None = None) -> QueryResult:
        conn = self._ensure_conn()

        t0 = time.monotonic()
        try:
            async with conn.cursor() as cur:
                await cur.execute(sql)
                if cur.description is None:
                    columns, rows = [], []
                else:
                    columns = [column_for(d.name, d.type_code) for d in cur.description]
                    if max_rows is None:
                        rows = await cur.fetchall()
                    else:
                        rows = await cur.fetchmany(max_rows)
        except Exception as e:
            raise AdapterError(f"PostgreSQL execution failed: {e}") from e
        duration_ms = (time.monotonic() - t0) * 1000

        return QueryResult(columns=columns, rows=[tuple(r) for r in rows], duration_ms=duration_ms)

    async def execute(self, sql: str) -> int:
        conn = self._ensure_conn()
        try:
            async with conn.cursor() as cur:
                await cur.execute(sql)
                return max(cur.rowcount, 0)
        except Exception as e:
            raise AdapterError(f"PostgreSQL execution failed: {e}") from e

    def objects_query(self) -> str:
        return _OBJECTS_QUERY

    def db_type(self) -> DatabaseType:
        return DatabaseType.POSTGRES

    def dialect(self) -> str:
        return "postgres"

    def default_pagination(self) -> str:
        return "SELECT * FROM ({0}) AS paged OFFSET {1} LIMIT {2}"
