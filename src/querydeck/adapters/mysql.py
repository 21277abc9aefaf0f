"""MySQL/MariaDB adapter — aiomysql, types mapped from protocol field codes."""

from __future__ import annotations

import time

import aiomysql
from pymysql.constants import FIELD_TYPE

from querydeck.adapters._base import (
    AdapterError,
    Column,
    ConnectionConfig,
    DatabaseType,
    QueryResult,
    TypeTag,
)

DEFAULT_PORT = 3306

_FIELD_NAMES: dict[int, str] = {}
for _name, _code in vars(FIELD_TYPE).items():
    # First definition wins; CHAR and INTERVAL are later aliases.
    if _name.isupper():
        _FIELD_NAMES.setdefault(_code, _name)

_FIELD_TAGS: dict[int, TypeTag] = {
    FIELD_TYPE.TINY: TypeTag.INTEGER,
    FIELD_TYPE.SHORT: TypeTag.INTEGER,
    FIELD_TYPE.INT24: TypeTag.INTEGER,
    FIELD_TYPE.LONG: TypeTag.INTEGER,
    FIELD_TYPE.LONGLONG: TypeTag.INTEGER,
    FIELD_TYPE.YEAR: TypeTag.INTEGER,
    FIELD_TYPE.FLOAT: TypeTag.FLOAT,
    FIELD_TYPE.DOUBLE: TypeTag.FLOAT,
    FIELD_TYPE.DECIMAL: TypeTag.DECIMAL,
    FIELD_TYPE.NEWDECIMAL: TypeTag.DECIMAL,
    FIELD_TYPE.DATE: TypeTag.TEMPORAL,
    FIELD_TYPE.NEWDATE: TypeTag.TEMPORAL,
    FIELD_TYPE.TIME: TypeTag.TEMPORAL,
    FIELD_TYPE.DATETIME: TypeTag.TEMPORAL,
    FIELD_TYPE.TIMESTAMP: TypeTag.TEMPORAL,
}

_OBJECTS_QUERY = """
SELECT objects.object_id, objects.object_name, objects.object_type
FROM (
    SELECT NULL AS object_id, table_name AS object_name,
           CASE table_type WHEN 'VIEW' THEN 'view' ELSE 'table' END AS object_type
    FROM information_schema.tables
    WHERE table_schema = DATABASE()
    UNION ALL
    SELECT NULL AS object_id, routine_name AS object_name, LOWER(routine_type) AS object_type
    FROM information_schema.routines
    WHERE routine_schema = DATABASE()
) objects
ORDER BY objects.object_type, objects.object_name
"""


# Extra aiomysql.connect() keywords a connection may set, with their value types.
_CONNECT_PARAMS: dict[str, type] = {
    "charset": str,
    "connect_timeout": int,
    "init_command": str,
    "unix_socket": str,
    "sql_mode": str,
}


def connect_params(params: dict[str, str]) -> dict[str, object]:
    """Convert registry params to aiomysql keywords; unknown keys are an error."""
    converted: dict[str, object] = {}
    for key, value in params.items():
        convert = _CONNECT_PARAMS.get(key)
        if convert is None:
            raise AdapterError(f"Unsupported MySQL connection parameter: {key}")
        try:
            converted[key] = convert(value)
        except ValueError as e:
            raise AdapterError(f"Invalid value for MySQL parameter {key}: {value!r}") from e
    return converted


def column_for(description: tuple) -> Column:
    """Build a Column from a DB-API description entry.

    TINYINT(1) is MySQL's BOOLEAN; the driver reports it as TINY with length 1.
    """
    name, type_code, _display, internal_size = description[:4]
    if type_code == FIELD_TYPE.TINY and internal_size == 1:
        return Column(name=name, type_name="BOOLEAN", tag=TypeTag.BOOLEAN)
    return Column(
        name=name,
        type_name=_FIELD_NAMES.get(type_code, str(type_code)),
        tag=_FIELD_TAGS.get(type_code, TypeTag.TEXT),
    )


class MySQLAdapter:
    """MySQL/MariaDB adapter using aiomysql."""

    def __init__(self) -> None:
        self._conn: aiomysql.Connection | None = None

    async def connect(self, config: ConnectionConfig) -> None:
        extra = connect_params(config.params)
        try:
            self._conn = await aiomysql.connect(
                host=config.host,
                port=config.port or DEFAULT_PORT,
                user=config.username,
                password=config.password,
                db=config.database or None,
                autocommit=True,
                **extra,
            )
        except Exception as e:
            raise AdapterError(f"MySQL connection failed: {e}") from e

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.ensure_closed()
            self._conn = None

    def _ensure_conn(self) -> aiomysql.Connection:
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
                    columns = [column_for(d) for d in cur.description]
                    if max_rows is None:
                        rows = await cur.fetchall()
                    else:
                        rows = await cur.fetchmany(max_rows)
        except Exception as e:
            raise AdapterError(f"MySQL execution failed: {e}") from e
        duration_ms = (time.monotonic() - t0) * 1000

        return QueryResult(columns=columns, rows=[tuple(r) for r in rows], duration_ms=duration_ms)

    async def execute(self, sql: str) -> int:
        conn = self._ensure_conn()
        try:
            async with conn.cursor() as cur:
                await cur.execute(sql)
                return max(cur.rowcount, 0)
        except Exception as e:
            raise AdapterError(f"MySQL execution failed: {e}") from e

    def objects_query(self) -> str:
        return _OBJECTS_QUERY

    def db_type(self) -> DatabaseType:
        return DatabaseType.MYSQL

    def dialect(self) -> str:
        return "mysql"

    def default_pagination(self) -> str:
        return "SELECT * FROM ({0}) AS paged LIMIT {1}, {2}"
