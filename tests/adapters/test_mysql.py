"""Tests for MySQLAdapter: field type mapping offline, queries against a live server.

Live tests require QUERYDECK_TEST_MYSQL=1 and QUERYDECK_MYSQL_{HOST,PORT,USER,PASSWORD,DATABASE}.
"""

from __future__ import annotations

import asyncio

import pytest

aiomysql = pytest.importorskip("aiomysql")
from pymysql.constants import FIELD_TYPE  # noqa: E402

from querydeck.adapters._base import (  # noqa: E402
    AdapterError,
    ConnectionConfig,
    DatabaseType,
    TypeTag,
)
from querydeck.adapters.mysql import MySQLAdapter, column_for, connect_params  # noqa: E402
from querydeck.paging import apply_pagination  # noqa: E402


def _desc(name, code, size):
    return (name, code, None, size, size, 0, True)


@pytest.mark.parametrize(
    ("code", "size", "tag", "type_name"),
    [
        (FIELD_TYPE.LONG, 11, TypeTag.INTEGER, "LONG"),
        (FIELD_TYPE.LONGLONG, 20, TypeTag.INTEGER, "LONGLONG"),
        (FIELD_TYPE.TINY, 1, TypeTag.BOOLEAN, "BOOLEAN"),
        (FIELD_TYPE.TINY, 4, TypeTag.INTEGER, "TINY"),
        (FIELD_TYPE.NEWDECIMAL, 12, TypeTag.DECIMAL, "NEWDECIMAL"),
        (FIELD_TYPE.DOUBLE, 22, TypeTag.FLOAT, "DOUBLE"),
        (FIELD_TYPE.DATETIME, 19, TypeTag.TEMPORAL, "DATETIME"),
        (FIELD_TYPE.VAR_STRING, 255, TypeTag.TEXT, "VAR_STRING"),
        (FIELD_TYPE.JSON, 0, TypeTag.TEXT, "JSON"),
    ],
)
def test_column_for(code, size, tag, type_name):
    column = column_for(_desc("c", code, size))
    assert column.name == "c"
    assert column.tag == tag
    assert column.type_name == type_name


def test_default_pagination_uses_limit_offset_count():
    sql = apply_pagination(MySQLAdapter().default_pagination(), "SELECT * FROM t;", 20, 10)
    assert sql == "SELECT * FROM (SELECT * FROM t) AS paged LIMIT 20, 10"


def test_query_before_connect():
    with pytest.raises(AdapterError, match="Not connected"):
        asyncio.run(MySQLAdapter().query("SELECT 1"))


def test_connect_params_converted():
    params = {"charset": "utf8mb4", "connect_timeout": "5"}
    assert connect_params(params) == {"charset": "utf8mb4", "connect_timeout": 5}


def test_connect_params_rejects_unknown_and_bad_values():
    with pytest.raises(AdapterError, match="Unsupported MySQL connection parameter: sslmode"):
        connect_params({"sslmode": "require"})
    with pytest.raises(AdapterError, match="connect_timeout"):
        connect_params({"connect_timeout": "soon"})


def test_connect_passes_params(monkeypatch):
    seen = {}

    async def fake_connect(**kwargs):
        seen.update(kwargs)
        return object()

    monkeypatch.setattr(aiomysql, "connect", fake_connect)
    config = ConnectionConfig(
        id="m", db_type=DatabaseType.MYSQL, database="app", params={"charset": "latin1"}
    )
    asyncio.run(MySQLAdapter().connect(config))
    assert seen["charset"] == "latin1"
    assert seen["db"] == "app"
    assert seen["port"] == 3306


@pytest.fixture
def mysql_adapter(mysql_config):
    adapter = MySQLAdapter()
    asyncio.run(adapter.connect(mysql_config))
    yield adapter
    asyncio.run(adapter.close())


@pytest.mark.mysql
def test_query_and_execute(mysql_adapter):
    asyncio.run(mysql_adapter.execute("DROP TABLE IF EXISTS qd_items"))
    asyncio.run(mysql_adapter.execute("CREATE TABLE qd_items (id INT, flag BOOLEAN)"))
    try:
        inserted = asyncio.run(
            mysql_adapter.execute("INSERT INTO qd_items VALUES (1, true), (2, false)")
        )
        assert inserted == 2
        result = asyncio.run(mysql_adapter.query("SELECT id, flag FROM qd_items ORDER BY id"))
        assert [c.tag for c in result.columns] == [TypeTag.INTEGER, TypeTag.BOOLEAN]
        assert result.rows == [(1, 1), (2, 0)]
    finally:
        asyncio.run(mysql_adapter.execute("DROP TABLE qd_items"))
