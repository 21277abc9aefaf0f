"""Adapter test fixtures."""

from __future__ import annotations

import asyncio
import os

import pytest


def _env_config(prefix: str, db_type: str, port: int):
    from querydeck.adapters._base import ConnectionConfig, DatabaseType

    return ConnectionConfig(
        id=f"{db_type}-test",
        db_type=DatabaseType(db_type),
        host=os.environ.get(f"{prefix}_HOST", "localhost"),
        port=int(os.environ.get(f"{prefix}_PORT", port)),
        username=os.environ.get(f"{prefix}_USER", "querydeck"),
        password=os.environ.get(f"{prefix}_PASSWORD", "querydeck_test"),
        database=os.environ.get(f"{prefix}_DATABASE", "querydeck_test"),
    )


@pytest.fixture(scope="session")
def pg_config():
    return _env_config("QUERYDECK_POSTGRES", "postgres", 5433)


@pytest.fixture(scope="session")
def mysql_config():
    return _env_config("QUERYDECK_MYSQL", "mysql", 3307)


@pytest.fixture
def postgres_adapter(pg_config):
    """Connected PostgresAdapter, tears down after each test."""
    from querydeck.adapters.postgres import PostgresAdapter

    adapter = PostgresAdapter()
    asyncio.run(adapter.connect(pg_config))
    yield adapter
    asyncio.run(adapter.close())


@pytest.fixture
def duckdb_adapter():
    pytest.importorskip("duckdb")
    from querydeck.adapters._base import ConnectionConfig, DatabaseType
    from querydeck.adapters.duckdb import DuckDBAdapter

    adapter = DuckDBAdapter()
    config = ConnectionConfig(id="test", db_type=DatabaseType.DUCKDB, database=":memory:")
    asyncio.run(adapter.connect(config))
    yield adapter
    asyncio.run(adapter.close())
