"""Test lazy adapter registry."""

import pytest

from querydeck.adapters._base import AdapterError, DatabaseAdapter, DatabaseType
from querydeck.adapters._registry import get_adapter


@pytest.mark.parametrize(
    ("db_type", "class_name", "extra"),
    [
        (DatabaseType.POSTGRES, "PostgresAdapter", "postgres"),
        (DatabaseType.MYSQL, "MySQLAdapter", "mysql"),
        (DatabaseType.DUCKDB, "DuckDBAdapter", "duckdb"),
    ],
)
def test_get_adapter(db_type, class_name, extra):
    """Adapter class loads, or the error names the pip extra (driver may be missing)."""
    try:
        cls = get_adapter(db_type)
    except AdapterError as e:
        assert "Missing driver" in str(e)
        assert f"querydeck[{extra}]" in str(e)
    else:
        assert cls.__name__ == class_name
        assert isinstance(cls(), DatabaseAdapter)


def test_missing_driver_has_install_hint(monkeypatch):
    import importlib

    def fail(name):
        raise ModuleNotFoundError(f"No module named {name!r}", name="psycopg")

    monkeypatch.setattr(importlib, "import_module", fail)
    with pytest.raises(AdapterError, match=r"pip install 'querydeck\[postgres\]'"):
        get_adapter(DatabaseType.POSTGRES)
