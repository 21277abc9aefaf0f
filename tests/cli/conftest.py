"""CLI fixtures: an isolated QUERYDECK_HOME with a registered DuckDB connection."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from querydeck.cli import main


@pytest.fixture
def cli_env(tmp_path):
    return {"QUERYDECK_HOME": str(tmp_path / "home"), "QUERYDECK_ACTOR": "tester"}


@pytest.fixture
def invoke(cli_env):
    runner = CliRunner()

    def _invoke(*args: str, **kwargs):
        return runner.invoke(main, list(args), env=cli_env, **kwargs)

    return _invoke


@pytest.fixture
def local_db(invoke, tmp_path):
    """Register connection 'local' backed by a DuckDB file; returns its id."""
    pytest.importorskip("duckdb")
    result = invoke("connect", "add", "local", "duckdb", f"database={tmp_path / 'local.duckdb'}")
    assert result.exit_code == 0, result.output
    return "local"
