"""Shared fixtures and service markers."""

from __future__ import annotations

import os

import pytest

from querydeck.config import Settings

_SERVICES = {
    "postgres": "QUERYDECK_TEST_POSTGRES",
    "mysql": "QUERYDECK_TEST_MYSQL",
}


def pytest_configure(config):
    config.addinivalue_line("markers", "postgres: requires a running PostgreSQL server")
    config.addinivalue_line("markers", "mysql: requires a running MySQL/MariaDB server")


def pytest_collection_modifyitems(config, items):
    for marker, env_var in _SERVICES.items():
        if os.environ.get(env_var):
            continue
        skip = pytest.mark.skip(reason=f"{marker} not available (set {env_var}=1)")
        for item in items:
            if marker in item.keywords:
                item.add_marker(skip)


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in a temporary QUERYDECK_HOME."""
    return Settings(home=tmp_path / "home", actor="tester")
