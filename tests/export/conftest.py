"""Export test fixtures."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from querydeck.adapters._base import Column, QueryResult, TypeTag


@pytest.fixture
def items():
    """Two rows covering every column category."""
    return QueryResult(
        columns=[
            Column("id", "int4", TypeTag.INTEGER),
            Column("name", "text", TypeTag.TEXT),
            Column("price", "numeric", TypeTag.DECIMAL),
            Column("ratio", "float8", TypeTag.FLOAT),
            Column("active", "bool", TypeTag.BOOLEAN),
            Column("created", "date", TypeTag.TEMPORAL),
        ],
        rows=[
            (1, "Widget, large", Decimal("9.90"), 0.5, True, dt.date(2024, 1, 2)),
            (2, 'say "hi"', Decimal("10"), float("nan"), False, None),
        ],
    )
