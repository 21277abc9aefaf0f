"""Per-column value coercion shared by every renderer."""

from __future__ import annotations

import datetime as dt
import json
import math
from decimal import Decimal

from querydeck.adapters._base import QueryResult, TypeTag

Scalar = str | int | float | bool | None


def infer_tag(value: object) -> TypeTag:
    """Pick a TypeTag from a Python value, for columns the driver left UNKNOWN."""
    if isinstance(value, bool):
        return TypeTag.BOOLEAN
    if isinstance(value, int):
        return TypeTag.INTEGER
    if isinstance(value, float):
        return TypeTag.FLOAT
    if isinstance(value, Decimal):
        return TypeTag.DECIMAL
    if isinstance(value, (dt.date, dt.time)):
        return TypeTag.TEMPORAL
    return TypeTag.TEXT


def coerce(value: object, tag: TypeTag) -> Scalar:
    """Normalize one driver value to str, int, float, bool or None."""
    if value is None:
        return None
    if tag is TypeTag.UNKNOWN:
        tag = infer_tag(value)

    if tag is TypeTag.BOOLEAN:
        return bool(value)
    if tag is TypeTag.INTEGER and isinstance(value, (int, Decimal)):
        return int(value)
    if tag is TypeTag.FLOAT and isinstance(value, (int, float, Decimal)):
        number = float(value)
        return number if math.isfinite(number) else None
    if tag is TypeTag.DECIMAL and isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (dt.date, dt.time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    return str(value)


def to_records(result: QueryResult) -> list[list[Scalar]]:
    """Coerce every row of `result`, keeping column order."""
    tags = [c.tag for c in result.columns]
    return [[coerce(v, tag) for v, tag in zip(row, tags, strict=True)] for row in result.rows]


def text_value(value: Scalar) -> str:
    """Plain-text form used by CSV, XML and XLSX grouping."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def sql_literal(value: Scalar, dialect: str = "postgres") -> str:
    """SQL literal: numbers bare, strings (decimals included) quoted with '' doubling.

    Backslashes are doubled so the literal reads back unchanged: MySQL escapes
    inside plain strings, PostgreSQL and DuckDB only inside E'...' strings.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    quoted = value.replace("'", "''")
    if "\\" not in quoted:
        return f"'{quoted}'"
    quoted = quoted.replace("\\", "\\\\")
    if dialect == "mysql":
        return f"'{quoted}'"
    return f"E'{quoted}'"
