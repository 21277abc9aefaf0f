"""Generic pagination of read statements through per-dialect templates."""

from __future__ import annotations

from dataclasses import dataclass

import sqlglot
from sqlglot import exp

from querydeck.adapters._base import AdapterError, DatabaseAdapter, QueryResult
from querydeck.config import Settings
from querydeck.errors import StatementFailed
from querydeck.export._values import to_records


@dataclass
class Page:
    total: int
    result: QueryResult

    def to_dict(self) -> dict[str, object]:
        return {
            "total": self.total,
            "header": self.result.header(),
            "rows": [
                dict(zip(self.result.column_names, record, strict=True))
                for record in to_records(self.result)
            ],
        }


def apply_pagination(template: str, sql: str, offset: int, limit: int) -> str:
    """Fill a template's {0} (query), {1} (offset) and {2} (limit) placeholders.

    Plain replacement rather than str.format: templates may contain other braces.
    """
    return (
        template.replace("{0}", sql.strip().rstrip(";"))
        .replace("{1}", str(offset))
        .replace("{2}", str(limit))
    )


def build_count_query(sql: str, dialect: str) -> str:
    """Wrap a read statement in COUNT(*), dropping a top-level ORDER BY."""
    inner = sql.strip().rstrip(";")
    try:
        statement = sqlglot.parse_one(inner, dialect=dialect)
    except sqlglot.errors.SqlglotError:
        return f"SELECT COUNT(*) FROM ({inner}) AS counted"

    if isinstance(statement, exp.Query) and statement.args.get("order") is not None:
        statement = statement.copy()
        statement.set("order", None)
        inner = statement.sql(dialect=dialect)
    return f"SELECT COUNT(*) FROM ({inner}) AS counted"


def clamp_page(start: int | None, length: int | None, settings: Settings) -> tuple[int, int]:
    """Normalize (start, length): start >= 0, 1 <= length <= max_page_length."""
    start = max(start or 0, 0)
    if length is None or length <= 0:
        length = settings.page_length
    return start, min(length, settings.max_page_length)


async def fetch_shape(
    adapter: DatabaseAdapter, sql: str, *, pagination: str, use_page: bool
) -> QueryResult:
    """Run a statement for at most one row, to learn its columns."""
    if use_page:
        return await adapter.query(apply_pagination(pagination, sql, 0, 1))
    return await adapter.query(sql, max_rows=1)


async def fetch_page(
    adapter: DatabaseAdapter,
    sql: str,
    *,
    start: int,
    length: int,
    pagination: str,
    use_page: bool,
) -> Page:
    """Count the rows of `sql`, then fetch rows [start, start + length).

    Raises StatementFailed when the database rejects either query.
    """
    try:
        count = await adapter.query(build_count_query(sql, adapter.dialect()))
        total = int(count.rows[0][0]) if count.rows else 0

        if total == 0:
            shape = await fetch_shape(adapter, sql, pagination=pagination, use_page=use_page)
            return Page(total=0, result=QueryResult(columns=shape.columns, rows=[]))

        if use_page:
            result = await adapter.query(apply_pagination(pagination, sql, start, length))
        else:
            result = (await adapter.query(sql, max_rows=start + length)).slice(start, length)
    except AdapterError as e:
        raise StatementFailed("query failed", detail=str(e)) from e
    return Page(total=total, result=result)
