"""Result rendering: JSON, CSV, XML, XLSX, INSERT and UPDATE."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from querydeck.adapters._base import QueryResult
from querydeck.errors import RenderFailed
from querydeck.export.sql import render_insert, render_update
from querydeck.export.text import render_csv, render_json, render_xml
from querydeck.export.xlsx import render_xlsx


class ExportFormat(enum.Enum):
    JSON = "json"
    CSV = "csv"
    XML = "xml"
    XLSX = "xlsx"
    INSERT = "insert"
    UPDATE = "update"

    @property
    def needs_table(self) -> bool:
        return self in (ExportFormat.XML, ExportFormat.INSERT, ExportFormat.UPDATE)


@dataclass(frozen=True)
class ExportOptions:
    header: bool = True
    delimiter: str = ","
    rows_per_statement: int = 1
    include_columns: bool = True
    multi_line: bool = False
    key_columns: int = 1
    group_columns: int = 0
    dialect: str = "postgres"  # SQL literal escaping for insert/update


def render(
    result: QueryResult,
    fmt: ExportFormat,
    *,
    table: str | None = None,
    options: ExportOptions | None = None,
) -> str | bytes:
    """Render `result` in `fmt`. XLSX yields bytes, every other format text.

    Raises RenderFailed for unusable options or any failure while formatting.
    """
    opts = options or ExportOptions()
    if fmt.needs_table and not table:
        raise RenderFailed(f"{fmt.value} export needs a target table name")
    if fmt is ExportFormat.CSV and len(opts.delimiter) != 1:
        raise RenderFailed(f"CSV delimiter must be one character, got {opts.delimiter!r}")

    try:
        if fmt is ExportFormat.JSON:
            return render_json(result)
        if fmt is ExportFormat.CSV:
            return render_csv(result, header=opts.header, delimiter=opts.delimiter)
        if fmt is ExportFormat.XML:
            return render_xml(result, table=table)
        if fmt is ExportFormat.XLSX:
            return render_xlsx(result, group_columns=opts.group_columns)
        if fmt is ExportFormat.INSERT:
            return render_insert(
                result,
                table=table,
                rows_per_statement=opts.rows_per_statement,
                include_columns=opts.include_columns,
                multi_line=opts.multi_line,
                dialect=opts.dialect,
            )
        return render_update(
            result,
            table=table,
            key_columns=opts.key_columns,
            multi_line=opts.multi_line,
            dialect=opts.dialect,
        )
    except Exception as e:
        raise RenderFailed(f"{fmt.value} rendering failed", detail=str(e)) from e


__all__ = ["ExportFormat", "ExportOptions", "render"]
