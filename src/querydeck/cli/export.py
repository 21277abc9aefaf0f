"""The `export` command: render every row of a saved query to a file format."""

from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path

import click

from querydeck.adapters._base import AdapterError, QueryResult
from querydeck.batch import classify
from querydeck.cli._shared import fail
from querydeck.config import Settings
from querydeck.errors import QueryDeckError, RenderFailed, StatementFailed
from querydeck.export import ExportFormat, ExportOptions, render
from querydeck.history import HistoryEntry, QueryHistory
from querydeck.querylog import log_export
from querydeck.session import open_session


async def _fetch_all(entry: HistoryEntry, settings: Settings) -> tuple[QueryResult, str]:
    async with open_session(entry.connection_id, settings=settings) as session:
        try:
            result = await session.adapter.query(entry.query)
        except AdapterError as e:
            raise StatementFailed("query failed", detail=str(e)) from e
        return result, session.adapter.dialect()


def _target_table(entry: HistoryEntry, fmt: ExportFormat, table: str | None) -> str | None:
    if table or not fmt.needs_table:
        return table
    cls = classify(entry.query)
    if cls is None:
        raise RenderFailed(f"cannot tell the target table of query {entry.id}; pass --table")
    return cls.name


@click.command()
@click.argument("history_id")
@click.option(
    "--format",
    "fmt",
    type=click.Choice([f.value for f in ExportFormat]),
    default=ExportFormat.CSV.value,
    help="Export format.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to a file instead of stdout.",
)
@click.option("--table", default=None, help="Target table for xml/insert/update.")
@click.option("--header/--no-header", default=True, help="CSV header row.")
@click.option("--delimiter", default=",", help="CSV delimiter (one character).")
@click.option("--rows-per-statement", type=int, default=1, help="Rows per INSERT.")
@click.option("--columns/--no-columns", default=True, help="Column list in INSERT.")
@click.option("--multi-line", is_flag=True, help="Multi-line INSERT/UPDATE layout.")
@click.option("--key-columns", type=int, default=1, help="Leading columns used as UPDATE WHERE.")
@click.option("--group-columns", type=int, default=0, help="Leading XLSX columns to group.")
@click.pass_obj
def export(
    settings: Settings,
    history_id: str,
    fmt: str,
    output: Path | None,
    table: str | None,
    header: bool,
    delimiter: str,
    rows_per_statement: int,
    columns: bool,
    multi_line: bool,
    key_columns: int,
    group_columns: int,
) -> None:
    """Export a saved query as json, csv, xml, xlsx, insert or update.

    \b
    Examples:
      querydeck export 1719830400000123 --format csv --delimiter ';'
      querydeck export 1719830400000123 --format insert --rows-per-statement 100
      querydeck export 1719830400000123 --format xlsx --group-columns 2 -o out.xlsx
    """
    export_format = ExportFormat(fmt)
    options = ExportOptions(
        header=header,
        delimiter=delimiter,
        rows_per_statement=rows_per_statement,
        include_columns=columns,
        multi_line=multi_line,
        key_columns=key_columns,
        group_columns=group_columns,
    )

    entry: HistoryEntry | None = None
    try:
        entry = QueryHistory(settings.history_file).require(history_id)
        target = _target_table(entry, export_format, table)
        result, dialect = asyncio.run(_fetch_all(entry, settings))
        options = dataclasses.replace(options, dialect=dialect)
        rendered = render(result, export_format, table=target, options=options)
    except QueryDeckError as e:
        if entry is not None:
            log_export(
                settings.log_dir,
                history_id=entry.id,
                db=entry.connection_id,
                fmt=fmt,
                actor=settings.actor,
                error=str(e.code),
            )
        fail(e, "text")

    log_export(
        settings.log_dir,
        history_id=entry.id,
        db=entry.connection_id,
        fmt=fmt,
        actor=settings.actor,
        rows=result.row_count,
    )

    if output is not None:
        if isinstance(rendered, bytes):
            output.write_bytes(rendered)
        else:
            output.write_text(rendered)
        click.echo(f"Exported {result.row_count} rows to {output}", err=True)
    elif isinstance(rendered, bytes):
        click.get_binary_stream("stdout").write(rendered)
    else:
        click.echo(rendered, nl=not rendered.endswith("\n"))
