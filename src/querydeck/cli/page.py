"""The `page` command: read one page of a saved query."""

from __future__ import annotations

import asyncio

import click

from querydeck.cli._shared import FORMAT_OPTION, emit_json, fail
from querydeck.config import Settings
from querydeck.errors import QueryDeckError
from querydeck.history import QueryHistory
from querydeck.paging import Page, clamp_page, fetch_page
from querydeck.session import open_session


async def _fetch(history_id: str, start: int, length: int, settings: Settings) -> Page:
    entry = QueryHistory(settings.history_file).require(history_id)
    async with open_session(entry.connection_id, settings=settings) as session:
        return await fetch_page(
            session.adapter,
            entry.query,
            start=start,
            length=length,
            pagination=session.pagination,
            use_page=session.config.use_page,
        )


def format_page(page: Page, start: int) -> str:
    result = page.result
    lines: list[str] = []
    if result.columns:
        lines.append(" | ".join(result.column_names))
        lines.append("-+-".join("-" * max(len(c), 5) for c in result.column_names))
        for row in result.rows:
            lines.append(" | ".join("" if v is None else str(v) for v in row))
    end = start + result.row_count
    lines.append(f"\n(rows {start + 1 if result.rows else start}-{end} of {page.total})")
    return "\n".join(lines)


@click.command()
@click.argument("history_id")
@click.option("--start", type=int, default=0, help="Zero-based offset of the first row.")
@click.option("--length", type=int, default=None, help="Rows per page (capped).")
@FORMAT_OPTION
@click.pass_obj
def page(
    settings: Settings, history_id: str, start: int, length: int | None, output_format: str
) -> None:
    """Fetch rows [START, START+LENGTH) of a saved query, with the total row count."""
    start, length = clamp_page(start, length, settings)
    try:
        result = asyncio.run(_fetch(history_id, start, length, settings))
    except QueryDeckError as e:
        fail(e, output_format)

    if output_format == "json":
        emit_json(result.to_dict())
    else:
        click.echo(format_page(result, start))
