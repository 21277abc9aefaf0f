"""The `whitelist` command group: reviewed queries that can be run and paged by id."""

from __future__ import annotations

import asyncio

import click

from querydeck.adapters._base import AdapterError, QueryResult
from querydeck.batch import is_statement_type, split_statements
from querydeck.batch.classify import READ
from querydeck.cli._shared import FORMAT_OPTION, emit_json, fail
from querydeck.cli.page import format_page
from querydeck.config import Settings
from querydeck.errors import QueryDeckError, StatementFailed
from querydeck.paging import Page, clamp_page, fetch_page, fetch_shape
from querydeck.session import open_session
from querydeck.whitelist import QueryWhitelist, WhitelistEntry


def _entry_dict(entry: WhitelistEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "db": entry.connection_id,
        "description": entry.description,
        "query": entry.query,
        "actor": entry.actor,
        "created_at": entry.created_at,
    }


async def _header(entry: WhitelistEntry, settings: Settings) -> QueryResult:
    async with open_session(entry.connection_id, settings=settings) as session:
        try:
            return await fetch_shape(
                session.adapter,
                entry.query,
                pagination=session.pagination,
                use_page=session.config.use_page,
            )
        except AdapterError as e:
            raise StatementFailed("query failed", detail=str(e)) from e


async def _page(entry: WhitelistEntry, start: int, length: int, settings: Settings) -> Page:
    async with open_session(entry.connection_id, settings=settings) as session:
        return await fetch_page(
            session.adapter,
            entry.query,
            start=start,
            length=length,
            pagination=session.pagination,
            use_page=session.config.use_page,
        )


@click.group()
def whitelist() -> None:
    """Manage whitelisted queries (whitelist.jsonl)."""


@whitelist.command("add")
@click.argument("description")
@click.argument("sql")
@click.option("--db", required=True, envvar="QUERYDECK_DB", help="Registered connection id.")
@click.pass_obj
def whitelist_add(settings: Settings, description: str, sql: str, db: str) -> None:
    """Whitelist one SELECT/WITH query for a connection.

    \b
    Example:
      querydeck whitelist add "Open orders" "SELECT * FROM orders WHERE open" --db 7
    """
    statements = split_statements(sql)
    if len(statements) != 1 or not is_statement_type(statements[0].text, READ):
        raise click.BadParameter("expected exactly one SELECT or WITH statement", param_hint="SQL")
    entry = QueryWhitelist(settings.whitelist_file).add(
        db, description, statements[0].text, settings.actor
    )
    click.echo(f"Whitelisted query {entry.id} for connection '{db}'")


@whitelist.command("list")
@click.option("--db", required=True, envvar="QUERYDECK_DB", help="Registered connection id.")
@click.option("--search", default=None, help="Case-insensitive match on the description.")
@click.option("--start", type=int, default=0, help="Zero-based offset of the first entry.")
@click.option("--length", type=int, default=None, help="Entries per page (capped).")
@FORMAT_OPTION
@click.pass_obj
def whitelist_list(
    settings: Settings,
    db: str,
    search: str | None,
    start: int,
    length: int | None,
    output_format: str,
) -> None:
    """List whitelisted queries of a connection, oldest first."""
    start, length = clamp_page(start, length, settings)
    found = QueryWhitelist(settings.whitelist_file).list(
        db, search=search, start=start, length=length
    )

    if output_format == "json":
        emit_json({"total": found.total, "entries": [_entry_dict(e) for e in found.entries]})
        return

    if not found.entries:
        click.echo("No whitelisted queries.")
        return
    for e in found.entries:
        query = " ".join(e.query.split())
        click.echo(f"  {e.id} {e.description}: {query}")
    click.echo(f"\n(entries {start + 1}-{start + len(found.entries)} of {found.total})")


@whitelist.command("remove")
@click.argument("whitelist_id")
@click.pass_obj
def whitelist_remove(settings: Settings, whitelist_id: str) -> None:
    """Remove a whitelisted query."""
    try:
        entry = QueryWhitelist(settings.whitelist_file).remove(whitelist_id)
    except QueryDeckError as e:
        fail(e, "text")
    click.echo(f"Removed whitelisted query {entry.id}")


@whitelist.command("describe")
@click.argument("whitelist_id")
@FORMAT_OPTION
@click.pass_obj
def whitelist_describe(settings: Settings, whitelist_id: str, output_format: str) -> None:
    """Run a whitelisted query for one row and show its column header."""
    try:
        entry = QueryWhitelist(settings.whitelist_file).require(whitelist_id)
        result = asyncio.run(_header(entry, settings))
    except QueryDeckError as e:
        fail(e, output_format)

    if output_format == "json":
        emit_json({"id": entry.id, "header": result.header()})
    else:
        for column in result.columns:
            click.echo(f"  {column.name}: {column.type_name}")


@whitelist.command("page")
@click.argument("whitelist_id")
@click.option("--start", type=int, default=0, help="Zero-based offset of the first row.")
@click.option("--length", type=int, default=None, help="Rows per page (capped).")
@FORMAT_OPTION
@click.pass_obj
def whitelist_page(
    settings: Settings, whitelist_id: str, start: int, length: int | None, output_format: str
) -> None:
    """Fetch rows [START, START+LENGTH) of a whitelisted query, with the total row count."""
    start, length = clamp_page(start, length, settings)
    try:
        entry = QueryWhitelist(settings.whitelist_file).require(whitelist_id)
        result = asyncio.run(_page(entry, start, length, settings))
    except QueryDeckError as e:
        fail(e, output_format)

    if output_format == "json":
        emit_json(result.to_dict())
    else:
        click.echo(format_page(result, start))
