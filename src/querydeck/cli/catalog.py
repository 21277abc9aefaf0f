"""The `objects`, `describe` and `rows` commands: browse a connected database."""

from __future__ import annotations

import asyncio

import click

from querydeck.adapters._base import AdapterError, QueryResult
from querydeck.cli._shared import FORMAT_OPTION, emit_json, fail
from querydeck.cli.page import format_page
from querydeck.config import Settings
from querydeck.errors import QueryDeckError, StatementFailed
from querydeck.paging import Page, clamp_page, fetch_page, fetch_shape
from querydeck.session import open_session


async def _objects(db: str, start: int, length: int, settings: Settings) -> Page:
    async with open_session(db, settings=settings) as session:
        return await fetch_page(
            session.adapter,
            session.adapter.objects_query(),
            start=start,
            length=length,
            pagination=session.pagination,
            use_page=session.config.use_page,
        )


async def _rows(db: str, name: str, start: int, length: int, settings: Settings) -> Page:
    async with open_session(db, settings=settings) as session:
        try:
            return await fetch_page(
                session.adapter,
                f"SELECT * FROM {name}",
                start=start,
                length=length,
                pagination=session.pagination,
                use_page=session.config.use_page,
            )
        except StatementFailed as e:
            raise StatementFailed(f"cannot read {name}", detail=e.detail) from e


async def _describe(db: str, name: str, settings: Settings) -> QueryResult:
    async with open_session(db, settings=settings) as session:
        try:
            return await fetch_shape(
                session.adapter,
                f"SELECT * FROM {name}",
                pagination=session.pagination,
                use_page=session.config.use_page,
            )
        except AdapterError as e:
            raise StatementFailed(f"cannot describe {name}", detail=str(e)) from e


@click.command()
@click.option("--db", required=True, envvar="QUERYDECK_DB", help="Registered connection id.")
@click.option("--start", type=int, default=0, help="Zero-based offset of the first object.")
@click.option("--length", type=int, default=None, help="Objects per page (capped).")
@FORMAT_OPTION
@click.pass_obj
def objects(
    settings: Settings, db: str, start: int, length: int | None, output_format: str
) -> None:
    """List tables, views and functions (object_id, object_name, object_type)."""
    start, length = clamp_page(start, length, settings)
    try:
        result = asyncio.run(_objects(db, start, length, settings))
    except QueryDeckError as e:
        fail(e, output_format)

    if output_format == "json":
        emit_json(result.to_dict())
    else:
        click.echo(format_page(result, start))


@click.command()
@click.argument("name")
@click.option("--db", required=True, envvar="QUERYDECK_DB", help="Registered connection id.")
@FORMAT_OPTION
@click.pass_obj
def describe(settings: Settings, name: str, db: str, output_format: str) -> None:
    """Show the column header of table or view NAME."""
    try:
        result = asyncio.run(_describe(db, name, settings))
    except QueryDeckError as e:
        fail(e, output_format)

    if output_format == "json":
        emit_json({"name": name, "header": result.header()})
    else:
        for column in result.columns:
            click.echo(f"  {column.name}: {column.type_name}")


@click.command()
@click.argument("name")
@click.option("--db", required=True, envvar="QUERYDECK_DB", help="Registered connection id.")
@click.option("--start", type=int, default=0, help="Zero-based offset of the first row.")
@click.option("--length", type=int, default=None, help="Rows per page (capped).")
@FORMAT_OPTION
@click.pass_obj
def rows(
    settings: Settings, name: str, db: str, start: int, length: int | None, output_format: str
) -> None:
    """Page through the rows of table or view NAME, with the total row count."""
    start, length = clamp_page(start, length, settings)
    try:
        result = asyncio.run(_rows(db, name, start, length, settings))
    except QueryDeckError as e:
        fail(e, output_format)

    if output_format == "json":
        emit_json({"name": name, **result.to_dict()})
    else:
        click.echo(format_page(result, start))
