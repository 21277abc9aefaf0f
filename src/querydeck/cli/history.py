"""The `history` command: list saved queries."""

from __future__ import annotations

import click

from querydeck.cli._shared import FORMAT_OPTION, emit_json
from querydeck.config import Settings
from querydeck.history import QueryHistory


@click.command()
@click.option("--db", default=None, help="Only queries saved for this connection.")
@click.option("--limit", type=int, default=20, help="Newest N entries (0 for all).")
@FORMAT_OPTION
@click.pass_obj
def history(settings: Settings, db: str | None, limit: int, output_format: str) -> None:
    """List saved queries, newest first."""
    entries = QueryHistory(settings.history_file).list(connection_id=db)
    if limit > 0:
        entries = entries[:limit]

    if output_format == "json":
        emit_json(
            [
                {
                    "id": e.id,
                    "db": e.connection_id,
                    "query": e.query,
                    "actor": e.actor,
                    "created_at": e.created_at,
                }
                for e in entries
            ]
        )
        return

    if not entries:
        click.echo("No saved queries.")
        return
    for e in entries:
        query = " ".join(e.query.split())
        click.echo(f"  {e.id} [{e.connection_id}] {e.created_at}: {query}")
