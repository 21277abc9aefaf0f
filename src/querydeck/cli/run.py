"""The `run` command: execute a multi-statement block against a registered connection."""

from __future__ import annotations

import asyncio
import time

import click

from querydeck.batch import BatchResult, run_batch
from querydeck.cli._shared import FORMAT_OPTION, emit_json, fail, resolve_sql_stdin
from querydeck.config import Settings
from querydeck.errors import QueryDeckError
from querydeck.history import QueryHistory
from querydeck.querylog import cleanup_old_logs, log_batch
from querydeck.session import open_session


async def _run_block(sql: str, db: str, settings: Settings) -> tuple[BatchResult, str]:
    async with open_session(db, settings=settings) as session:
        result = await run_batch(
            session.adapter,
            sql,
            connection_id=db,
            history=QueryHistory(settings.history_file),
            actor=settings.actor,
            pagination=session.pagination,
            use_page=session.config.use_page,
        )
        return result, session.adapter.dialect()


def format_batch(result: BatchResult) -> str:
    """Render a batch result for text output."""
    if result.persisted is not None and not result.outcomes:
        columns = ", ".join(f"{h['name']} ({h['type']})" for h in result.persisted.header)
        return f"saved query {result.persisted.id}\ncolumns: {columns}"
    if not result.outcomes:
        return "No valid query executed"

    lines: list[str] = []
    for outcome in result.outcomes:
        target = " ".join(p for p in (outcome.action, outcome.name) if p) or "statement"
        if outcome.error is not None:
            lines.append(f"error[{outcome.error.code}] {target}: {outcome.error.message}")
            lines.append(f"  | {outcome.query}")
        else:
            lines.append(f"{target}: {outcome.affected} affected")
    return "\n".join(lines)


@click.command()
@click.argument("sql", required=False, default=None)
@click.option("--from-stdin", is_flag=True, help="Read SQL from stdin instead of argument.")
@click.option("--db", required=True, envvar="QUERYDECK_DB", help="Registered connection id.")
@FORMAT_OPTION
@click.pass_obj
def run(
    settings: Settings, sql: str | None, from_stdin: bool, db: str, output_format: str
) -> None:
    """Run a block of ;-separated statements, best effort, in order.

    Failing statements are reported inline and do not stop the block. The
    first read statement is saved to history; page or export it later by id.
    """
    cleanup_old_logs(settings.log_dir, retention_days=settings.log_retention_days)
    sql = resolve_sql_stdin(sql, from_stdin)

    t0 = time.monotonic()
    try:
        result, dialect = asyncio.run(_run_block(sql, db, settings))
    except QueryDeckError as e:
        log_batch(settings.log_dir, sql=sql, db=db, actor=settings.actor, error=str(e.code))
        fail(e, output_format)

    payload = result.to_dict()
    log_batch(
        settings.log_dir,
        sql=sql,
        db=db,
        dialect=dialect,
        actor=settings.actor,
        statements=result.statement_count,
        outcomes=payload.get("data"),
        history_id=result.persisted.id if result.persisted else None,
        duration_ms=(time.monotonic() - t0) * 1000,
    )

    if output_format == "json":
        emit_json(payload)
    else:
        click.echo(format_batch(result))
