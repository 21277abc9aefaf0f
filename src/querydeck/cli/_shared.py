"""Helpers shared by the CLI commands."""

from __future__ import annotations

import json
import sys
from typing import NoReturn

import click

from querydeck.diagnostics.render import render_text
from querydeck.errors import QueryDeckError

FORMAT_OPTION = click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="json",
    help="Output format.",
)


def resolve_sql_stdin(sql: str | None, from_stdin: bool) -> str:
    """Resolve SQL from positional argument or stdin. Exactly one source required."""
    if sql and from_stdin:
        raise click.UsageError("Provide SQL as an argument or --from-stdin, not both.")
    if from_stdin:
        if sys.stdin.isatty():
            raise click.UsageError("--from-stdin requires piped input (stdin is a terminal).")
        text = sys.stdin.read().strip()
        if not text:
            raise click.UsageError("--from-stdin: stdin was empty.")
        return text
    if not sql:
        raise click.UsageError("Missing argument 'SQL'. Provide SQL or use --from-stdin.")
    return sql


def emit_json(data: object) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def fail(error: QueryDeckError, output_format: str) -> NoReturn:
    """Report a request-aborting error and exit 1."""
    if output_format == "json":
        emit_json({"error": error.to_dict()})
    else:
        click.echo(render_text(error.diagnostic()), err=True)
    raise SystemExit(1) from error
