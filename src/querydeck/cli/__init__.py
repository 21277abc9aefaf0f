"""CLI entry point for `querydeck`."""

from __future__ import annotations

import logging
import sys

import click

from querydeck.cli.catalog import describe, objects, rows
from querydeck.cli.connect import connect, server
from querydeck.cli.export import export
from querydeck.cli.history import history
from querydeck.cli.page import page
from querydeck.cli.run import run
from querydeck.cli.whitelist import whitelist
from querydeck.config import Settings


@click.group()
@click.version_option(package_name="querydeck")
@click.option("--verbose", "-v", is_flag=True, help="Log diagnostics to stderr.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """querydeck: run multi-statement SQL against registered databases."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )
    ctx.obj = Settings.from_env()


main.add_command(connect)
main.add_command(server)
main.add_command(run)
main.add_command(page)
main.add_command(export)
main.add_command(objects)
main.add_command(describe)
main.add_command(rows)
main.add_command(history)
main.add_command(whitelist)
