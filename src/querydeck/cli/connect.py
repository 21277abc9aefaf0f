"""The `connect` and `server` command groups: manage the registries."""

from __future__ import annotations

import asyncio

import click

from querydeck.adapters._base import DatabaseType
from querydeck.cli._shared import fail
from querydeck.config import Settings
from querydeck.connections import ConnectionRegistry, ServerRegistry
from querydeck.errors import QueryDeckError
from querydeck.session import open_session

_SECRET_KEYS = {"password"}
_INT_KEYS = {"port"}
_BOOL_KEYS = {"use_page"}
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_params(params: tuple[str, ...]) -> dict[str, object]:
    parsed: dict[str, object] = {}
    for p in params:
        if "=" not in p:
            raise click.BadParameter(f"Expected key=value, got '{p}'")
        k, v = p.split("=", 1)
        if k in _INT_KEYS:
            try:
                parsed[k] = int(v)
            except ValueError as e:
                raise click.BadParameter(f"{k} must be an integer, got '{v}'") from e
        elif k in _BOOL_KEYS:
            if v.lower() not in _TRUE | _FALSE:
                raise click.BadParameter(f"{k} must be true or false, got '{v}'")
            parsed[k] = v.lower() in _TRUE
        else:
            parsed[k] = v
    return parsed


def _describe_entry(entry: dict[str, object]) -> str:
    return ", ".join(
        f"{k}={'****' if k in _SECRET_KEYS else v}" for k, v in entry.items() if k != "type"
    )


@click.group()
def connect() -> None:
    """Manage registered database connections (connections.toml)."""


@connect.command("add")
@click.argument("connection_id")
@click.argument("db_type", type=click.Choice([t.value for t in DatabaseType]))
@click.argument("params", nargs=-1)
@click.pass_obj
def connect_add(
    settings: Settings, connection_id: str, db_type: str, params: tuple[str, ...]
) -> None:
    """Register a connection.

    \b
    Keys: host, port, username, password, database, pagination, use_page, server.
    Any other key is handed to the driver: libpq keywords for postgres,
    charset/connect_timeout/init_command/unix_socket/sql_mode for mysql,
    settings for duckdb.
    Examples:
      querydeck connect add 7 postgres host=db.internal port=5432 username=app sslmode=require
      querydeck connect add 8 mysql host=10.0.0.4 username=report server=bastion
      querydeck connect add local duckdb database=/tmp/local.duckdb
    """
    entry = {"type": db_type, **_parse_params(params)}
    path = ConnectionRegistry(settings.connections_file).save(connection_id, entry)
    click.echo(f"Saved connection '{connection_id}' to {path}")


@connect.command("list")
@click.pass_obj
def connect_list(settings: Settings) -> None:
    """List all registered connections."""
    connections = ConnectionRegistry(settings.connections_file).list()
    if not connections:
        click.echo("No connections configured.")
        click.echo("Add one: querydeck connect add <id> <type> <key>=<val>")
        return

    for connection_id, entry in connections.items():
        click.echo(f"  {connection_id} ({entry.get('type', '?')}): {_describe_entry(entry)}")


@connect.command("remove")
@click.argument("connection_id")
@click.pass_obj
def connect_remove(settings: Settings, connection_id: str) -> None:
    """Remove a registered connection."""
    if not ConnectionRegistry(settings.connections_file).remove(connection_id):
        click.echo(f"Connection '{connection_id}' not found.", err=True)
        raise SystemExit(1)
    click.echo(f"Removed connection '{connection_id}'.")


async def _test(connection_id: str, settings: Settings) -> str:
    async with open_session(connection_id, settings=settings) as session:
        return session.adapter.dialect()


@connect.command("test")
@click.argument("connection_id")
@click.pass_obj
def connect_test(settings: Settings, connection_id: str) -> None:
    """Open and close a connection (through its SSH server, if any)."""
    try:
        dialect = asyncio.run(_test(connection_id, settings))
    except QueryDeckError as e:
        fail(e, "text")
    click.echo(f"Connection '{connection_id}' OK ({dialect}).")


@click.group()
def server() -> None:
    """Manage SSH servers used to tunnel connections (servers.toml)."""


@server.command("add")
@click.argument("server_id")
@click.argument("params", nargs=-1, required=True)
@click.pass_obj
def server_add(settings: Settings, server_id: str, params: tuple[str, ...]) -> None:
    """Register an SSH server.

    \b
    Keys: host, port, username, password, private_key.
    Example:
      querydeck server add bastion host=bastion.example.com username=ops private_key=~/.ssh/id
    """
    entry = _parse_params(params)
    if "host" not in entry:
        raise click.BadParameter("host=<address> is required")
    path = ServerRegistry(settings.servers_file).save(server_id, entry)
    click.echo(f"Saved server '{server_id}' to {path}")


@server.command("list")
@click.pass_obj
def server_list(settings: Settings) -> None:
    """List all registered SSH servers."""
    servers = ServerRegistry(settings.servers_file).list()
    if not servers:
        click.echo("No servers configured.")
        return
    for server_id, entry in servers.items():
        click.echo(f"  {server_id}: {_describe_entry(entry)}")


@server.command("remove")
@click.argument("server_id")
@click.pass_obj
def server_remove(settings: Settings, server_id: str) -> None:
    """Remove a registered SSH server."""
    if not ServerRegistry(settings.servers_file).remove(server_id):
        click.echo(f"Server '{server_id}' not found.", err=True)
        raise SystemExit(1)
    click.echo(f"Removed server '{server_id}'.")
