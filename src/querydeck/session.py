"""Request-scoped access to one external database, optionally through an SSH tunnel."""

from __future__ import annotations

import contextlib
import dataclasses
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

from querydeck.adapters._base import AdapterError, ConnectionConfig, DatabaseAdapter
from querydeck.adapters._registry import get_adapter
from querydeck.config import Settings
from querydeck.connections import ConnectionRegistry, ServerRegistry
from querydeck.errors import ConnectionResolutionFailed, ExternalConnectFailed, TunnelFailed
from querydeck.tunnel import LOCAL_HOST, open_tunnel

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"postgres": 5432, "mysql": 3306}


@dataclass
class Session:
    config: ConnectionConfig
    adapter: DatabaseAdapter

    @property
    def pagination(self) -> str:
        return self.config.pagination or self.adapter.default_pagination()


def resolve_connection(connection_id: str, *, settings: Settings) -> ConnectionConfig:
    config = ConnectionRegistry(settings.connections_file).get(connection_id)
    if config is None:
        raise ConnectionResolutionFailed(f"connection not found: {connection_id}")
    return config


@contextlib.asynccontextmanager
async def open_session(connection_id: str, *, settings: Settings) -> AsyncIterator[Session]:
    """Resolve, tunnel (when the connection names a server) and connect.

    The adapter and any tunnel are closed on every exit path.
    """
    config = resolve_connection(connection_id, settings=settings)

    async with contextlib.AsyncExitStack() as stack:
        if config.server_id:
            server = ServerRegistry(settings.servers_file).get(config.server_id)
            if server is None:
                raise TunnelFailed(f"server not found: {config.server_id}")
            port = config.port or _DEFAULT_PORTS.get(config.db_type.value, 0)
            local_port = await stack.enter_async_context(
                open_tunnel(server, config.host, port, settings=settings)
            )
            config = dataclasses.replace(config, host=LOCAL_HOST, port=local_port)

        try:
            adapter = get_adapter(config.db_type)()
            await adapter.connect(config)
        except AdapterError as e:
            raise ExternalConnectFailed(
                f"could not connect to {connection_id}", detail=str(e)
            ) from e
        stack.push_async_callback(adapter.close)
        logger.debug("connected to %s (%s)", connection_id, config.db_type.value)

        yield Session(config=config, adapter=adapter)
