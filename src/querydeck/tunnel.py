"""SSH local port forwarding through a child `ssh -N -L` process."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import socket
import time
from collections.abc import AsyncIterator

from querydeck.config import Settings
from querydeck.connections import ServerConfig
from querydeck.errors import TunnelFailed

logger = logging.getLogger(__name__)

LOCAL_HOST = "127.0.0.1"
_POLL_INTERVAL = 0.1


def free_port() -> int:
    """Ask the OS for an unused local TCP port."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((LOCAL_HOST, 0))
        return sock.getsockname()[1]


def build_command(
    server: ServerConfig, target_host: str, target_port: int, local_port: int, *, ssh_binary: str
) -> list[str]:
    """argv for forwarding LOCAL_HOST:local_port to target_host:target_port via `server`."""
    cmd = [
        ssh_binary,
        "-N",
        "-L",
        f"{LOCAL_HOST}:{local_port}:{target_host}:{target_port}",
        "-p",
        str(server.port),
        "-o",
        "ExitOnForwardFailure=yes",
        "-o",
        "StrictHostKeyChecking=accept-new",
    ]
    if server.private_key:
        cmd += ["-i", os.path.expanduser(server.private_key)]
    elif not server.password:
        cmd += ["-o", "BatchMode=yes"]
    destination = f"{server.username}@{server.host}" if server.username else server.host
    cmd.append(destination)
    if server.password and not server.private_key:
        # sshpass reads the password from SSHPASS.
        cmd = ["sshpass", "-e", *cmd]
    return cmd


async def _port_open(port: int) -> bool:
    try:
        _reader, writer = await asyncio.open_connection(LOCAL_HOST, port)
    except OSError:
        return False
    writer.close()
    with contextlib.suppress(OSError):
        await writer.wait_closed()
    return True


async def _wait_ready(process: asyncio.subprocess.Process, port: int, timeout: float) -> None:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if process.returncode is not None:
            stderr = b""
            if process.stderr is not None:
                stderr = await process.stderr.read()
            raise TunnelFailed(
                "SSH tunnel exited before it was ready",
                detail=stderr.decode("utf-8", errors="replace").strip() or None,
            )
        if await _port_open(port):
            return
        await asyncio.sleep(_POLL_INTERVAL)
    raise TunnelFailed(f"SSH tunnel not ready after {timeout:g}s")


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        process.kill()
    await process.wait()


@contextlib.asynccontextmanager
async def open_tunnel(
    server: ServerConfig, target_host: str, target_port: int, *, settings: Settings
) -> AsyncIterator[int]:
    """Forward a free local port to target_host:target_port; yields the local port.

    The ssh process is killed when the context exits, whatever the outcome.
    """
    local_port = free_port()
    cmd = build_command(
        server, target_host, target_port, local_port, ssh_binary=settings.ssh_binary
    )
    env = dict(os.environ)
    if server.password:
        env["SSHPASS"] = server.password

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
    except OSError as e:
        raise TunnelFailed(f"could not start {cmd[0]}", detail=str(e)) from e

    logger.debug(
        "tunnel %s -> %s:%d on port %d (pid %d)",
        server.id,
        target_host,
        target_port,
        local_port,
        process.pid,
    )
    try:
        await _wait_ready(process, local_port, settings.tunnel_timeout)
        yield local_port
    finally:
        await _kill(process)
        logger.debug("tunnel %s closed", server.id)
