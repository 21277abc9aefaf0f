"""Connection and SSH server registries, stored as connections.toml and servers.toml."""

from __future__ import annotations

import os
import stat
import tomllib
from dataclasses import dataclass
from pathlib import Path

from querydeck.adapters._base import ConnectionConfig, DatabaseType

_CONNECTION_KEYS = (
    "type",
    "host",
    "port",
    "username",
    "password",
    "database",
    "pagination",
    "use_page",
    "server",
)


def _escape_toml_value(v: str) -> str:
    """Escape a string for safe inclusion in a TOML double-quoted value."""
    return (
        v.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\r", "\\r")
    )


def _toml_value(v: object) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, int):
        return str(v)
    return f'"{_escape_toml_value(str(v))}"'


def _write_toml(path: Path, data: dict[str, dict]) -> None:
    """Serialize a registry to TOML and write it with restricted permissions."""
    lines: list[str] = []
    for entry_id, entry in data.items():
        lines.append(f'["{_escape_toml_value(entry_id)}"]')
        for k, v in entry.items():
            if v is not None:
                lines.append(f"{k} = {_toml_value(v)}")
        lines.append("")

    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    path.write_text("\n".join(lines))
    os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)  # 0600


class _TomlRegistry:
    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        return tomllib.loads(self.path.read_text())

    def list(self) -> dict[str, dict]:
        """Return every raw entry as {id: {key: value}}."""
        return self._load()

    def save(self, entry_id: str, entry: dict[str, object]) -> Path:
        data = self._load()
        data[entry_id] = entry
        _write_toml(self.path, data)
        return self.path

    def remove(self, entry_id: str) -> bool:
        """Remove an entry. Returns True if removed, False if not found."""
        data = self._load()
        if entry_id not in data:
            return False
        del data[entry_id]
        if not data:
            self.path.unlink(missing_ok=True)
        else:
            _write_toml(self.path, data)
        return True


class ConnectionRegistry(_TomlRegistry):
    """External databases, keyed by an opaque id."""

    def get(self, connection_id: str) -> ConnectionConfig | None:
        """Look up a connection. Returns None if missing or malformed."""
        entry = self._load().get(connection_id)
        if entry is None:
            return None
        try:
            db_type = DatabaseType(entry.get("type"))
        except ValueError:
            return None

        port = entry.get("port")
        return ConnectionConfig(
            id=connection_id,
            db_type=db_type,
            host=str(entry.get("host", "localhost")),
            port=int(port) if port is not None else None,
            username=str(entry.get("username", "")),
            password=str(entry.get("password", "")),
            database=str(entry.get("database", "")),
            pagination=entry.get("pagination") or None,
            use_page=bool(entry.get("use_page", True)),
            server_id=entry.get("server") or None,
            params={k: str(v) for k, v in entry.items() if k not in _CONNECTION_KEYS},
        )


@dataclass
class ServerConfig:
    id: str
    host: str
    port: int = 22
    username: str = ""
    password: str = ""
    private_key: str = ""


class ServerRegistry(_TomlRegistry):
    """SSH servers that connections can be tunneled through."""

    def get(self, server_id: str) -> ServerConfig | None:
        entry = self._load().get(server_id)
        if entry is None or "host" not in entry:
            return None
        return ServerConfig(
            id=server_id,
            host=str(entry["host"]),
            port=int(entry.get("port", 22)),
            username=str(entry.get("username", "")),
            password=str(entry.get("password", "")),
            private_key=str(entry.get("private_key", "")),
        )
