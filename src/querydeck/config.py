"""Runtime settings, read from the environment once at startup."""

from __future__ import annotations

import getpass
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PAGE_LENGTH = 10
MAX_PAGE_LENGTH = 100


@dataclass(frozen=True)
class Settings:
    home: Path
    actor: str
    ssh_binary: str = "ssh"
    tunnel_timeout: float = 10.0
    log_retention_days: int = 30
    page_length: int = DEFAULT_PAGE_LENGTH
    max_page_length: int = MAX_PAGE_LENGTH

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        home = env.get("QUERYDECK_HOME") or str(Path.home() / ".querydeck")
        return cls(
            home=Path(home).expanduser(),
            actor=env.get("QUERYDECK_ACTOR") or _login_name(),
            ssh_binary=env.get("QUERYDECK_SSH") or "ssh",
            tunnel_timeout=float(env.get("QUERYDECK_TUNNEL_TIMEOUT") or 10.0),
            log_retention_days=int(env.get("QUERYDECK_LOG_RETENTION_DAYS") or 30),
        )

    @property
    def connections_file(self) -> Path:
        return self.home / "connections.toml"

    @property
    def servers_file(self) -> Path:
        return self.home / "servers.toml"

    @property
    def history_file(self) -> Path:
        return self.home / "history.jsonl"

    @property
    def whitelist_file(self) -> Path:
        return self.home / "whitelist.jsonl"

    @property
    def log_dir(self) -> Path:
        return self.home / "logs"


def _login_name() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"
