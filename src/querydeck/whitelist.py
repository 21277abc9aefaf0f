"""Query whitelist: reviewed read queries per connection, run and paged by id."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from querydeck.errors import WhitelistNotFound


@dataclass
class WhitelistEntry:
    id: int
    connection_id: str
    description: str
    query: str
    actor: str
    created_at: str
    deleted: bool = False


@dataclass
class WhitelistPage:
    total: int
    entries: list[WhitelistEntry] = field(default_factory=list)


class QueryWhitelist:
    """JSONL store of whitelisted queries. Ids are sequential; removal is a soft delete."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _entries(self) -> list[WhitelistEntry]:
        if not self.path.exists():
            return []
        entries: list[WhitelistEntry] = []
        for line in self.path.read_text().splitlines():
            if line.strip():
                entries.append(WhitelistEntry(**json.loads(line)))
        return entries

    def _write(self, entries: list[WhitelistEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("".join(json.dumps(asdict(e)) + "\n" for e in entries))

    def add(self, connection_id: str, description: str, query: str, actor: str) -> WhitelistEntry:
        entries = self._entries()
        entry = WhitelistEntry(
            id=max((e.id for e in entries), default=0) + 1,
            connection_id=connection_id,
            description=description,
            query=query,
            actor=actor,
            created_at=datetime.now(UTC).isoformat(),
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a") as f:
            f.write(json.dumps(asdict(entry)) + "\n")
        return entry

    def get(self, entry_id: int) -> WhitelistEntry | None:
        for entry in self._entries():
            if entry.id == entry_id and not entry.deleted:
                return entry
        return None

    def require(self, entry_id: int | str) -> WhitelistEntry:
        """Look up a live entry, raising WhitelistNotFound for bad or removed ids."""
        text = str(entry_id).strip()
        if not text.isdigit():
            raise WhitelistNotFound(f"invalid whitelist id: {entry_id}")
        entry = self.get(int(text))
        if entry is None:
            raise WhitelistNotFound(f"whitelist entry not found: {entry_id}")
        return entry

    def remove(self, entry_id: int | str) -> WhitelistEntry:
        entry = self.require(entry_id)
        entries = self._entries()
        for e in entries:
            if e.id == entry.id:
                e.deleted = True
        self._write(entries)
        entry.deleted = True
        return entry

    def list(
        self,
        connection_id: str,
        *,
        search: str | None = None,
        start: int = 0,
        length: int | None = None,
    ) -> WhitelistPage:
        """Live entries of one connection in id order.

        `search` matches the description case-insensitively. `total` counts every
        match; `entries` holds the [start, start + length) slice.
        """
        needle = search.casefold() if search else None
        matches = [
            e
            for e in self._entries()
            if not e.deleted
            and e.connection_id == connection_id
            and (needle is None or needle in e.description.casefold())
        ]
        end = None if length is None else start + length
        return WhitelistPage(total=len(matches), entries=matches[start:end])
