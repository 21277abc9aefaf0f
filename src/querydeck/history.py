"""Query history: the first read statement of each batch, kept for paging and export."""

from __future__ import annotations

import json
import random
import time
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from querydeck.errors import HistoryNotFound

ID_DIGITS = 16


def generate_id() -> int:
    """Epoch milliseconds scaled by 1000 plus a random 0-999 suffix."""
    millis = int(time.time() * 1000)
    return millis * 1000 + random.randint(0, 999)


def validate_id(value: int | str) -> int:
    """Return `value` as an int if it looks like a history id, else raise HistoryNotFound."""
    text = str(value).strip()
    if len(text) != ID_DIGITS or not text.isdigit():
        raise HistoryNotFound(f"invalid history id: {value}")
    return int(text)


@dataclass
class HistoryEntry:
    id: int
    connection_id: str
    query: str
    actor: str
    created_at: str


class QueryHistory:
    """Append-only JSONL store of persisted queries."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def save(self, connection_id: str, query: str, actor: str) -> int:
        entry = HistoryEntry(
            id=generate_id(),
            connection_id=connection_id,
            query=query,
            actor=actor,
            created_at=datetime.now(UTC).isoformat(),
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a") as f:
            f.write(json.dumps(asdict(entry)) + "\n")
        return entry.id

    def _entries(self) -> list[HistoryEntry]:
        if not self.path.exists():
            return []
        entries: list[HistoryEntry] = []
        for line in self.path.read_text().splitlines():
            if line.strip():
                entries.append(HistoryEntry(**json.loads(line)))
        return entries

    def get(self, history_id: int) -> HistoryEntry | None:
        for entry in self._entries():
            if entry.id == history_id:
                return entry
        return None

    def require(self, history_id: int | str) -> HistoryEntry:
        """Validate and look up an id, raising HistoryNotFound on a miss."""
        entry = self.get(validate_id(history_id))
        if entry is None:
            raise HistoryNotFound(f"history entry not found: {history_id}")
        return entry

    def list(self, connection_id: str | None = None) -> list[HistoryEntry]:
        """Entries newest first, optionally restricted to one connection."""
        entries = self._entries()
        if connection_id is not None:
            entries = [e for e in entries if e.connection_id == connection_id]
        return list(reversed(entries))
