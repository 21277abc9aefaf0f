"""Audit log: one JSON line per batch or export in daily files, with retention cleanup."""

from __future__ import annotations

import contextlib
import json
from datetime import UTC, datetime, timedelta
from pathlib import Path

DEFAULT_RETENTION_DAYS = 30


def _today_file(log_dir: Path) -> Path:
    """Return today's log file path."""
    today = datetime.now(UTC).strftime("%Y-%m-%d")
    return log_dir / f"{today}.jsonl"


def _append(log_dir: Path, entry: dict[str, object]) -> None:
    log_file = _today_file(log_dir)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    with open(log_file, "a") as f:
        f.write(json.dumps(entry, default=str) + "\n")


def log_batch(
    log_dir: Path,
    *,
    sql: str,
    db: str,
    dialect: str | None = None,
    actor: str | None = None,
    statements: int = 0,
    outcomes: list[dict[str, object]] | None = None,
    history_id: int | None = None,
    error: str | None = None,
    duration_ms: float | None = None,
) -> None:
    """Append one entry per batch run to today's JSONL file."""
    _append(
        log_dir,
        {
            "ts": datetime.now(UTC).isoformat(),
            "kind": "batch",
            "db": db,
            "dialect": dialect,
            "actor": actor,
            "sql": sql,
            "statements": statements,
            "outcomes": outcomes or [],
            "history_id": history_id,
            "error": error,
            "duration_ms": duration_ms,
        },
    )


def log_export(
    log_dir: Path,
    *,
    history_id: int,
    db: str,
    fmt: str,
    actor: str | None = None,
    rows: int = 0,
    error: str | None = None,
) -> None:
    """Append one entry per export to today's JSONL file."""
    _append(
        log_dir,
        {
            "ts": datetime.now(UTC).isoformat(),
            "kind": "export",
            "db": db,
            "actor": actor,
            "history_id": history_id,
            "format": fmt,
            "rows": rows,
            "error": error,
        },
    )


def cleanup_old_logs(log_dir: Path, *, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
    """Delete log files older than retention_days. Returns count of deleted files."""
    cutoff = datetime.now(UTC) - timedelta(days=retention_days)
    deleted = 0

    if not log_dir.exists():
        return 0

    for log_file in log_dir.glob("*.jsonl"):
        # Parse date from filename (YYYY-MM-DD.jsonl)
        try:
            file_date = datetime.strptime(log_file.stem, "%Y-%m-%d").replace(tzinfo=UTC)
        except ValueError:
            continue
        if file_date < cutoff:
            log_file.unlink()
            deleted += 1

    # Remove the directory once it is empty
    with contextlib.suppress(OSError):
        log_dir.rmdir()

    return deleted
