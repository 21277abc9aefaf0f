"""Tests for the audit log and its retention cleanup."""

import json
from datetime import UTC, datetime, timedelta

from querydeck.querylog import cleanup_old_logs, log_batch, log_export


def test_log_batch_creates_file(tmp_path):
    """log_batch creates a daily JSONL file and appends an entry."""
    log_dir = tmp_path / "logs"
    log_batch(
        log_dir,
        sql="INSERT INTO t VALUES (1)",
        db="7",
        dialect="postgres",
        actor="alice",
        statements=1,
        outcomes=[{"name": "t", "action": "insert", "affected": 1}],
    )

    log_files = list(log_dir.glob("*.jsonl"))
    assert len(log_files) == 1

    today = datetime.now(UTC).strftime("%Y-%m-%d")
    assert log_files[0].name == f"{today}.jsonl"

    entry = json.loads(log_files[0].read_text().strip())
    assert entry["kind"] == "batch"
    assert entry["sql"] == "INSERT INTO t VALUES (1)"
    assert entry["db"] == "7"
    assert entry["actor"] == "alice"
    assert entry["outcomes"][0]["affected"] == 1
    assert entry["error"] is None
    assert "ts" in entry


def test_log_appends_to_existing(tmp_path):
    """Batch and export entries append to the same daily file."""
    log_batch(tmp_path, sql="SELECT 1", db="7")
    log_export(tmp_path, history_id=1719830400000123, db="7", fmt="csv", rows=3)

    log_files = list(tmp_path.glob("*.jsonl"))
    assert len(log_files) == 1

    lines = log_files[0].read_text().strip().split("\n")
    assert len(lines) == 2
    assert json.loads(lines[0])["kind"] == "batch"
    export = json.loads(lines[1])
    assert export["kind"] == "export"
    assert export["format"] == "csv"
    assert export["rows"] == 3


def test_cleanup_deletes_old_files(tmp_path):
    """Files older than retention period are deleted."""
    old_date = (datetime.now(UTC) - timedelta(days=45)).strftime("%Y-%m-%d")
    recent_date = (datetime.now(UTC) - timedelta(days=5)).strftime("%Y-%m-%d")
    (tmp_path / f"{old_date}.jsonl").write_text('{"sql": "old"}\n')
    (tmp_path / f"{recent_date}.jsonl").write_text('{"sql": "recent"}\n')

    deleted = cleanup_old_logs(tmp_path, retention_days=30)

    assert deleted == 1
    assert not (tmp_path / f"{old_date}.jsonl").exists()
    assert (tmp_path / f"{recent_date}.jsonl").exists()


def test_cleanup_ignores_non_date_files(tmp_path):
    """Non-date-named files are left alone."""
    (tmp_path / "notes.jsonl").write_text("not a log\n")
    assert cleanup_old_logs(tmp_path, retention_days=0) == 0
    assert (tmp_path / "notes.jsonl").exists()


def test_cleanup_removes_empty_directory(tmp_path):
    log_dir = tmp_path / "logs"
    log_dir.mkdir()
    old_date = (datetime.now(UTC) - timedelta(days=45)).strftime("%Y-%m-%d")
    (log_dir / f"{old_date}.jsonl").write_text("{}\n")

    assert cleanup_old_logs(log_dir, retention_days=30) == 1
    assert not log_dir.exists()


def test_cleanup_no_directory(tmp_path):
    """No error if log directory doesn't exist."""
    assert cleanup_old_logs(tmp_path / "nonexistent") == 0
