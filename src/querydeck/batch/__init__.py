"""Multi-statement batch engine: split, classify, execute."""

from __future__ import annotations

from querydeck.batch._types import (
    BatchResult,
    Classification,
    Outcome,
    PersistedQuery,
    Statement,
)
from querydeck.batch.classify import classify, is_only_comment, is_statement_type
from querydeck.batch.execute import BatchExecutor, run_batch
from querydeck.batch.split import split_statements

__all__ = [
    "BatchExecutor",
    "BatchResult",
    "Classification",
    "Outcome",
    "PersistedQuery",
    "Statement",
    "classify",
    "is_only_comment",
    "is_statement_type",
    "run_batch",
    "split_statements",
]
