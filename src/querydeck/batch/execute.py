"""Best-effort sequential execution of a multi-statement block."""

from __future__ import annotations

import logging

from querydeck.adapters._base import AdapterError, DatabaseAdapter
from querydeck.batch._types import BatchResult, Classification, Outcome, PersistedQuery
from querydeck.batch.classify import (
    DDL,
    GUARDED_DML,
    READ,
    classify,
    is_only_comment,
    is_statement_type,
)
from querydeck.batch.split import split_statements
from querydeck.diagnostics import Diagnostic, codes
from querydeck.history import QueryHistory
from querydeck.paging import fetch_shape

logger = logging.getLogger(__name__)


class BatchExecutor:
    """Run every statement of a block against one connected adapter.

    A failing statement never aborts the block: its outcome carries the error
    and execution moves on to the next statement.
    """

    def __init__(
        self,
        adapter: DatabaseAdapter,
        *,
        connection_id: str,
        history: QueryHistory,
        actor: str,
        pagination: str | None = None,
        use_page: bool = True,
    ) -> None:
        self.adapter = adapter
        self.connection_id = connection_id
        self.history = history
        self.actor = actor
        self.pagination = pagination or adapter.default_pagination()
        self.use_page = use_page

    async def run(self, sql: str) -> BatchResult:
        statements = split_statements(sql)
        result = BatchResult(statement_count=len(statements))
        pending: Outcome | None = None

        def flush() -> None:
            nonlocal pending
            if pending is not None:
                result.outcomes.append(pending)
                pending = None

        def fail(text: str, cls: Classification | None, diag: Diagnostic) -> None:
            flush()
            result.outcomes.append(
                Outcome(
                    name=cls.name if cls else None,
                    action=cls.action if cls else None,
                    query=text,
                    error=diag,
                )
            )

        for statement in statements:
            text = statement.text
            if is_only_comment(text):
                logger.debug("statement %d: comment only, skipped", statement.index)
                continue

            cls = classify(text)
            if cls is None:
                diag = Diagnostic.error(codes.STATEMENT_UNCLASSIFIABLE, "Unclassifiable")
                fail(text, None, diag)
                continue

            if not result.outcomes and is_statement_type(text, READ):
                try:
                    shape = await fetch_shape(
                        self.adapter, text, pagination=self.pagination, use_page=self.use_page
                    )
                except AdapterError as e:
                    fail(text, cls, _statement_failed(e))
                    continue
                history_id = self.history.save(self.connection_id, text, self.actor)
                result.persisted = PersistedQuery(id=history_id, header=shape.header())
                logger.debug("statement %d: persisted as %d", statement.index, history_id)
                continue

            if is_statement_type(text, DDL):
                try:
                    await self.adapter.execute(text)
                except AdapterError as e:
                    fail(text, cls, _statement_failed(e))
                    continue
                affected = 1
            elif is_statement_type(text, GUARDED_DML):
                try:
                    affected = await self.adapter.execute(text)
                except AdapterError as e:
                    fail(text, cls, _statement_failed(e))
                    continue
            else:
                fail(text, cls, Diagnostic.error(codes.STATEMENT_ABNORMAL, "Abnormal"))
                continue

            logger.debug(
                "statement %d: %s %s affected %d", statement.index, cls.action, cls.name, affected
            )
            if pending is not None and (pending.name, pending.action) == (cls.name, cls.action):
                pending.affected += affected
            else:
                flush()
                pending = Outcome(name=cls.name, action=cls.action, query=text, affected=affected)

        flush()
        return result


def _statement_failed(error: AdapterError) -> Diagnostic:
    return Diagnostic.error(codes.STATEMENT_FAILED, str(error))


async def run_batch(
    adapter: DatabaseAdapter,
    sql: str,
    *,
    connection_id: str,
    history: QueryHistory,
    actor: str,
    pagination: str | None = None,
    use_page: bool = True,
) -> BatchResult:
    """Split, classify and execute `sql` on a connected adapter."""
    executor = BatchExecutor(
        adapter,
        connection_id=connection_id,
        history=history,
        actor=actor,
        pagination=pagination,
        use_page=use_page,
    )
    return await executor.run(sql)
