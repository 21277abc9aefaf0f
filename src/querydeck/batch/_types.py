"""Internal types for the batch engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from querydeck.diagnostics import Diagnostic


@dataclass(frozen=True)
class Statement:
    text: str
    index: int


@dataclass(frozen=True)
class Classification:
    name: str
    action: str


@dataclass
class Outcome:
    """Result of one statement, or of a run of coalesced statements."""

    name: str | None
    action: str | None
    query: str
    affected: int = 0
    error: Diagnostic | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, object]:
        d: dict[str, object] = {"name": self.name, "action": self.action, "query": self.query}
        if self.error is not None:
            d.update(self.error.to_dict())
        else:
            d["affected"] = self.affected
        return d


@dataclass
class PersistedQuery:
    """A read statement run for one row before any outcome was emitted, saved for paging/export.

    When several qualify, the last one wins.
    """

    id: int
    header: list[dict[str, str]]


@dataclass
class BatchResult:
    outcomes: list[Outcome] = field(default_factory=list)
    persisted: PersistedQuery | None = None
    statement_count: int = 0

    def to_dict(self) -> dict[str, object]:
        if self.outcomes:
            return {"data": [o.to_dict() for o in self.outcomes]}
        if self.persisted is not None:
            return {"id": self.persisted.id, "header": self.persisted.header}
        return {"message": "No valid query executed"}
