"""Diagnostic values attached to statement outcomes and request errors."""

from __future__ import annotations

from dataclasses import dataclass, field

from querydeck.diagnostics.codes import DiagnosticCode


@dataclass
class Diagnostic:
    """An error: a stable code, a contractual message and advisory notes."""

    code: DiagnosticCode
    message: str
    notes: list[str] = field(default_factory=list)

    @classmethod
    def error(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(code=code, message=message)

    def note(self, note: str) -> Diagnostic:
        self.notes.append(note)
        return self

    def to_dict(self) -> dict[str, str]:
        """Inline form used in statement outcomes; notes are advisory and left out."""
        return {"code": str(self.code), "message": self.message}
