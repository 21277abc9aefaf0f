"""Stable, searchable error code registry.

Ranges:
- Q01xx: Connection, tunnel, history and whitelist resolution (abort the request)
- Q02xx: Per-statement outcomes (reported inline, batch continues)
- Q03xx: Rendering (abort the request)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DiagnosticCode:
    value: int

    def __str__(self) -> str:
        return f"Q{self.value:04d}"


# Resolution (Q01xx)
CONNECTION_NOT_FOUND = DiagnosticCode(101)
CONNECT_FAILED = DiagnosticCode(102)
TUNNEL_FAILED = DiagnosticCode(103)
HISTORY_NOT_FOUND = DiagnosticCode(104)
WHITELIST_NOT_FOUND = DiagnosticCode(105)

# Statements (Q02xx)
STATEMENT_UNCLASSIFIABLE = DiagnosticCode(201)
STATEMENT_FAILED = DiagnosticCode(202)
STATEMENT_ABNORMAL = DiagnosticCode(203)

# Rendering (Q03xx)
RENDER_FAILED = DiagnosticCode(301)
