"""Render diagnostics for terminal output."""

from __future__ import annotations

from querydeck.diagnostics.types import Diagnostic


def render_text(diagnostic: Diagnostic) -> str:
    """Render a Diagnostic as human-readable text."""
    lines = [f"error[{diagnostic.code}]: {diagnostic.message}"]
    for note in diagnostic.notes:
        lines.append(f"  = note: {note}")
    return "\n".join(lines)
