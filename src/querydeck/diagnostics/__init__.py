"""Diagnostic system: stable codes, diagnostic values and rendering."""

from querydeck.diagnostics.codes import DiagnosticCode
from querydeck.diagnostics.types import Diagnostic

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
]
