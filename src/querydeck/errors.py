"""Request-aborting errors. Each carries a stable code and an advisory detail."""

from __future__ import annotations

from querydeck.diagnostics import Diagnostic, DiagnosticCode, codes


class QueryDeckError(Exception):
    """Base error: `code` and `message` are contractual, `detail` is advisory."""

    code: DiagnosticCode

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def diagnostic(self) -> Diagnostic:
        diag = Diagnostic.error(self.code, self.message)
        if self.detail:
            diag.note(self.detail)
        return diag

    def to_dict(self) -> dict[str, str | None]:
        return {"code": str(self.code), "message": self.message, "detail": self.detail}


class ConnectionResolutionFailed(QueryDeckError):
    """The connection id is not in the registry."""

    code = codes.CONNECTION_NOT_FOUND


class ExternalConnectFailed(QueryDeckError):
    """Network or authentication failure while reaching the external database."""

    code = codes.CONNECT_FAILED


class TunnelFailed(ExternalConnectFailed):
    code = codes.TUNNEL_FAILED


class HistoryNotFound(QueryDeckError):
    code = codes.HISTORY_NOT_FOUND


class WhitelistNotFound(QueryDeckError):
    code = codes.WHITELIST_NOT_FOUND


class RenderFailed(QueryDeckError):
    code = codes.RENDER_FAILED


class StatementFailed(QueryDeckError):
    """A saved or catalog query failed while paging or exporting it."""

    code = codes.STATEMENT_FAILED
