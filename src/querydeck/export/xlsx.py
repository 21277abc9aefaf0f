"""XLSX renderer (openpyxl): styled header, grouped leading columns."""

from __future__ import annotations

import io

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from querydeck.adapters._base import QueryResult
from querydeck.export._values import text_value, to_records

SHEET_TITLE = "Sheet1"
HEADER_FONT = Font(bold=True, color="FFFFFF", size=14)
HEADER_FILL = PatternFill(fill_type="solid", fgColor="000000", bgColor="000000")


def render_xlsx(result: QueryResult, *, group_columns: int = 0) -> bytes:
    """Workbook bytes. In the first `group_columns` columns a value equal to the
    previous one shown in that column is left blank, imitating merged cells."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    for col, name in enumerate(result.column_names, start=1):
        cell = ws.cell(row=1, column=col, value=name)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL

    group = min(max(group_columns, 0), len(result.columns))
    last_seen: list[str | None] = [None] * group
    for record in to_records(result):
        row = list(record)
        for col in range(group):
            shown = text_value(row[col])
            if shown == last_seen[col]:
                row[col] = None
            else:
                last_seen[col] = shown
        ws.append(row)

    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()
