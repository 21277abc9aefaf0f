"""Tests for the XLSX renderer."""

import io

import pytest
from openpyxl import load_workbook

from querydeck.adapters._base import Column, QueryResult, TypeTag
from querydeck.errors import RenderFailed
from querydeck.export import ExportFormat, ExportOptions, render


def _sheet(data: bytes):
    return load_workbook(io.BytesIO(data)).active


@pytest.fixture
def sales():
    return QueryResult(
        columns=[
            Column("region", "text", TypeTag.TEXT),
            Column("country", "text", TypeTag.TEXT),
            Column("total", "int4", TypeTag.INTEGER),
        ],
        rows=[("EU", "DE", 1), ("EU", "DE", 2), ("EU", "FR", 3), ("US", "NY", 4)],
    )


def test_returns_bytes(sales):
    data = render(sales, ExportFormat.XLSX)
    assert isinstance(data, bytes)
    assert data[:2] == b"PK"


def test_header_style(sales):
    ws = _sheet(render(sales, ExportFormat.XLSX))
    assert ws.title == "Sheet1"
    assert [c.value for c in ws[1]] == ["region", "country", "total"]
    header = ws["A1"]
    assert header.font.b is True
    assert header.font.sz == 14
    assert header.font.color.rgb.endswith("FFFFFF")
    assert header.fill.fill_type == "solid"
    assert header.fill.fgColor.rgb.endswith("000000")


def test_values_without_grouping(sales):
    ws = _sheet(render(sales, ExportFormat.XLSX))
    rows = [[c.value for c in row] for row in ws.iter_rows(min_row=2)]
    assert rows == [["EU", "DE", 1], ["EU", "DE", 2], ["EU", "FR", 3], ["US", "NY", 4]]


def test_grouped_columns_blank_repeats(sales):
    ws = _sheet(render(sales, ExportFormat.XLSX, options=ExportOptions(group_columns=2)))
    rows = [[c.value for c in row] for row in ws.iter_rows(min_row=2)]
    assert rows == [["EU", "DE", 1], [None, None, 2], [None, "FR", 3], ["US", "NY", 4]]


def test_empty_result_keeps_header():
    result = QueryResult(columns=[Column("id", "int4", TypeTag.INTEGER)], rows=[])
    ws = _sheet(render(result, ExportFormat.XLSX))
    assert ws.max_row == 1
    assert ws["A1"].value == "id"


def test_illegal_characters_fail_render():
    result = QueryResult(columns=[Column("note", "text", TypeTag.TEXT)], rows=[("bell\x07",)])
    with pytest.raises(RenderFailed) as excinfo:
        render(result, ExportFormat.XLSX)
    assert str(excinfo.value.code) == "Q0301"
