"""Tests for the INSERT and UPDATE renderers."""

from querydeck.adapters._base import Column, QueryResult, TypeTag
from querydeck.batch import classify, split_statements
from querydeck.export import ExportFormat, ExportOptions, render


def test_insert_one_row_per_statement(items):
    out = render(items, ExportFormat.INSERT, table="items")
    assert out.splitlines() == [
        "INSERT INTO items (id, name, price, ratio, active, created) "
        "VALUES (1, 'Widget, large', '9.90', 0.5, true, '2024-01-02');",
        "INSERT INTO items (id, name, price, ratio, active, created) "
        "VALUES (2, 'say \"hi\"', '10', NULL, false, NULL);",
    ]


def test_insert_batches_without_column_list(items):
    options = ExportOptions(rows_per_statement=5, include_columns=False)
    out = render(items, ExportFormat.INSERT, table="items", options=options)
    assert out == (
        "INSERT INTO items VALUES "
        "(1, 'Widget, large', '9.90', 0.5, true, '2024-01-02'), "
        "(2, 'say \"hi\"', '10', NULL, false, NULL);\n"
    )


def test_insert_multi_line():
    result = QueryResult(
        columns=[Column("id", "int4", TypeTag.INTEGER)], rows=[(1,), (2,), (3,)]
    )
    options = ExportOptions(rows_per_statement=2, multi_line=True)
    out = render(result, ExportFormat.INSERT, table="t", options=options)
    assert out == (
        "INSERT INTO t (id)\nVALUES\n  (1),\n  (2);\n"
        "INSERT INTO t (id)\nVALUES\n  (3);\n"
    )


def test_insert_output_reclassifies_as_insert():
    result = QueryResult(
        columns=[Column("id", "int4", TypeTag.INTEGER), Column("note", "text", TypeTag.TEXT)],
        rows=[(1, "semi;colon"), (2, "O'Brien"), (3, "-- not a comment"), (4, None)],
    )
    for options in (ExportOptions(), ExportOptions(rows_per_statement=3, multi_line=True)):
        out = render(result, ExportFormat.INSERT, table="notes", options=options)
        statements = split_statements(out)
        assert statements
        for statement in statements:
            cls = classify(statement.text)
            assert cls is not None
            assert (cls.name, cls.action) == ("notes", "insert")


def test_insert_with_trailing_backslash_splits_per_row():
    result = QueryResult(
        columns=[Column("path", "text", TypeTag.TEXT)], rows=[("C:\\",), ("x",)]
    )
    for dialect in ("postgres", "mysql"):
        options = ExportOptions(dialect=dialect)
        out = render(result, ExportFormat.INSERT, table="paths", options=options)
        statements = split_statements(out)
        assert len(statements) == 2
        assert [classify(s.text).action for s in statements] == ["insert", "insert"]


def test_insert_empty_result():
    result = QueryResult(columns=[Column("id", "int4", TypeTag.INTEGER)], rows=[])
    assert render(result, ExportFormat.INSERT, table="t") == ""


def test_update_single_line(items):
    out = render(items, ExportFormat.UPDATE, table="items")
    assert out.splitlines()[0] == (
        "UPDATE items SET name = 'Widget, large', price = '9.90', ratio = 0.5, "
        "active = true, created = '2024-01-02' WHERE id = 1;"
    )


def test_update_multiple_key_columns():
    result = QueryResult(
        columns=[
            Column("region", "text", TypeTag.TEXT),
            Column("code", "text", TypeTag.TEXT),
            Column("total", "int4", TypeTag.INTEGER),
        ],
        rows=[("EU", "DE", 5)],
    )
    out = render(result, ExportFormat.UPDATE, table="sales", options=ExportOptions(key_columns=2))
    assert out == "UPDATE sales SET total = 5 WHERE region = 'EU' AND code = 'DE';\n"


def test_update_multi_line():
    result = QueryResult(
        columns=[
            Column("id", "int4", TypeTag.INTEGER),
            Column("a", "text", TypeTag.TEXT),
            Column("b", "int4", TypeTag.INTEGER),
        ],
        rows=[(1, "x", 2)],
    )
    options = ExportOptions(multi_line=True)
    out = render(result, ExportFormat.UPDATE, table="t", options=options)
    assert out == "UPDATE t\nSET a = 'x'\n, b = 2\nWHERE id = 1;\n\n"


def test_update_output_reclassifies_as_update(items):
    out = render(items, ExportFormat.UPDATE, table="items")
    actions = [classify(s.text).action for s in split_statements(out)]
    assert actions == ["update", "update"]
