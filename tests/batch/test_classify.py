"""Tests for statement classification, pinning the pattern-based behaviour."""

import pytest

from querydeck.batch import Classification, classify, is_only_comment, is_statement_type
from querydeck.batch.classify import DDL, GUARDED_DML, READ, strip_leading_comments


@pytest.mark.parametrize(
    ("sql", "name", "action"),
    [
        ("SELECT * FROM orders", "orders", "select"),
        ("select a,\n  b\nFROM  Orders\nWHERE x = 1", "orders", "select"),
        ("INSERT INTO customers (id) VALUES (1)", "customers", "insert"),
        ("INSERT INTO customers(id) VALUES (1)", "customers", "insert"),
        ("UPDATE t SET x = 1 WHERE id = 2", "t", "update"),
        ("DELETE FROM t WHERE id = 1", "t", "delete"),
        ("DROP TABLE t", "t", "drop"),
        ("DROP INDEX IF EXISTS idx_a", "idx_a", "drop"),
        ("CREATE TABLE IF NOT EXISTS public.items (id int)", "public.items", "create"),
        ("CREATE OR REPLACE VIEW v AS SELECT * FROM t", "v", "create"),
        ("CREATE TEMPORARY TABLE scratch (id int)", "scratch", "create"),
        ("ALTER TABLE orders ADD COLUMN note text", "orders", "alter"),
        ("REPLACE INTO t VALUES (1)", "t", "replace"),
        ("-- leading note\nSELECT a FROM b", "b", "select"),
        ("/* block */ DELETE FROM logs WHERE day < 3", "logs", "delete"),
    ],
)
def test_classify(sql, name, action):
    assert classify(sql) == Classification(name=name, action=action)


def test_unmatched_returns_none():
    assert classify("not sql") is None


def test_select_without_from_is_unclassified():
    assert classify("SELECT 1") is None


def test_cte_reports_first_from():
    # Pattern matching takes the leftmost SELECT ... FROM, here inside the CTE.
    cls = classify("WITH x AS (SELECT 1 FROM y) SELECT * FROM x")
    assert cls == Classification(name="y", action="select")


def test_is_only_comment():
    assert is_only_comment("-- a\n/* b */")
    assert is_only_comment("-- trailing without newline")
    assert is_only_comment("")
    assert not is_only_comment("SELECT 1 -- c")
    assert not is_only_comment("/* open")


def test_strip_leading_comments():
    assert strip_leading_comments("-- a\n  -- b\n/* c */ SELECT 1") == "SELECT 1"


def test_statement_type_read():
    assert is_statement_type("  /* x */ select 1", READ)
    assert is_statement_type("-- a\n-- b\nWITH t AS (SELECT 1) SELECT * FROM t", READ)
    assert is_statement_type("WITH(x)", READ)
    assert not is_statement_type("SELECTED", READ)


def test_statement_type_ddl():
    assert is_statement_type("DROP TABLE t", DDL)
    assert is_statement_type("create index i on t (a)", DDL)
    assert not is_statement_type("TRUNCATE t", DDL)


def test_guarded_dml_requires_where_for_update_and_delete():
    assert is_statement_type("INSERT INTO t VALUES (1)", GUARDED_DML)
    assert is_statement_type("UPDATE t SET x=1 WHERE id=1", GUARDED_DML)
    assert is_statement_type("DELETE FROM t\nWHERE id = 1", GUARDED_DML)
    assert not is_statement_type("UPDATE t SET x=1", GUARDED_DML)
    assert not is_statement_type("DELETE FROM t", GUARDED_DML)
