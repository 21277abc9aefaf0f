"""Classify SQL statements by verb and target object.

Pattern-based, not a parser: subqueries and CTEs referencing several tables
yield whichever name the leftmost matching alternative captures.
"""

from __future__ import annotations

import re

from querydeck.batch._types import Classification

_LEADING_COMMENTS = r"^\s*(?:(?:--[^\n]*|/\*.*?\*/)\s*)*"
_NAME = r"([^\s(),;]+)"

_OBJECT_KIND = (
    r"(?:(?:OR\s+REPLACE|TEMPORARY|TEMP|UNIQUE|MATERIALIZED|GLOBAL|LOCAL|UNLOGGED)\s+)*"
    r"(?:(?:TABLE|VIEW|FUNCTION|PROCEDURE|INDEX|SCHEMA|SEQUENCE|TRIGGER|DATABASE|TYPE"
    r"|EXTENSION|EVENT|USER|ROLE|DOMAIN)\s+)?"
    r"(?:IF\s+(?:NOT\s+)?EXISTS\s+)?"
    r"(?:INTO\s+)?"
)

_QUERY_PATTERN = re.compile(
    r"(SELECT)\s+.*?\s+FROM\s+" + _NAME
    + r"|(INSERT)\s+INTO\s+" + _NAME
    + r"|(UPDATE)\s+" + _NAME + r"\s+SET\b"
    + r"|(DELETE)\s+FROM\s+" + _NAME
    + r"|\b(CREATE|REPLACE|ALTER|DROP)\s+" + _OBJECT_KIND + _NAME,
    re.IGNORECASE | re.DOTALL,
)

_ONLY_COMMENT = re.compile(_LEADING_COMMENTS + r"$", re.DOTALL)
_LEADING = re.compile(_LEADING_COMMENTS, re.DOTALL)

# Verb alternations checked by the executor.
READ = r"(SELECT|WITH)"
DDL = r"(DROP|CREATE|ALTER)"
GUARDED_DML = r"(INSERT|(UPDATE|DELETE)\s.+\s?WHERE)"


def strip_leading_comments(sql: str) -> str:
    return _LEADING.sub("", sql, count=1)


def classify(sql: str) -> Classification | None:
    """Extract the lowercased (name, action) of a statement, or None if unmatched."""
    match = _QUERY_PATTERN.search(strip_leading_comments(sql))
    if match is None:
        return None
    groups = match.groups()
    for i in range(0, len(groups), 2):
        action, name = groups[i], groups[i + 1]
        if action is not None and name is not None:
            return Classification(name=name.lower(), action=action.lower())
    return None


def is_only_comment(sql: str) -> bool:
    """True for statements made of whitespace, line comments and block comments only."""
    return _ONLY_COMMENT.match(sql) is not None


def is_statement_type(sql: str, keyword: str) -> bool:
    """True if the statement starts with `keyword` (a regex alternation).

    Leading comments are skipped; the keyword must be followed by whitespace,
    an opening parenthesis or the end of the statement.
    """
    pattern = _LEADING_COMMENTS + keyword + r"(\s|\(|$)"
    return re.match(pattern, sql, re.IGNORECASE | re.DOTALL) is not None
