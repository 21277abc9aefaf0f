"""Split a raw multi-statement SQL block into individual statements.

A single left-to-right scan. Semicolons terminate a statement only outside
quotes, comments, dollar-quoted bodies and BEGIN...END blocks. Malformed input
(unterminated quotes or comments) is consumed to the end without error.
"""

from __future__ import annotations

import enum
import re

from querydeck.batch._types import Statement


class Mode(enum.Enum):
    NORMAL = "normal"
    SINGLE_QUOTE = "single_quote"
    DOUBLE_QUOTE = "double_quote"
    DOLLAR_QUOTE = "dollar_quote"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    BEGIN_END_BLOCK = "begin_end_block"


_WORD = re.compile(r"[^\W\d][\w$]*")
_DOLLAR_TAG = re.compile(r"\$(?:[^\W\d]\w*)?\$")

# BEGIN that starts a transaction rather than a routine body.
_TRANSACTION_BEGIN = re.compile(
    r"\s*(?:;|$|(?:TRANSACTION|WORK|ISOLATION|READ|NOT\s+DEFERRABLE|DEFERRABLE)\b)",
    re.IGNORECASE,
)
# END IF / END LOOP / ... close control flow, not the enclosing block.
_NON_CLOSING_END = re.compile(r"\s+(?:IF|LOOP|WHILE|REPEAT)\b", re.IGNORECASE)
_END_CASE = re.compile(r"\s+CASE\b", re.IGNORECASE)


def _is_word_char(c: str) -> bool:
    return c.isalnum() or c in "_$"


def split_statements(sql: str) -> list[Statement]:
    """Split `sql` into trimmed, non-empty statements in order of appearance."""
    statements: list[Statement] = []
    buf: list[str] = []
    mode = Mode.NORMAL
    depth = 0
    dollar_tag = ""
    i, n = 0, len(sql)

    def emit() -> None:
        text = "".join(buf).strip()
        if text:
            statements.append(Statement(text=text, index=len(statements)))
        buf.clear()

    def resume() -> Mode:
        return Mode.BEGIN_END_BLOCK if depth > 0 else Mode.NORMAL

    while i < n:
        c = sql[i]

        if mode in (Mode.NORMAL, Mode.BEGIN_END_BLOCK):
            if c == "'":
                mode = Mode.SINGLE_QUOTE
            elif c == '"':
                mode = Mode.DOUBLE_QUOTE
            elif sql.startswith("--", i):
                mode = Mode.LINE_COMMENT
                buf.append("--")
                i += 2
                continue
            elif sql.startswith("/*", i):
                mode = Mode.BLOCK_COMMENT
                buf.append("/*")
                i += 2
                continue
            elif c == "$" and not (i and _is_word_char(sql[i - 1])):
                m = _DOLLAR_TAG.match(sql, i)
                if m:
                    dollar_tag = m.group()
                    mode = Mode.DOLLAR_QUOTE
                    buf.append(dollar_tag)
                    i = m.end()
                    continue
            elif (c.isalpha() or c == "_") and not (i and _is_word_char(sql[i - 1])):
                word = _WORD.match(sql, i).group()
                end = i + len(word)
                keyword = word.upper()
                if keyword == "BEGIN":
                    if depth > 0 or not _TRANSACTION_BEGIN.match(sql, end):
                        depth += 1
                elif depth > 0 and keyword == "CASE":
                    depth += 1
                elif depth > 0 and keyword == "END" and not _NON_CLOSING_END.match(sql, end):
                    m = _END_CASE.match(sql, end)
                    if m:
                        end = m.end()
                    depth -= 1
                buf.append(sql[i:end])
                mode = resume()
                i = end
                continue
            elif c == ";" and depth == 0:
                emit()
                i += 1
                continue

            buf.append(c)
            i += 1

        elif mode in (Mode.SINGLE_QUOTE, Mode.DOUBLE_QUOTE):
            buf.append(c)
            if c == "\\" and i + 1 < n:
                buf.append(sql[i + 1])
                i += 2
                continue
            if c == ("'" if mode is Mode.SINGLE_QUOTE else '"'):
                mode = resume()
            i += 1

        elif mode is Mode.LINE_COMMENT:
            buf.append(c)
            if c == "\n":
                mode = resume()
            i += 1

        elif mode is Mode.BLOCK_COMMENT:
            if sql.startswith("*/", i):
                buf.append("*/")
                mode = resume()
                i += 2
            else:
                buf.append(c)
                i += 1

        else:  # Mode.DOLLAR_QUOTE
            close = sql.find(dollar_tag, i)
            if close == -1:
                buf.append(sql[i:])
                i = n
            else:
                close += len(dollar_tag)
                buf.append(sql[i:close])
                mode = resume()
                i = close

    emit()
    return statements
