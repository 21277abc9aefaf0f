"""Text renderers: JSON, CSV and XML."""

from __future__ import annotations

import csv
import io
import json
import re
from xml.sax.saxutils import escape

from querydeck.adapters._base import QueryResult
from querydeck.export._values import text_value, to_records

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}
_XML_INVALID = re.compile(r"[^\w.-]")


def render_json(result: QueryResult) -> str:
    names = result.column_names
    rows = [dict(zip(names, record, strict=True)) for record in to_records(result)]
    return json.dumps(rows, indent=2)


def render_csv(result: QueryResult, *, header: bool = True, delimiter: str = ",") -> str:
    """Values containing the delimiter, a quote or a newline are quoted, quotes doubled."""
    buf = io.StringIO()
    writer = csv.writer(buf, delimiter=delimiter, lineterminator="\n")
    if header:
        writer.writerow(result.column_names)
    for record in to_records(result):
        writer.writerow([text_value(v) for v in record])
    return buf.getvalue()


def xml_name(name: str) -> str:
    """Make a column or table name usable as an XML element name."""
    cleaned = _XML_INVALID.sub("_", name)
    if not cleaned or not (cleaned[0].isalpha() or cleaned[0] == "_"):
        cleaned = "_" + cleaned
    return cleaned


def render_xml(result: QueryResult, *, table: str) -> str:
    """`<List>` root with one element per row, named after the table."""
    row_tag = xml_name(table)
    tags = [xml_name(n) for n in result.column_names]
    lines = ["<List>"]
    for record in to_records(result):
        lines.append(f"  <{row_tag}>")
        for tag, value in zip(tags, record, strict=True):
            lines.append(f"    <{tag}>{escape(text_value(value), _XML_ENTITIES)}</{tag}>")
        lines.append(f"  </{row_tag}>")
    lines.append("</List>")
    return "\n".join(lines) + "\n"
