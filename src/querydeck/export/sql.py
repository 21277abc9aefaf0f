"""SQL renderers: INSERT and UPDATE statements synthesized from rows."""

from __future__ import annotations

from querydeck.adapters._base import QueryResult
from querydeck.export._values import sql_literal, to_records


def render_insert(
    result: QueryResult,
    *,
    table: str,
    rows_per_statement: int = 1,
    include_columns: bool = True,
    multi_line: bool = False,
    dialect: str = "postgres",
) -> str:
    """One INSERT per `rows_per_statement` rows, each row a VALUES tuple."""
    batch_size = max(rows_per_statement, 1)
    target = table
    if include_columns:
        target = f"{table} ({', '.join(result.column_names)})"

    tuples = [
        "(" + ", ".join(sql_literal(v, dialect) for v in record) + ")"
        for record in to_records(result)
    ]
    statements: list[str] = []
    for i in range(0, len(tuples), batch_size):
        batch = tuples[i : i + batch_size]
        if multi_line:
            values = ",\n".join(f"  {t}" for t in batch)
            statements.append(f"INSERT INTO {target}\nVALUES\n{values};\n")
        else:
            statements.append(f"INSERT INTO {target} VALUES {', '.join(batch)};\n")
    return "".join(statements)


def render_update(
    result: QueryResult,
    *,
    table: str,
    key_columns: int = 1,
    multi_line: bool = False,
    dialect: str = "postgres",
) -> str:
    """One UPDATE per row: the first `key_columns` columns form the WHERE, the rest the SET."""
    names = result.column_names
    statements: list[str] = []
    for record in to_records(result):
        pairs = [
            f"{name} = {sql_literal(v, dialect)}"
            for name, v in zip(names, record, strict=True)
        ]
        where, assignments = pairs[:key_columns], pairs[key_columns:]

        if multi_line:
            lines = [f"UPDATE {table}"]
            if assignments:
                lines.append("SET " + "\n, ".join(assignments))
            lines.append(f"WHERE {' AND '.join(where)};" if where else ";")
            statements.append("\n".join(lines) + "\n\n")
        else:
            stmt = f"UPDATE {table} SET {', '.join(assignments)}"
            if where:
                stmt += f" WHERE {' AND '.join(where)}"
            statements.append(stmt + ";\n")
    return "".join(statements)
