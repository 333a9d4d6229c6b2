"""ASCII table formatter for displaying relations."""

from __future__ import annotations

from sqlprimer.model.relation import Relation
from sqlprimer.model.types import Value

NULL = "NULL"


def format_value(value: Value) -> str:
    """Format a single value for display."""
    if value is None:
        return NULL
    if isinstance(value, float) and value.is_integer():
        return str(int(value)) if abs(value) < 1e15 else str(value)
    return str(value)


def format_relation(rel: Relation, max_rows: int | None = None) -> str:
    """Format a relation as an ASCII table, columns in schema order."""
    if not rel.columns:
        return "(empty relation)"

    headers = rel.column_names
    shown = rel.rows if max_rows is None else rel.rows[:max_rows]
    rows = [[format_value(v) for v in row] for row in shown]

    lines = [_build_table(headers, rows)]
    if len(shown) < len(rel):
        lines.append(f"... {len(rel) - len(shown)} more rows")
    lines.append(_row_count(len(rel)))
    return "\n".join(lines)


def format_schema(rel: Relation) -> str:
    """Format the column names and types of a relation."""
    return _build_table(
        ["column", "type"], [[c.name, c.type] for c in rel.columns]
    )


def _row_count(n: int) -> str:
    return "(1 row)" if n == 1 else f"({n} rows)"


def _build_table(headers: list[str], rows: list[list[str]]) -> str:
    """Build an ASCII table from headers and rows."""
    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    sep = "+-" + "-+-".join("-" * w for w in widths) + "-+"
    header = "| " + " | ".join(h.ljust(w) for h, w in zip(headers, widths)) + " |"

    lines = [sep, header, sep]
    for row in rows:
        line = "| " + " | ".join(cell.ljust(w) for cell, w in zip(row, widths)) + " |"
        lines.append(line)
    lines.append(sep)

    return "\n".join(lines)
