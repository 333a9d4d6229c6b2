"""Spreadsheet loading: parse CSV and Excel data into Relations."""

from __future__ import annotations

import csv
import logging
import zipfile
from pathlib import Path
from typing import Iterable, Sequence, TextIO

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from sqlprimer.model.relation import Relation
from sqlprimer.model.types import (
    BIGINT,
    BOOLEAN,
    DOUBLE,
    VARCHAR,
    Column,
    Value,
    coerce_value,
    infer_sql_type,
)

logger = logging.getLogger(__name__)

CSV_SUFFIXES = (".csv",)
EXCEL_SUFFIXES = (".xlsx", ".xlsm")


class LoadError(Exception):
    """Raised when data loading fails."""


def load_table(
    path: str | Path,
    name: str | None = None,
    *,
    sheet: str | None = None,
    genkey: str | None = None,
) -> Relation:
    """Load a CSV or Excel file, choosing the reader by file suffix.

    *name* defaults to the file stem and is only used in error messages and
    for the default *genkey* naming done by callers.
    """
    path = Path(path)
    name = name or path.stem
    suffix = path.suffix.lower()
    if suffix in CSV_SUFFIXES:
        if sheet is not None:
            raise LoadError(f"--sheet only applies to Excel files, not {path.name}")
        try:
            with open(path, newline="", encoding="utf-8-sig") as f:
                return load_csv(f, name, genkey=genkey)
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Cannot read {path}: {e}") from e
    if suffix in EXCEL_SUFFIXES:
        return load_xlsx(path, name, sheet=sheet, genkey=genkey)
    raise LoadError(f"Unsupported file type {suffix or '(none)'!r} for {path}")


def load_csv(
    source: TextIO,
    name: str,
    *,
    genkey: str | None = None,
) -> Relation:
    """Read CSV data from a text stream and return a Relation.

    The first row is treated as headers (column names).
    Type inference is applied per column: int > float > bool > str.
    Empty cells become null. Rows with the wrong number of fields are skipped.

    If *genkey* is provided, a synthetic key column named ``{genkey}_id``
    is prepended with sequential integers starting at 1.
    """
    reader = csv.reader(source)
    try:
        headers = next(reader)
    except StopIteration:
        raise LoadError(f"{name}: no header row") from None

    headers = [_header_name(h, i) for i, h in enumerate(headers)]
    rows: list[list[Value]] = []
    for lineno, row in enumerate(reader, start=2):
        if not row:
            continue
        if len(row) != len(headers):
            logger.warning(
                "%s: skipping line %d with %d fields (expected %d)",
                name, lineno, len(row), len(headers),
            )
            continue
        rows.append([_blank_to_none(v) for v in row])

    return _build_relation(name, headers, rows, genkey)


def load_xlsx(
    path: str | Path,
    name: str,
    *,
    sheet: str | None = None,
    genkey: str | None = None,
) -> Relation:
    """Read one worksheet of an Excel workbook and return a Relation.

    The first row holds the column names. Numeric, boolean and date cells keep
    the type openpyxl gives them; text cells go through the same inference as
    CSV data. Fully empty rows are skipped.
    """
    try:
        wb = openpyxl.load_workbook(path, read_only=True, data_only=True)
    except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as e:
        raise LoadError(f"Cannot read {path}: {e}") from e

    try:
        if sheet is None:
            ws = wb.worksheets[0]
        elif sheet in wb.sheetnames:
            ws = wb[sheet]
        else:
            raise LoadError(
                f"{path}: no sheet named {sheet!r} (have {', '.join(wb.sheetnames)})"
            )

        values = ws.iter_rows(values_only=True)
        try:
            header_row = next(values)
        except StopIteration:
            raise LoadError(f"{name}: no header row") from None

        headers = [_header_name(h, i) for i, h in enumerate(header_row)]
        rows: list[list[Value]] = []
        for row in values:
            cells = [_blank_to_none(v) for v in row]
            if all(v is None for v in cells):
                continue
            cells = (cells + [None] * len(headers))[: len(headers)]
            rows.append(cells)
    finally:
        wb.close()

    return _build_relation(name, headers, rows, genkey)


def _build_relation(
    name: str,
    headers: list[str],
    rows: list[list[Value]],
    genkey: str | None,
) -> Relation:
    seen: dict[str, str] = {}
    for h in headers:
        if h.lower() in seen:
            raise LoadError(
                f"{name}: duplicate column {h!r} (also {seen[h.lower()]!r})"
            )
        seen[h.lower()] = h

    key_col: str | None = None
    if genkey is not None:
        key_col = f"{genkey}_id"
        if key_col in headers:
            raise LoadError(
                f"Cannot generate key column {key_col!r}: "
                "column already exists in the data"
            )

    types = infer_types(headers, rows)
    columns = [Column(h, types[h]) for h in headers]
    data = [coerce_row(row, [types[h] for h in headers]) for row in rows]

    if key_col is not None:
        columns.insert(0, Column(key_col, BIGINT))
        data = [[i, *row] for i, row in enumerate(data, start=1)]

    logger.info("Loaded %s: %d rows, %d columns", name, len(data), len(columns))
    return Relation(columns, data)


def infer_types(headers: Sequence[str], rows: list[list[Value]]) -> dict[str, str]:
    """Scan column values and infer the SQL type per column.

    Text values are inferred with priority int > float > bool > str:
    a column is BIGINT if every text value parses as int, DOUBLE if every
    text value parses as a number, BOOLEAN if every text value is 'true' or
    'false' (case-insensitive), otherwise VARCHAR. Non-text values (from
    spreadsheets) vote with their own type.
    """
    result: dict[str, str] = {}
    for i, h in enumerate(headers):
        result[h] = _infer_column_type(row[i] for row in rows)
    return result


def _infer_column_type(values: Iterable[Value]) -> str:
    """Infer the type for a single column's values."""
    present = [v for v in values if v is not None]
    text = [v for v in present if isinstance(v, str)]
    if not text:
        return infer_sql_type(present)
    if len(text) < len(present):
        # Text mixed with typed cells: only a numeric mix can stay numeric.
        typed = infer_sql_type(v for v in present if not isinstance(v, str))
        if typed in (BIGINT, DOUBLE) and all(_is_float(v) for v in text):
            return DOUBLE
        return VARCHAR

    if all(_is_int(v) for v in text):
        return BIGINT
    if all(_is_float(v) for v in text):
        return DOUBLE
    if all(v.lower() in ("true", "false") for v in text):
        return BOOLEAN
    return VARCHAR


def _is_int(s: str) -> bool:
    """Check if a string is a valid integer literal."""
    try:
        int(s)
        return True
    except ValueError:
        return False


def _is_float(s: str) -> bool:
    """Check if a string is a valid finite number."""
    try:
        f = float(s)
    except ValueError:
        return False
    return f == f and f not in (float("inf"), float("-inf"))


def coerce_row(row: Sequence[Value], types: Sequence[str]) -> list[Value]:
    """Convert the values of a row to their inferred column types."""
    return [_coerce_cell(v, t) for v, t in zip(row, types)]


def _coerce_cell(value: Value, sql_type: str) -> Value:
    if isinstance(value, str):
        if sql_type == BIGINT:
            return int(value)
        if sql_type == DOUBLE:
            return float(value)
        if sql_type == BOOLEAN:
            return value.lower() == "true"
    return coerce_value(value, sql_type)


def _blank_to_none(value: Value) -> Value:
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    return value


def _header_name(value: Value, position: int) -> str:
    if value is None or str(value).strip() == "":
        return f"column{position + 1}"
    return str(value).strip()
