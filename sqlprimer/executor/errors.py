"""Query error taxonomy and translation of engine exceptions."""

from __future__ import annotations

import re

import duckdb


class QueryError(Exception):
    """Raised when a query cannot be executed."""


class QuerySyntaxError(QueryError):
    """Raised when the query text cannot be parsed."""


class UnknownRelationError(QueryError):
    """Raised when a query references a table that is not registered."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f"Unknown relation: {name!r}")


class UnknownColumnError(QueryError):
    """Raised when a query references a column that does not exist."""


class TypeMismatchError(QueryError):
    """Raised when an operation is applied to incompatible types."""


_MISSING_TABLE = re.compile(r"Table with name \"?([^\s\"!]+)\"? does not exist")
_MISSING_COLUMN = re.compile(
    r"Referenced column \"?([^\s\"]+)\"? not found"
    r"|does not have a column named \"([^\"]+)\""
)

# Binder messages that describe a type conflict rather than a bad name.
_TYPE_CONFLICT_MARKERS = (
    "Cannot compare values",
    "No function matches",
    "explicit cast",
    "Cannot mix values",
)


def translate_error(exc: duckdb.Error) -> QueryError:
    """Map a DuckDB exception onto the query error taxonomy."""
    message = str(exc)

    if isinstance(exc, duckdb.ParserException):
        return QuerySyntaxError(message)

    if isinstance(exc, duckdb.CatalogException):
        m = _MISSING_TABLE.search(message)
        if m:
            return UnknownRelationError(m.group(1), message)

    if isinstance(exc, (duckdb.ConversionException, duckdb.TypeMismatchException)):
        return TypeMismatchError(message)

    if isinstance(exc, duckdb.BinderException):
        if _MISSING_COLUMN.search(message):
            return UnknownColumnError(message)
        if any(marker in message for marker in _TYPE_CONFLICT_MARKERS):
            return TypeMismatchError(message)

    return QueryError(message)
