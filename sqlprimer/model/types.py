"""Core types: Column, Value and SQL type inference."""

from __future__ import annotations

import datetime
from decimal import Decimal
from typing import Iterable, NamedTuple, Union

# A Value is a single scalar cell; None is SQL NULL.
Value = Union[int, float, Decimal, str, bool, datetime.date, datetime.datetime, None]

BIGINT = "BIGINT"
DOUBLE = "DOUBLE"
BOOLEAN = "BOOLEAN"
VARCHAR = "VARCHAR"
DATE = "DATE"
TIMESTAMP = "TIMESTAMP"


class Column(NamedTuple):
    """A named, typed column of a relation."""

    name: str
    type: str = VARCHAR


def infer_sql_type(values: Iterable[Value]) -> str:
    """Pick the SQL type that holds every non-null value.

    bool -> BOOLEAN, int -> BIGINT, any mix of int/float/Decimal -> DOUBLE,
    datetime -> TIMESTAMP, date -> DATE. Everything else (text, or a mix of
    text and other kinds) is VARCHAR, as is a column with no values at all.
    """
    kinds: set[str] = set()
    for v in values:
        if v is None:
            continue
        kinds.add(_value_kind(v))

    if not kinds:
        return VARCHAR
    if len(kinds) == 1:
        return kinds.pop()
    if kinds <= {BIGINT, DOUBLE}:
        return DOUBLE
    return VARCHAR


def _value_kind(value: Value) -> str:
    # bool is a subclass of int and datetime of date; test the narrower first.
    if isinstance(value, bool):
        return BOOLEAN
    if isinstance(value, int):
        return BIGINT
    if isinstance(value, (float, Decimal)):
        return DOUBLE
    if isinstance(value, datetime.datetime):
        return TIMESTAMP
    if isinstance(value, datetime.date):
        return DATE
    return VARCHAR


def coerce_value(value: Value, sql_type: str) -> Value:
    """Convert a value to the Python representation of *sql_type*."""
    if value is None:
        return None
    if sql_type == DOUBLE:
        return float(value)
    if sql_type == VARCHAR and not isinstance(value, str):
        return str(value)
    return value
