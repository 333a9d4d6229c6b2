"""QueryRunner: execute SQL against named relations on an embedded DuckDB.

The runner registers each relation as a table of an in-memory DuckDB
connection, runs a single SELECT statement and returns the result as a new
Relation. SQL evaluation (joins, aggregation, subqueries) is entirely the
engine's job.
"""

from __future__ import annotations

import logging
from typing import Mapping

import duckdb

from sqlprimer.executor.errors import QueryError, QuerySyntaxError, translate_error
from sqlprimer.model.relation import Relation
from sqlprimer.model.types import Column

logger = logging.getLogger(__name__)


class QueryRunner:
    """Runs queries against the relations passed to each call.

    Tables are kept between calls and only re-created when the relation
    bound to a name changes, so a session can run many queries over the
    same data without reloading it. A call never sees tables for names
    missing from its own mapping.
    """

    def __init__(self, relations: Mapping[str, Relation] | None = None) -> None:
        self._conn = duckdb.connect(":memory:")
        # Only registered relations are tables; never scan Python variables.
        self._conn.execute("SET python_enable_replacements = false")
        self._registered: dict[str, Relation] = {}
        if relations:
            self.sync(relations)

    def __enter__(self) -> QueryRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the engine connection."""
        self._conn.close()
        self._registered.clear()

    @property
    def tables(self) -> list[str]:
        """Return the names currently registered with the engine, sorted."""
        return sorted(self._registered)

    def execute(
        self, query: str, relations: Mapping[str, Relation] | None = None
    ) -> Relation:
        """Run *query* and return its result.

        If *relations* is given the engine tables are first synced to it;
        otherwise the relations from the previous sync are used.
        """
        if relations is not None:
            self.sync(relations)

        self._check_statement(query)
        logger.debug("Executing query: %s", query)
        try:
            result = self._conn.sql(query)
            columns = [
                Column(name, str(sql_type))
                for name, sql_type in zip(result.columns, result.types)
            ]
            rows = result.fetchall()
        except duckdb.Error as e:
            raise translate_error(e) from e

        logger.debug("Query returned %d rows", len(rows))
        return Relation(columns, rows)

    def sync(self, relations: Mapping[str, Relation]) -> None:
        """Make the engine tables match *relations* exactly."""
        _check_names(relations)

        for name in list(self._registered):
            if name not in relations:
                self._drop(name)

        for name, rel in relations.items():
            if self._registered.get(name) is not rel:
                self._register(name, rel)

    def _register(self, name: str, rel: Relation) -> None:
        if not rel.columns:
            raise ValueError(f"Relation {name!r} has no columns")
        seen: set[str] = set()
        for col in rel.columns:
            if not col.name:
                raise ValueError(f"Relation {name!r} has an unnamed column")
            key = col.name.lower()
            if key in seen:
                raise ValueError(
                    f"Relation {name!r} has duplicate column {col.name!r}"
                )
            seen.add(key)

        if name in self._registered:
            self._drop(name)

        table = _quote(name)
        col_defs = ", ".join(f"{_quote(c.name)} {c.type}" for c in rel.columns)
        try:
            self._conn.execute(f"CREATE TABLE {table} ({col_defs})")
            if len(rel):
                placeholders = ", ".join("?" for _ in rel.columns)
                self._conn.executemany(
                    f"INSERT INTO {table} VALUES ({placeholders})",
                    [list(row) for row in rel],
                )
        except duckdb.Error as e:
            self._conn.execute(f"DROP TABLE IF EXISTS {table}")
            raise translate_error(e) from e
        self._registered[name] = rel
        logger.debug(
            "Registered %s: %d rows, columns %s", name, len(rel), rel.column_names
        )

    def _drop(self, name: str) -> None:
        self._conn.execute(f"DROP TABLE IF EXISTS {_quote(name)}")
        del self._registered[name]
        logger.debug("Dropped %s", name)

    def _check_statement(self, query: str) -> None:
        """Accept exactly one SELECT statement."""
        try:
            statements = self._conn.extract_statements(query)
        except duckdb.Error as e:
            raise translate_error(e) from e

        if not statements:
            raise QuerySyntaxError("Empty query")
        if len(statements) > 1:
            raise QueryError(
                f"Expected a single statement, got {len(statements)}"
            )
        if statements[0].type != duckdb.StatementType.SELECT:
            raise QueryError(
                f"Only SELECT queries are supported, got {statements[0].type.name}"
            )


def execute(query: str, relations: Mapping[str, Relation]) -> Relation:
    """Run one query against *relations* on a throwaway runner."""
    with QueryRunner() as runner:
        return runner.execute(query, relations)


def _check_names(relations: Mapping[str, Relation]) -> None:
    seen: dict[str, str] = {}
    for name in relations:
        if not name:
            raise ValueError("Relation name must not be empty")
        key = name.lower()
        if key in seen:
            raise ValueError(
                f"Relation names {seen[key]!r} and {name!r} differ only in case"
            )
        seen[key] = name


def _quote(identifier: str) -> str:
    """Quote an SQL identifier."""
    return '"' + identifier.replace('"', '""') + '"'
