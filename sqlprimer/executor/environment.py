"""Environment: the named tables of a CLI or REPL session."""

from __future__ import annotations

from sqlprimer.model.relation import Relation


class Environment:
    """Session bindings of table name -> Relation.

    Table names are matched case-insensitively by the engine, so binding
    ``Houses`` while ``houses`` is bound replaces the old binding instead of
    producing two tables the runner would reject.
    """

    def __init__(self) -> None:
        self._tables: dict[str, Relation] = {}

    def bind(self, name: str, relation: Relation) -> None:
        if not name:
            raise ValueError("Table name must not be empty")
        self._forget(name)
        self._tables[name] = relation

    def lookup(self, name: str) -> Relation:
        """Return the relation bound to *name* (KeyError if none)."""
        try:
            return self._tables[name]
        except KeyError:
            raise KeyError(f"Unknown relation: {name!r}") from None

    def unbind(self, name: str) -> None:
        if not self._forget(name):
            raise KeyError(f"Unknown relation: {name!r}")

    def names(self) -> list[str]:
        return sorted(self._tables)

    def all_bindings(self) -> dict[str, Relation]:
        """Return a snapshot of the bindings, as passed to QueryRunner."""
        return dict(self._tables)

    def __contains__(self, name: str) -> bool:
        return name in self._tables

    def _forget(self, name: str) -> bool:
        key = name.lower()
        stale = [n for n in self._tables if n.lower() == key]
        for n in stale:
            del self._tables[n]
        return bool(stale)
