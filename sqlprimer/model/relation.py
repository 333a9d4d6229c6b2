"""Relation: an immutable, ordered table of rows with a fixed schema."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Iterator, Mapping, Sequence

from sqlprimer.model.types import Column, Value, coerce_value, infer_sql_type

Row = tuple[Value, ...]


class Relation:
    """An immutable relation (ordered list of rows).

    Unlike a set-based relation, rows keep their order and duplicates are
    allowed, which is what SQL results look like. Column names may repeat in
    query results (``SELECT a.id, b.id``); lookups by name use the first.
    All operations return new Relations.
    """

    __slots__ = ("_columns", "_rows", "_hash")

    def __init__(
        self,
        columns: Sequence[Column | tuple[str, str] | str],
        rows: Iterable[Sequence[Value]] = (),
    ) -> None:
        cols = tuple(_as_column(c) for c in columns)
        width = len(cols)
        frozen: list[Row] = []
        for i, row in enumerate(rows):
            r = tuple(row)
            if len(r) != width:
                raise ValueError(
                    f"Row {i} has {len(r)} values, expected {width}"
                )
            frozen.append(r)
        object.__setattr__(self, "_columns", cols)
        object.__setattr__(self, "_rows", tuple(frozen))
        object.__setattr__(self, "_hash", None)

    @classmethod
    def from_columns(cls, data: Mapping[str, Sequence[Value]]) -> Relation:
        """Build a relation from a mapping of column name -> values.

        Every column must have the same length. Types are inferred from the
        values, which are coerced to the inferred type.
        """
        lengths = {name: len(values) for name, values in data.items()}
        if len(set(lengths.values())) > 1:
            raise ValueError(f"Columns have unequal lengths: {lengths}")

        columns = []
        coerced: list[list[Value]] = []
        for name, values in data.items():
            sql_type = infer_sql_type(values)
            columns.append(Column(name, sql_type))
            coerced.append([coerce_value(v, sql_type) for v in values])
        return cls(columns, zip(*coerced) if coerced else ())

    @classmethod
    def from_records(
        cls,
        records: Sequence[Mapping[str, Value]],
        columns: Sequence[str] | None = None,
    ) -> Relation:
        """Build a relation from a list of dicts.

        Column order follows *columns* if given, else the first record.
        Keys missing from a record become null.
        """
        if columns is None:
            columns = list(records[0].keys()) if records else []
        return cls.from_columns(
            {name: [rec.get(name) for rec in records] for name in columns}
        )

    @property
    def columns(self) -> tuple[Column, ...]:
        """Return the ordered columns."""
        return self._columns

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self._columns]

    @property
    def schema(self) -> dict[str, str]:
        """Return an ordered mapping of column name -> SQL type."""
        schema: dict[str, str] = {}
        for c in self._columns:
            schema.setdefault(c.name, c.type)
        return schema

    @property
    def rows(self) -> tuple[Row, ...]:
        return self._rows

    def column(self, name: str) -> list[Value]:
        """Return all values of a column, in row order."""
        idx = self._index(name)
        return [row[idx] for row in self._rows]

    def records(self) -> list[dict[str, Value]]:
        """Return the rows as dicts keyed by column name."""
        names = self.column_names
        return [dict(zip(names, row)) for row in self._rows]

    def _index(self, name: str) -> int:
        for i, c in enumerate(self._columns):
            if c.name == name:
                return i
        raise KeyError(f"Unknown column: {name!r}")

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Relation):
            return NotImplemented
        return self._columns == other._columns and self._rows == other._rows

    def __hash__(self) -> int:
        if self._hash is None:
            h = hash((self._columns, self._rows))
            object.__setattr__(self, "_hash", h)
        return self._hash

    def __repr__(self) -> str:
        cols = ", ".join(f"{c.name} {c.type}" for c in self._columns)
        return f"Relation([{cols}], {len(self._rows)} rows)"

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Relation is immutable")

    # --- Derivations ---

    def project(self, names: Sequence[str]) -> Relation:
        """Keep only the named columns, in the given order."""
        idxs = [self._index(n) for n in names]
        cols = [self._columns[i] for i in idxs]
        return Relation(cols, (tuple(row[i] for i in idxs) for row in self._rows))

    def where(self, predicate: Callable[[dict[str, Value]], bool]) -> Relation:
        """Keep rows whose record satisfies the predicate."""
        names = self.column_names
        kept = (row for row in self._rows if predicate(dict(zip(names, row))))
        return Relation(self._columns, kept)

    def head(self, n: int) -> Relation:
        """Return the first *n* rows."""
        return Relation(self._columns, self._rows[: max(n, 0)])

    def rename(self, mapping: Mapping[str, str]) -> Relation:
        """Rename columns (old -> new), keeping types."""
        cols = [Column(mapping.get(c.name, c.name), c.type) for c in self._columns]
        return Relation(cols, self._rows)

    def sort(
        self, key_fn: Callable[[dict[str, Value]], Any], reverse: bool = False
    ) -> Relation:
        """Return a new relation with rows ordered by *key_fn* of each record."""
        names = self.column_names
        ordered = sorted(
            self._rows, key=lambda row: key_fn(dict(zip(names, row))), reverse=reverse
        )
        return Relation(self._columns, ordered)


def _as_column(spec: Column | tuple[str, str] | str) -> Column:
    if isinstance(spec, Column):
        return spec
    if isinstance(spec, str):
        return Column(spec)
    name, sql_type = spec
    return Column(name, sql_type)
