"""Typed, immutable SELECT construction shared by every repository.

Each entity declares an ordered set of columns (one :class:`Column`
subclass per entity) and a :class:`Table` that knows the SQL source and
how to build the entity from a row.  :class:`SelectBuilder` renders
``SELECT ... FROM ... WHERE ... ORDER BY ... LIMIT ... OFFSET ...`` with
the placeholders of the dialect it was created for.

Architecture::

    CLUSTER_TABLE.query(dialect)             SelectBuilder (frozen)
        .equals(ClusterCol.ID, 1)     ──►    filters += (ID, 1)
        .equals(ClusterCol.NAME, UNSET) ──►  unchanged (filter skipped)
        .with_paging(100, 1)          ──►    limit=100, offset=1
        .to_sql()
            ──► ("SELECT ID, Name FROM cluster WHERE ID = ? LIMIT 100 OFFSET 1", [1])

A filter is skipped only when its value is :data:`UNSET`; ``0`` and
``""`` are ordinary values.  Using a column that the table does not map
raises :class:`~clusterconf.core.errors.UnknownColumnError` at build time.

Examples:
    >>> base = CLUSTER_TABLE.query(dialect)
    >>> by_id = base.equals(ClusterCol.ID, 0)
    >>> base is not by_id
    True

Tags:
    query-builder, sql, immutable, dialect, pagination
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from typing import Any, Generic, TypeVar

from clusterconf.core.dialect import Dialect
from clusterconf.core.errors import UnknownColumnError, ValidationError

E = TypeVar("E")


class _Unset:
    """Type of :data:`UNSET`; a filter value meaning "unconstrained"."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"

    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def is_set(value: Any) -> bool:
    return value is not UNSET


# ── Columns ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Column:
    """One selectable column.

    ``name`` is what appears in the select list (and in filters when no
    ``expr`` is given), ``field`` the entity attribute the value lands in,
    ``expr`` a qualified SQL expression for joined sources and
    ``convert`` an optional function applied to the raw driver value.
    """

    name: str
    field: str
    expr: str | None = None
    convert: Callable[[Any], Any] | None = dataclasses.field(default=None, compare=False)

    @property
    def sql(self) -> str:
        return self.expr or self.name

    def select_item(self) -> str:
        if self.expr and self.expr != self.name:
            return f"{self.expr} AS {self.name}"
        return self.name

    def to_field(self, value: Any) -> Any:
        if value is None or self.convert is None:
            return value
        return self.convert(value)

    def __str__(self) -> str:
        return self.name


# ── Table ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Table(Generic[E]):
    """Query-side description of an entity's source.

    ``source`` is the FROM clause (a table name or a join), ``columns`` the
    full ordered column set, ``column_type`` the per-entity column class
    used to reject foreign columns.
    """

    name: str
    source: str
    columns: tuple[Column, ...]
    factory: Callable[..., E]
    column_type: type[Column] = Column

    def has(self, column: Any) -> bool:
        return isinstance(column, self.column_type) and column in self.columns

    def check(self, column: Any) -> Column:
        if not self.has(column):
            raise UnknownColumnError(column, self.name)
        return column

    def query(self, dialect: Dialect) -> SelectBuilder[E]:
        """Builder selecting every column of this table."""
        return SelectBuilder(table=self, dialect=dialect, columns=self.columns)

    def map_row(self, columns: Sequence[Column], row: Sequence[Any]) -> E:
        """Build the entity from ``row``, matched to ``columns`` by position."""
        if len(columns) != len(row):
            raise ValidationError(
                f"row has {len(row)} values for {len(columns)} columns of {self.name}",
                field="row",
            )
        values: dict[str, Any] = {}
        for column, value in zip(columns, row):
            self.check(column)
            values[column.field] = column.to_field(value)
        return self.factory(**values)


# ── Pagination ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Pagination:
    """Page request; ``0`` means "no limit" / "no offset"."""

    limit: int = 0
    offset: int = 0


# ── SelectBuilder ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SelectBuilder(Generic[E]):
    """Immutable SELECT statement under construction.

    Every method returns a new builder, so a base query can be shared.
    """

    table: Table[E]
    dialect: Dialect
    columns: tuple[Column, ...]
    filters: tuple[tuple[Column, Any], ...] = ()
    ordering: tuple[Column, ...] = ()
    limit: int = 0
    offset: int = 0

    def equals(self, column: Column, value: Any) -> SelectBuilder[E]:
        """Add ``column = <placeholder>``; skipped when ``value`` is UNSET."""
        self.table.check(column)
        if value is UNSET:
            return self
        return replace(self, filters=self.filters + ((column, value),))

    def order_by(self, column: Column) -> SelectBuilder[E]:
        self.table.check(column)
        return replace(self, ordering=self.ordering + (column,))

    def with_paging(self, limit: int = 0, offset: int = 0) -> SelectBuilder[E]:
        if limit < 0 or offset < 0:
            raise ValidationError(
                f"negative paging (limit={limit}, offset={offset})",
                field="pagination",
                value=(limit, offset),
            )
        return replace(self, limit=limit, offset=offset)

    def paginate(self, page: Pagination) -> SelectBuilder[E]:
        return self.with_paging(page.limit, page.offset)

    def to_sql(self) -> tuple[str, list[Any]]:
        """Render ``(sql, args)`` with the dialect's placeholders."""
        parts = [
            f"SELECT {', '.join(c.select_item() for c in self.columns)} FROM {self.table.source}"
        ]
        args: list[Any] = []

        if self.filters:
            conditions = []
            for index, (column, value) in enumerate(self.filters):
                conditions.append(f"{column.sql} = {self.dialect.placeholder(index)}")
                args.append(value)
            parts.append("WHERE " + " AND ".join(conditions))

        if self.ordering:
            parts.append("ORDER BY " + ", ".join(c.sql for c in self.ordering))

        if self.limit:
            parts.append(f"LIMIT {self.limit}")
        elif self.offset:
            parts.append(self.dialect.limit_all())
        if self.offset:
            parts.append(f"OFFSET {self.offset}")

        return " ".join(parts), args

    def map_row(self, row: Sequence[Any]) -> E:
        return self.table.map_row(self.columns, row)


__all__ = [
    "UNSET",
    "is_set",
    "Column",
    "Table",
    "Pagination",
    "SelectBuilder",
]
