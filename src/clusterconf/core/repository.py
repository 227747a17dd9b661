"""Dialect-aware base class for the entity repositories.

A repository holds the process-wide :class:`~clusterconf.core.connection.Database`
and opens one transaction per public operation.  Multi-step operations
(lookup, deactivate, insert ...) pass the open connection to private
helpers so every statement of the operation commits or rolls back
together.

Architecture::

    ClusterConfigurationRepository.enable(...)
        with self.transaction() as conn:          # one transaction
            cluster = self._cluster_id(conn, ...)  # SELECT
            conn.execute("UPDATE ... active = 0")  # UPDATE
            conn.execute("UPDATE ... active = 1")  # UPDATE
        return self.list_for_cluster(...)          # fresh read

Tags:
    repository, sql, dialect-aware, data-access
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from clusterconf.core.connection import Database
from clusterconf.core.dialect import Dialect
from clusterconf.core.errors import NotFoundError
from clusterconf.core.protocols import Connection
from clusterconf.core.query import SelectBuilder

E = TypeVar("E")


class BaseRepository:
    """Shared helpers for building and executing portable SQL.

    Parameters:
        db: The storage's database handle.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    @property
    def dialect(self) -> Dialect:
        return self.db.dialect

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        with self.db.transaction() as conn:
            yield conn

    # -- Convenience shortcuts ---------------------------------------------

    def ph(self, count: int) -> str:
        """Shortcut for ``self.dialect.placeholders(count)``.

        Embed directly in f-strings:

            f"INSERT INTO cluster (name) VALUES ({self.ph(1)})"
        """
        return self.dialect.placeholders(count)

    def p(self, index: int) -> str:
        """Single placeholder at 0-based ``index``."""
        return self.dialect.placeholder(index)

    # -- Query helpers -----------------------------------------------------

    @staticmethod
    def fetch(conn: Connection, query: SelectBuilder[E]) -> list[E]:
        """Run a built SELECT on ``conn`` and map every row."""
        sql, args = query.to_sql()
        conn.execute(sql, tuple(args))
        return [query.map_row(row) for row in conn.fetchall()]

    @classmethod
    def fetch_one(
        cls, conn: Connection, query: SelectBuilder[E], entity: str, key: Any
    ) -> E:
        """First row of ``query``; :class:`NotFoundError` when there is none."""
        rows = cls.fetch(conn, query.with_paging(1, query.offset))
        if not rows:
            raise NotFoundError(entity, key)
        return rows[0]

    def select(self, query: SelectBuilder[E]) -> list[E]:
        """Run ``query`` in its own transaction."""
        with self.transaction() as conn:
            return self.fetch(conn, query)

    def scalar(self, conn: Connection, sql: str, params: tuple = ()) -> Any:
        """First column of the first row, or ``None``."""
        conn.execute(sql, params)
        row = conn.fetchone()
        return row[0] if row is not None else None

    # -- Insert helpers ----------------------------------------------------

    def insert(self, conn: Connection, table: str, data: dict[str, Any], *, now: tuple[str, ...] = ()) -> int:
        """Insert a single row from a dict and return its ``ID``.

        Column names come from ``data.keys()``; values are bound via
        dialect placeholders.  Columns listed in ``now`` are set to the
        dialect's current-timestamp expression.
        """
        columns = list(data.keys())
        values = [self.p(i) for i in range(len(columns))]
        for column in now:
            columns.append(column)
            values.append(self.dialect.now())
        sql = (
            f"INSERT INTO {table} ({', '.join(columns)}) "
            f"VALUES ({', '.join(values)}) RETURNING ID"
        )
        conn.execute(sql, tuple(data.values()))
        row = conn.fetchone()
        return int(row[0])


__all__ = [
    "BaseRepository",
]
