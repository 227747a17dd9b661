"""
Connection protocol seen by the repositories.

Repositories never touch SQLAlchemy or a DB-API module directly; they get
an object satisfying :class:`Connection` from
:meth:`clusterconf.core.connection.Database.transaction`.  Commit and
rollback belong to that context manager, so the protocol has neither.

Tags:
    protocol, connection, sync, database
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """
    Statement execution inside an open transaction.

    SQL uses the placeholders of the active dialect (``?`` or ``$N``) and
    rows come back as plain tuples.

    Examples:
        >>> conn.execute("SELECT ID, name FROM cluster WHERE ID = ?", (1,))
        >>> conn.fetchone()
        (1, 'c1')
    """

    def execute(self, sql: str, parameters: Sequence[Any] | None = None) -> Any: ...

    def executemany(self, sql: str, seq_of_parameters: Sequence[Sequence[Any]]) -> Any: ...

    def fetchone(self) -> tuple[Any, ...] | None:
        """Next row of the last SELECT, ``None`` when exhausted."""
        ...

    def fetchall(self) -> list[tuple[Any, ...]]: ...

    @property
    def rowcount(self) -> int:
        """Rows touched by the last UPDATE / DELETE (-1 when unknown)."""
        ...


__all__ = ["Connection"]
