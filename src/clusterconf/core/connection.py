"""SQLAlchemy engine factory, Connection bridge, and the ``Database`` handle.

Manifesto:
    One handle owns the pooled engine for the whole process.  Repositories
    receive a short-lived :class:`SQLBridge` from
    :meth:`Database.transaction` and write plain SQL in the dialect's
    placeholder style; the bridge rewrites placeholders into SQLAlchemy
    named binds so the same statement text runs on SQLite and PostgreSQL.

This module provides:

* ``ConnectionInfo``   -- Metadata about the configured backend.
* ``create_engine``    -- Create a SA engine for a driver + data source.
* ``SQLBridge``        -- Wraps a SA ``Connection`` to satisfy the
  ``clusterconf.core.protocols.Connection`` protocol.
* ``Database``         -- Engine owner with ``transaction()``, ``ping()``
  and ``close()``; translates driver errors into ``StorageError``.

Architecture:
    ::

        Database.transaction()
            │  engine.begin()          (SQLite: BEGIN IMMEDIATE)
            ▼
        SQLBridge.execute("... WHERE ID = $1", (3,))
            │  "$1" → ":p0"
            ▼
        sqlalchemy.text(...)  →  driver
            │
            ▼
        IntegrityError → ConstraintError, SQLAlchemyError → StorageError

Tags:
    orm, sqlalchemy, engine, bridge, connection, transaction
"""

from __future__ import annotations

import re
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from clusterconf.core.dialect import Dialect, dialect_for_driver
from clusterconf.core.errors import (
    ConfigError,
    ConstraintError,
    StorageClosedError,
    StorageError,
)
from clusterconf.core.logging import get_logger

logger = get_logger(__name__)

_MEMORY = ":memory:"


# ── ConnectionInfo ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ConnectionInfo:
    """Metadata about a database connection."""

    backend: str
    """Backend identifier: ``"sqlite"`` or ``"postgresql"``."""

    persistent: bool
    """Whether data survives process exit."""

    url: str
    """The SQLAlchemy URL the engine was created from (password masked)."""

    resolved_path: str | None = None
    """For file-based SQLite, the resolved absolute path."""

    def __repr__(self) -> str:
        parts = [f"backend={self.backend!r}", f"persistent={self.persistent}"]
        if self.resolved_path:
            parts.append(f"path={self.resolved_path!r}")
        else:
            parts.append(f"url={self.url!r}")
        return f"ConnectionInfo({', '.join(parts)})"

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    @property
    def is_postgres(self) -> bool:
        return self.backend == "postgresql"


# ── Data source parsing ──────────────────────────────────────────────────


def _sqlite_target(data_source: str) -> str:
    """Reduce a SQLite data source (path, ``sqlite:///`` URL) to a path or ``:memory:``."""
    source = data_source.strip()
    for prefix in ("sqlite:///", "sqlite://", "file:"):
        if source.startswith(prefix):
            source = source[len(prefix):]
            break
    # go-sqlite style options ("file.db?_fk=1") are not understood by pysqlite
    source = source.split("?", 1)[0]
    if source in ("", "memory", _MEMORY):
        return _MEMORY
    return source


def _postgres_url(
    data_source: str, scheme: str = "postgresql+psycopg2"
) -> tuple[str, dict[str, Any]]:
    """Turn a PostgreSQL URL or libpq ``key=value`` DSN into (url, connect_args)."""
    source = data_source.strip()
    if "://" not in source:
        # libpq keyword/value string, handed to psycopg2 verbatim
        return f"{scheme}://", {"dsn": source}
    given, rest = source.split("://", 1)
    if given.split("+", 1)[0] not in ("postgres", "postgresql"):
        raise ConfigError(
            f"Unsupported PostgreSQL URL scheme '{given}'"
        ).with_context(data_source=source)
    return f"{scheme}://{rest}", {}


# ── Engine factory ───────────────────────────────────────────────────────


def create_engine(
    dialect: Dialect,
    data_source: str,
    *,
    echo: bool = False,
    busy_timeout: float = 30.0,
    **kwargs: Any,
) -> tuple[Engine, ConnectionInfo]:
    """Create a SQLAlchemy engine for ``dialect`` and ``data_source``.

    Parameters
    ----------
    dialect:
        Dialect selected from the configured driver name.
    data_source:
        SQLite path / ``:memory:`` / ``sqlite:///`` URL, or a PostgreSQL
        URL / libpq DSN.
    echo:
        If ``True``, SQLAlchemy logs every statement.
    busy_timeout:
        Seconds a SQLite connection waits for the database lock.
    **kwargs:
        Extra arguments forwarded to ``sqlalchemy.create_engine``.
    """
    if dialect.name == "sqlite":
        return _create_sqlite_engine(
            data_source,
            scheme=dialect.sqlalchemy_scheme(),
            echo=echo,
            busy_timeout=busy_timeout,
            **kwargs,
        )

    url, connect_args = _postgres_url(data_source, dialect.sqlalchemy_scheme())
    if connect_args:
        kwargs.setdefault("connect_args", connect_args)
    kwargs.setdefault("pool_pre_ping", True)
    engine = _sa_create_engine(url, echo=echo, **kwargs)
    info = ConnectionInfo(
        backend="postgresql",
        persistent=True,
        url=engine.url.render_as_string(hide_password=True),
    )
    return engine, info


def _create_sqlite_engine(
    data_source: str,
    *,
    scheme: str,
    echo: bool,
    busy_timeout: float,
    **kwargs: Any,
) -> tuple[Engine, ConnectionInfo]:
    target = _sqlite_target(data_source)
    kwargs.setdefault("connect_args", {"check_same_thread": False, "timeout": busy_timeout})

    if target == _MEMORY:
        # One shared connection, otherwise every checkout sees an empty database
        kwargs.setdefault("poolclass", StaticPool)
        url = f"{scheme}://"
        engine = _sa_create_engine(url, echo=echo, **kwargs)
        info = ConnectionInfo(backend="sqlite", persistent=False, url=url)
    else:
        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        resolved = str(path.resolve())
        url = f"{scheme}:///{resolved}"
        engine = _sa_create_engine(url, echo=echo, **kwargs)
        info = ConnectionInfo(
            backend="sqlite",
            persistent=True,
            url=url,
            resolved_path=resolved,
        )

    persistent = info.persistent

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
        # Transactions are started explicitly in the "begin" hook
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        if persistent:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        # Take the write lock up front so concurrent writers queue on busy_timeout
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine, info


# ── Connection bridge ────────────────────────────────────────────────────

_PLACEHOLDER_RE = re.compile(r"\?|\$(\d+)")


def to_named_binds(sql: str) -> tuple[str, int]:
    """Rewrite ``?`` and ``$N`` placeholders to ``:pN`` binds.

    ``?`` placeholders are numbered in order of appearance, ``$N`` maps to
    ``:p{N-1}``.  Returns the rewritten SQL and the number of ``?`` seen.
    """
    counter = 0

    def _sub(match: re.Match[str]) -> str:
        nonlocal counter
        if match.group(1) is not None:
            return f":p{int(match.group(1)) - 1}"
        name = f":p{counter}"
        counter += 1
        return name

    return _PLACEHOLDER_RE.sub(_sub, sql), counter


class SQLBridge:
    """Adapter that makes a SQLAlchemy ``Connection`` look like
    ``clusterconf.core.protocols.Connection``.

    Implements: ``execute``, ``executemany``, ``fetchone``, ``fetchall``,
    ``rowcount``.  Rows are returned as plain tuples.
    """

    def __init__(self, connection: Any, dialect: Dialect) -> None:
        self._connection = connection
        self._dialect = dialect
        self._last_result: Any = None

    # --- execute / executemany ---

    def execute(self, sql: str, parameters: Sequence[Any] | None = None) -> SQLBridge:
        rewritten, _ = to_named_binds(sql)
        mapping = {f"p{i}": v for i, v in enumerate(parameters or ())}
        self._last_result = self._connection.execute(text(rewritten), mapping)
        return self

    def executemany(self, sql: str, seq_of_parameters: Sequence[Sequence[Any]]) -> None:
        for params in seq_of_parameters:
            self.execute(sql, params)

    # --- fetch ---

    def fetchone(self) -> tuple[Any, ...] | None:
        if self._last_result is None or not self._last_result.returns_rows:
            return None
        row = self._last_result.fetchone()
        return tuple(row) if row is not None else None

    def fetchall(self) -> list[tuple[Any, ...]]:
        if self._last_result is None or not self._last_result.returns_rows:
            return []
        return [tuple(r) for r in self._last_result.fetchall()]

    # --- properties ---

    @property
    def rowcount(self) -> int:
        if self._last_result is None:
            return -1
        return self._last_result.rowcount

    @property
    def dialect(self) -> Dialect:
        return self._dialect


# ── Database handle ──────────────────────────────────────────────────────


class Database:
    """Owner of the engine; the unit of connection lifecycle.

    Examples:
        >>> db = Database.connect("sqlite3", ":memory:")
        >>> with db.transaction() as conn:
        ...     conn.execute("SELECT 1").fetchone()
        (1,)
        >>> db.close()
    """

    def __init__(self, engine: Engine, dialect: Dialect, info: ConnectionInfo) -> None:
        self._engine = engine
        self._dialect = dialect
        self._info = info
        self._closed = False
        # In-memory SQLite shares one DB-API connection (StaticPool), so
        # transactions from different threads must not interleave on it
        self._memory_lock = (
            threading.RLock() if info.is_sqlite and not info.persistent else None
        )

    @classmethod
    def connect(
        cls,
        driver: str,
        data_source: str,
        *,
        echo: bool = False,
        busy_timeout: float = 30.0,
    ) -> Database:
        """Select the dialect for ``driver`` and create the engine."""
        dialect = dialect_for_driver(driver)
        try:
            engine, info = create_engine(
                dialect, data_source, echo=echo, busy_timeout=busy_timeout
            )
        except SQLAlchemyError as exc:
            raise StorageError(
                f"cannot create engine for driver '{driver}': {exc}", cause=exc
            ).with_context(driver=driver) from exc
        logger.info("storage.connected", driver=driver, backend=info.backend, url=info.url)
        return cls(engine, dialect, info)

    # --- properties ---

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def info(self) -> ConnectionInfo:
        return self._info

    @property
    def engine(self) -> Engine:
        self._check_open()
        return self._engine

    @property
    def closed(self) -> bool:
        return self._closed

    # --- lifecycle ---

    def _check_open(self) -> None:
        if self._closed:
            raise StorageClosedError()

    @contextmanager
    def transaction(self) -> Iterator[SQLBridge]:
        """Run a block in one database transaction.

        Commits on normal exit, rolls back on any exception.  Driver errors
        are re-raised as :class:`StorageError` (``ConstraintError`` for
        integrity violations); clusterconf errors pass through unchanged.
        """
        self._check_open()
        with self.serialized():
            try:
                with self._engine.begin() as sa_conn:
                    yield SQLBridge(sa_conn, self._dialect)
            except IntegrityError as exc:
                raise ConstraintError(
                    f"constraint violation: {exc.orig}", cause=exc
                ).with_context(backend=self._info.backend) from exc
            except SQLAlchemyError as exc:
                raise StorageError(
                    f"database error: {exc}", cause=exc
                ).with_context(backend=self._info.backend) from exc

    def serialized(self) -> Any:
        """Lock held around work on the shared in-memory connection.

        A no-op context for file-backed SQLite and PostgreSQL, where each
        transaction checks out its own pooled connection.
        """
        return self._memory_lock or nullcontext()

    def ping(self) -> None:
        """Round-trip ``SELECT 1``; raises ``StorageError`` when unreachable."""
        with self.transaction() as conn:
            conn.execute("SELECT 1")
            conn.fetchone()

    def close(self) -> None:
        """Dispose the pool. Idempotent; later operations raise ``StorageClosedError``."""
        if self._closed:
            return
        self._closed = True
        self._engine.dispose()
        logger.info("storage.closed", backend=self._info.backend)

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Database({self._info!r}, {state})"


__all__ = [
    "ConnectionInfo",
    "create_engine",
    "to_named_binds",
    "SQLBridge",
    "Database",
]
