"""SQL dialect abstraction for backend-agnostic repositories.

Provides a ``Dialect`` protocol and the two concrete backends clusterconf
runs on.  Repositories and the query builder ask the dialect for SQL
fragments (placeholders, the current-timestamp expression, boolean
literals) instead of branching on driver names.

Architecture::

    ┌────────────────────────────────────────────────────────────────┐
    │  sql = f"UPDATE t SET active = {d.boolean_false()}"            │
    │  sql += f", changed_at = {d.now()} WHERE id = {d.placeholder(0)}"│
    └────────────────────────────────────────────────────────────────┘
                              │
                 ┌────────────┴────────────┐
                 ▼                         ▼
         ┌──────────────┐         ┌────────────────┐
         │ SQLite       │         │ PostgreSQL     │
         │ ?, ?, ?      │         │ $1, $2, $3     │
         │ datetime()   │         │ NOW()          │
         └──────────────┘         └────────────────┘

The dialect is selected exactly once, from the driver name handed to the
storage facade (:func:`dialect_for_driver`).

Examples:
    >>> from clusterconf.core.dialect import dialect_for_driver
    >>> d = dialect_for_driver("postgres")
    >>> d.placeholders(3)
    '$1, $2, $3'
    >>> dialect_for_driver("sqlite3").placeholder(7)
    '?'

Tags:
    dialect, sql, abstraction, portability, database
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from clusterconf.core.errors import ConfigError


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract.

    Every method returns a SQL fragment (string) valid for the target
    database.  Callers interpolate these fragments into statement
    templates; values are always bound, never interpolated.
    """

    @property
    def name(self) -> str:
        """Dialect name (``'sqlite'`` or ``'postgresql'``)."""
        ...

    def placeholder(self, index: int) -> str:
        """Single positional placeholder (0-based index).

        ``index`` is ignored by anonymous styles (SQLite ``?``) and
        required by numbered styles (PostgreSQL ``$1``).
        """
        ...

    def placeholders(self, count: int) -> str:
        """Comma-separated placeholder list starting at index 0."""
        ...

    def now(self) -> str:
        """SQL expression for the current timestamp."""
        ...

    def boolean_true(self) -> str:
        """Literal for a stored ``true`` flag."""
        ...

    def boolean_false(self) -> str:
        """Literal for a stored ``false`` flag."""
        ...

    def for_update(self) -> str:
        """Row-lock suffix for a SELECT inside a write transaction."""
        ...

    def limit_all(self) -> str:
        """Clause that lifts the row limit (needed before a bare OFFSET)."""
        ...

    def sqlalchemy_scheme(self) -> str:
        """URL scheme handed to SQLAlchemy's ``create_engine``."""
        ...


class SQLiteDialect:
    """SQLite dialect: ``?`` placeholders, millisecond ``strftime`` timestamps."""

    @property
    def name(self) -> str:
        return "sqlite"

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "?"

    def placeholders(self, count: int) -> str:
        return ", ".join("?" for _ in range(count))

    def now(self) -> str:
        # %f keeps milliseconds; datetime('now') truncates to whole seconds
        return "strftime('%Y-%m-%d %H:%M:%f', 'now')"

    # Flags are stored as INTEGER 0/1 on every backend.
    def boolean_true(self) -> str:
        return "1"

    def boolean_false(self) -> str:
        return "0"

    def for_update(self) -> str:
        # BEGIN IMMEDIATE already holds the database write lock
        return ""

    def limit_all(self) -> str:
        return "LIMIT -1"

    def sqlalchemy_scheme(self) -> str:
        return "sqlite"

    def __repr__(self) -> str:
        return "SQLiteDialect()"


class PostgreSQLDialect:
    """PostgreSQL dialect: numbered ``$1`` placeholders, ``NOW()``."""

    @property
    def name(self) -> str:
        return "postgresql"

    def placeholder(self, index: int) -> str:
        return f"${index + 1}"

    def placeholders(self, count: int) -> str:
        return ", ".join(f"${i + 1}" for i in range(count))

    def now(self) -> str:
        return "NOW()"

    def boolean_true(self) -> str:
        return "1"

    def boolean_false(self) -> str:
        return "0"

    def for_update(self) -> str:
        return " FOR UPDATE"

    def limit_all(self) -> str:
        return "LIMIT ALL"

    def sqlalchemy_scheme(self) -> str:
        return "postgresql+psycopg2"

    def __repr__(self) -> str:
        return "PostgreSQLDialect()"


# Dialects are stateless, one instance per backend.
_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
}

# Driver names accepted from configuration, mapped to a dialect key.
_DRIVER_ALIASES: dict[str, str] = {
    "sqlite": "sqlite",
    "sqlite3": "sqlite",
    "postgres": "postgresql",
    "postgresql": "postgresql",
    "pq": "postgresql",
}


def get_dialect(name: str) -> Dialect:
    """Get a dialect by its name (``'sqlite'`` or ``'postgresql'``).

    Raises:
        ConfigError: If ``name`` is not a known dialect.
    """
    key = name.lower()
    if key not in _DIALECTS:
        raise ConfigError(
            f"Unknown dialect '{name}'. Supported: {sorted(_DIALECTS)}"
        ).with_context(dialect=name)
    return _DIALECTS[key]


def dialect_for_driver(driver: str) -> Dialect:
    """Select the dialect for a configured driver name.

    Accepts the driver names used in configuration files (``sqlite3``,
    ``postgres`` ...), case-insensitively.

    Raises:
        ConfigError: If the driver is not supported.
    """
    key = _DRIVER_ALIASES.get(driver.strip().lower())
    if key is None:
        raise ConfigError(
            f"Unknown database driver '{driver}'. "
            f"Supported: {sorted(_DRIVER_ALIASES)}"
        ).with_context(driver=driver)
    return get_dialect(key)


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
    "dialect_for_driver",
]
