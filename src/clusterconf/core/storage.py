"""
Storage facade: one object per process that owns the database.

Manifesto:
    Callers (the REST layer, the admin CLI, tests) should not know about
    engines, dialects or transactions.  ``Storage`` is constructed once
    from a driver name and a data source, owns the
    :class:`~clusterconf.core.connection.Database` handle and exposes one
    repository per entity.  Nothing is kept at module level, so tests can
    run several independent storages side by side.

Architecture:
    ::

        Storage("sqlite3", ":memory:")
            │
            ├── dialect              (selected once from the driver name)
            ├── Database             (engine, transaction(), ping(), close())
            │
            ├── clusters                 ClusterRepository
            ├── profiles                 ConfigurationProfileRepository
            ├── cluster_configurations   ClusterConfigurationRepository
            ├── trigger_types            TriggerTypeRepository
            ├── triggers                 TriggerRepository
            └── cluster_query            ClusterQuery

Examples:
    >>> with Storage("sqlite3", ":memory:") as storage:
    ...     storage.init_schema()
    ...     storage.clusters.register("00000000-0000-0000-0000-000000000001")
    Cluster(id=1, name='00000000-0000-0000-0000-000000000001')

Guardrails:
    ❌ DON'T: Keep a global Storage or connection
    ✅ DO: Build it at startup and pass it to whoever needs it

    ❌ DON'T: Use a Storage after close()
    ✅ DO: Expect StorageClosedError from every operation once closed

Tags:
    storage, facade, lifecycle, repositories
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from clusterconf.core.connection import ConnectionInfo, Database
from clusterconf.core.dialect import Dialect
from clusterconf.core.errors import StorageError
from clusterconf.core.logging import get_logger
from clusterconf.core.orm import create_schema, drop_schema
from clusterconf.core.repositories import (
    ClusterConfigurationRepository,
    ClusterQuery,
    ClusterRepository,
    ConfigurationProfileRepository,
    TriggerRepository,
    TriggerTypeRepository,
)
from clusterconf.core.settings import StorageSettings

logger = get_logger(__name__)


class Storage:
    """Entry point to the persistence engine.

    Parameters:
        driver: ``sqlite3`` / ``sqlite`` or ``postgres`` / ``postgresql``.
        data_source: SQLite path or ``:memory:``; PostgreSQL URL or DSN.
        echo: Log every SQL statement.
        busy_timeout: Seconds a SQLite writer waits for the lock.

    Raises:
        ConfigError: Unknown driver.
    """

    def __init__(
        self,
        driver: str,
        data_source: str,
        *,
        echo: bool = False,
        busy_timeout: float = 30.0,
    ) -> None:
        self.driver = driver
        self._db = Database.connect(driver, data_source, echo=echo, busy_timeout=busy_timeout)

        self.clusters = ClusterRepository(self._db)
        self.profiles = ConfigurationProfileRepository(self._db)
        self.cluster_configurations = ClusterConfigurationRepository(self._db, self.profiles)
        self.trigger_types = TriggerTypeRepository(self._db)
        self.triggers = TriggerRepository(self._db, self.trigger_types)
        self.cluster_query = ClusterQuery(self._db)

    @classmethod
    def from_settings(cls, settings: StorageSettings) -> Storage:
        return cls(
            settings.db_driver,
            settings.storage_specification,
            echo=settings.echo_sql,
            busy_timeout=settings.sqlite_busy_timeout,
        )

    # -- properties ------------------------------------------------------------

    @property
    def dialect(self) -> Dialect:
        return self._db.dialect

    @property
    def info(self) -> ConnectionInfo:
        return self._db.info

    @property
    def database(self) -> Database:
        return self._db

    @property
    def closed(self) -> bool:
        return self._db.closed

    # -- lifecycle -------------------------------------------------------------

    def init_schema(self) -> list[str]:
        """Create the five tables if missing. Returns the table names."""
        try:
            with self._db.serialized():
                tables = create_schema(self._db.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"schema initialisation failed: {exc}", cause=exc) from exc
        logger.info("storage.schema_initialised", tables=tables, backend=self.info.backend)
        return tables

    def drop_schema(self) -> None:
        try:
            with self._db.serialized():
                drop_schema(self._db.engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"dropping schema failed: {exc}", cause=exc) from exc
        logger.info("storage.schema_dropped", backend=self.info.backend)

    def ping(self) -> None:
        self._db.ping()

    def close(self) -> None:
        self._db.close()

    def __enter__(self) -> Storage:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Storage(driver={self.driver!r}, {self._db!r})"


__all__ = ["Storage"]
