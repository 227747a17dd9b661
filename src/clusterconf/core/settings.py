"""Environment-driven settings for the clusterconf storage engine.

``StorageSettings`` names the SQL backend (driver + data source) and the
logging knobs.  Every field can be set through ``CLUSTERCONF_*``
environment variables or a ``.env`` file; CLI options override them.

Examples:
    >>> from clusterconf.core.settings import StorageSettings
    >>> s = StorageSettings(db_driver="postgres",
    ...                     storage_specification="postgresql://u:p@db/controller")
    >>> s.is_sqlite
    False

Tags:
    settings, configuration, pydantic, environment, env-prefix
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clusterconf.core.dialect import dialect_for_driver
from clusterconf.core.errors import ConfigError


class StorageSettings(BaseSettings):
    """clusterconf configuration.

    Fields
    ──────
    db_driver              : SQL driver name (sqlite3, sqlite, postgres, postgresql)
    storage_specification  : Data source (SQLite path / ``:memory:``, PostgreSQL URL or DSN)
    sqlite_busy_timeout    : Seconds a SQLite writer waits on the database lock
    echo_sql               : Log every SQL statement (SQLAlchemy echo)
    log_level              : Structlog log level
    log_json               : JSON logs (True), console (False), auto on TTY (None)
    """

    model_config = SettingsConfigDict(
        env_prefix="CLUSTERCONF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ─────────────────────────────────────────────────
    db_driver: str = Field(default="sqlite3")
    storage_specification: str = Field(default="./controller.db")
    sqlite_busy_timeout: float = Field(default=30.0, ge=0)
    echo_sql: bool = Field(default=False)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_json: bool | None = Field(default=None)

    @field_validator("db_driver")
    @classmethod
    def _known_driver(cls, value: str) -> str:
        value = value.strip().lower()
        try:
            dialect_for_driver(value)
        except ConfigError as exc:
            raise ValueError(exc.message) from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log level {value!r}")
        return value

    # ── Derived properties ───────────────────────────────────────

    @property
    def is_sqlite(self) -> bool:
        return dialect_for_driver(self.db_driver).name == "sqlite"


@lru_cache(maxsize=1)
def get_settings() -> StorageSettings:
    """Cached settings, loaded once per process."""
    return StorageSettings()


__all__ = ["StorageSettings", "get_settings"]
