"""Tests for environment-driven settings."""

from __future__ import annotations

import pydantic
import pytest

from clusterconf.core.settings import StorageSettings, get_settings


class TestDefaults:
    def test_defaults(self) -> None:
        s = StorageSettings(_env_file=None)
        assert s.db_driver == "sqlite3"
        assert s.storage_specification == "./controller.db"
        assert s.sqlite_busy_timeout == 30.0
        assert s.echo_sql is False
        assert s.log_level == "INFO"
        assert s.log_json is None
        assert s.is_sqlite


class TestEnvironment:
    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CLUSTERCONF_DB_DRIVER", "postgres")
        monkeypatch.setenv("CLUSTERCONF_STORAGE_SPECIFICATION", "host=db dbname=controller")
        s = StorageSettings(_env_file=None)
        assert s.db_driver == "postgres"
        assert s.storage_specification == "host=db dbname=controller"
        assert not s.is_sqlite

    def test_get_settings_is_cached(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("CLUSTERCONF_LOG_LEVEL", "debug")
        assert get_settings() is first
        get_settings.cache_clear()
        assert get_settings().log_level == "DEBUG"


class TestValidation:
    def test_driver_normalised(self) -> None:
        assert StorageSettings(_env_file=None, db_driver=" SQLite ").db_driver == "sqlite"

    def test_unknown_driver(self) -> None:
        with pytest.raises(pydantic.ValidationError, match="mysql"):
            StorageSettings(_env_file=None, db_driver="mysql")

    def test_unknown_log_level(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            StorageSettings(_env_file=None, log_level="LOUD")

    def test_negative_busy_timeout(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            StorageSettings(_env_file=None, sqlite_busy_timeout=-1)
