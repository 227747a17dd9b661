"""Tests for the Storage facade."""

from __future__ import annotations

from pathlib import Path

import pytest

from clusterconf.core.errors import ConfigError, StorageClosedError
from clusterconf.core.settings import StorageSettings
from clusterconf.core.storage import Storage

TABLES = ["cluster", "configuration_profile", "operator_configuration", "trigger", "trigger_type"]


class TestLifecycle:
    def test_init_schema_returns_tables(self) -> None:
        with Storage("sqlite3", ":memory:") as storage:
            assert sorted(storage.init_schema()) == TABLES

    def test_init_schema_is_idempotent(self, storage: Storage) -> None:
        storage.clusters.create(1, "c1")
        storage.init_schema()
        assert storage.clusters.get_by_id(1).name == "c1"

    def test_drop_schema(self, storage: Storage) -> None:
        storage.clusters.create(1, "c1")
        storage.drop_schema()
        storage.init_schema()
        assert storage.clusters.list() == []

    def test_unknown_driver(self) -> None:
        with pytest.raises(ConfigError):
            Storage("mysql", "whatever")

    def test_dialect_and_info(self, storage: Storage) -> None:
        assert storage.dialect.name == "sqlite"
        assert storage.info.backend == "sqlite"
        assert "sqlite3" in repr(storage)

    def test_ping(self, storage: Storage) -> None:
        storage.ping()

    def test_closed_storage(self) -> None:
        storage = Storage("sqlite3", ":memory:")
        storage.init_schema()
        storage.close()
        assert storage.closed
        with pytest.raises(StorageClosedError):
            storage.clusters.list()
        with pytest.raises(StorageClosedError):
            storage.ping()
        with pytest.raises(StorageClosedError):
            storage.init_schema()
        storage.close()

    def test_independent_storages(self) -> None:
        with Storage("sqlite3", ":memory:") as a, Storage("sqlite3", ":memory:") as b:
            a.init_schema()
            b.init_schema()
            a.clusters.register("only-in-a")
            assert b.clusters.list() == []


@pytest.mark.integration
class TestFileBacked:
    def test_data_survives_reopen(self, tmp_path: Path) -> None:
        path = str(tmp_path / "controller.db")
        with Storage("sqlite3", path) as storage:
            storage.init_schema()
            storage.clusters.register("c1")
        with Storage("sqlite", path) as storage:
            assert [c.name for c in storage.clusters.list()] == ["c1"]

    def test_from_settings(self, tmp_path: Path) -> None:
        settings = StorageSettings(
            _env_file=None,
            db_driver="sqlite3",
            storage_specification=str(tmp_path / "s.db"),
        )
        with Storage.from_settings(settings) as storage:
            storage.init_schema()
            assert storage.info.persistent
            assert storage.driver == "sqlite3"
