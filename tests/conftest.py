"""
Shared pytest fixtures for clusterconf tests.

This module provides:
- ``storage``: in-memory SQLite storage with the schema created
- ``file_storage``: file-backed SQLite storage (for concurrency tests)
- ``cluster_name``: deterministic UUID-like cluster names
- ``seeded``: storage with clusters ``cluster0..cluster4`` (ids 0-4)
- ``backdate``: overwrite a timestamp column with an old fixed value
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest

from clusterconf.core.settings import get_settings
from clusterconf.core.storage import Storage

TEST_CONFIGURATION = '{"no_op":"X", "watch":["a","b","c"]}'
OLD_TIMESTAMP = datetime(2000, 1, 1, tzinfo=UTC)


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _clean_settings_cache(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Settings are cached per process; every test starts from the environment."""
    for key in ("CLUSTERCONF_DB_DRIVER", "CLUSTERCONF_STORAGE_SPECIFICATION", "CLUSTERCONF_LOG_JSON"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def cluster_name() -> Callable[[int], str]:
    def _name(i: int) -> str:
        return f"00000000-0000-0000-0000-{i:012d}"

    return _name


@pytest.fixture
def storage() -> Iterator[Storage]:
    s = Storage("sqlite3", ":memory:")
    s.init_schema()
    yield s
    s.close()


@pytest.fixture
def file_storage(tmp_path: Path) -> Iterator[Storage]:
    s = Storage("sqlite3", str(tmp_path / "controller.db"), busy_timeout=30.0)
    s.init_schema()
    yield s
    s.close()


@pytest.fixture
def seeded(storage: Storage) -> Storage:
    """Clusters ``cluster0`` .. ``cluster4`` with ids 0 .. 4."""
    for i in range(5):
        storage.clusters.create(i, f"cluster{i}")
    return storage


@pytest.fixture
def test_configuration() -> str:
    return TEST_CONFIGURATION


@pytest.fixture
def backdate() -> Callable[..., datetime]:
    """Set ``column`` of ``table`` to 2000-01-01 on every row (or one ``row_id``)."""

    def _backdate(s: Storage, table: str, column: str, row_id: int | None = None) -> datetime:
        sql = f"UPDATE {table} SET {column} = ?"
        params: tuple = ("2000-01-01 00:00:00",)
        if row_id is not None:
            sql += " WHERE ID = ?"
            params += (row_id,)
        with s.database.transaction() as conn:
            conn.execute(sql, params)
        return OLD_TIMESTAMP

    return _backdate
