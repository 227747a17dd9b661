"""Tests for the cluster repository and cluster search."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from clusterconf.core.errors import ConstraintError, NotFoundError, ValidationError
from clusterconf.core.models import Cluster
from clusterconf.core.query import UNSET, Pagination
from clusterconf.core.repositories import SearchClusterRequest
from clusterconf.core.storage import Storage


class TestClusterRepository:
    def test_empty_list(self, storage: Storage) -> None:
        assert storage.clusters.list() == []

    def test_register_and_read_back(self, storage: Storage, cluster_name: Callable[[int], str]) -> None:
        created = storage.clusters.register(cluster_name(1))
        assert created.name == cluster_name(1)
        assert storage.clusters.get_by_id(created.id) == created
        assert storage.clusters.get_by_name(cluster_name(1)) == created

    def test_create_with_explicit_id(self, storage: Storage) -> None:
        assert storage.clusters.create(42, "c42") == Cluster(id=42, name="c42")
        assert storage.clusters.get_by_id(42).name == "c42"

    def test_list_ordered_by_id(self, seeded: Storage) -> None:
        clusters = seeded.clusters.list()
        assert [c.id for c in clusters] == [0, 1, 2, 3, 4]
        assert [c.name for c in clusters] == [f"cluster{i}" for i in range(5)]

    def test_register_after_explicit_ids(self, seeded: Storage) -> None:
        assert seeded.clusters.register("cluster5").id == 5

    def test_delete(self, seeded: Storage) -> None:
        seeded.clusters.delete(4)
        assert [c.id for c in seeded.clusters.list()] == [0, 1, 2, 3]

    def test_delete_accepts_numeric_string(self, seeded: Storage) -> None:
        seeded.clusters.delete("0")
        with pytest.raises(NotFoundError):
            seeded.clusters.get_by_id(0)

    def test_delete_missing(self, seeded: Storage) -> None:
        with pytest.raises(NotFoundError):
            seeded.clusters.delete(99)

    def test_duplicate_name(self, seeded: Storage) -> None:
        with pytest.raises(ConstraintError):
            seeded.clusters.register("cluster1")
        assert len(seeded.clusters.list()) == 5

    def test_get_missing(self, seeded: Storage) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            seeded.clusters.get_by_name("nope")
        assert exc_info.value.context == {"entity": "cluster", "key": "nope"}

    @pytest.mark.parametrize("bad", ["abc", "1.5", "", True])
    def test_malformed_id(self, seeded: Storage, bad: object) -> None:
        with pytest.raises(ValidationError):
            seeded.clusters.get_by_id(bad)

    def test_empty_name_rejected(self, storage: Storage) -> None:
        with pytest.raises(ValidationError):
            storage.clusters.register("  ")


class TestClusterQuery:
    def test_by_id_zero(self, seeded: Storage) -> None:
        found = seeded.cluster_query.query_one(SearchClusterRequest(id=0))
        assert found == Cluster(id=0, name="cluster0")

    def test_by_name(self, seeded: Storage) -> None:
        found = seeded.cluster_query.query_one(SearchClusterRequest(name="cluster3"))
        assert found.id == 3

    def test_id_and_name_must_both_match(self, seeded: Storage) -> None:
        with pytest.raises(NotFoundError):
            seeded.cluster_query.query_one(SearchClusterRequest(id=1, name="cluster2"))

    def test_unset_returns_everything(self, seeded: Storage) -> None:
        assert len(seeded.cluster_query.search(SearchClusterRequest(id=UNSET, name=UNSET))) == 5

    def test_pagination(self, seeded: Storage) -> None:
        request = SearchClusterRequest(pagination=Pagination(limit=2, offset=1))
        assert [c.id for c in seeded.cluster_query.search(request)] == [1, 2]

    def test_offset_only(self, seeded: Storage) -> None:
        request = SearchClusterRequest(pagination=Pagination(offset=3))
        assert [c.id for c in seeded.cluster_query.search(request)] == [3, 4]

    def test_repository_search(self, seeded: Storage) -> None:
        assert seeded.clusters.search(SearchClusterRequest(name="cluster2")) == [
            Cluster(id=2, name="cluster2")
        ]
