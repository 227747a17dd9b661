"""Tests for trigger types and triggers."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import pytest

from clusterconf.core.errors import ConstraintError, NotFoundError, ValidationError
from clusterconf.core.models import TriggerType
from clusterconf.core.storage import Storage


@pytest.fixture
def with_types(seeded: Storage) -> Storage:
    seeded.trigger_types.create("must-gather", "collect diagnostics")
    seeded.trigger_types.create("reboot", "")
    return seeded


class TestTriggerTypes:
    def test_create_and_list(self, storage: Storage) -> None:
        created = storage.trigger_types.create("must-gather", "collect diagnostics")
        assert created == TriggerType(id=created.id, type="must-gather", description="collect diagnostics")
        assert storage.trigger_types.list() == [created]

    def test_duplicate_type(self, with_types: Storage) -> None:
        with pytest.raises(ConstraintError):
            with_types.trigger_types.create("reboot", "again")

    def test_empty_type_rejected(self, storage: Storage) -> None:
        with pytest.raises(ValidationError):
            storage.trigger_types.create("", "x")

    def test_get_id_by_type(self, with_types: Storage) -> None:
        ids = {t.type: t.id for t in with_types.trigger_types.list()}
        assert with_types.trigger_types.get_id_by_type("reboot") == ids["reboot"]

    def test_unknown_type(self, with_types: Storage) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            with_types.trigger_types.get_id_by_type("format-disk")
        assert exc_info.value.entity == "trigger type"


class TestTriggers:
    def test_create(self, with_types: Storage) -> None:
        trigger = with_types.triggers.create(
            "cluster1", "must-gather", "tester", "investigate", "https://issues/1", "--all"
        )
        assert trigger.type == "must-gather"
        assert trigger.cluster == "cluster1"
        assert trigger.reason == "investigate"
        assert trigger.link == "https://issues/1"
        assert trigger.triggered_by == "tester"
        assert trigger.parameters == "--all"
        assert trigger.active
        assert trigger.acked_at is None
        assert trigger.triggered_at is not None
        assert with_types.triggers.get_by_id(trigger.id) == trigger

    def test_create_unknown_type(self, with_types: Storage) -> None:
        with pytest.raises(NotFoundError):
            with_types.triggers.create("cluster1", "format-disk", "tester", "r", "")
        assert with_types.triggers.list() == []

    def test_create_unknown_cluster(self, with_types: Storage) -> None:
        with pytest.raises(NotFoundError):
            with_types.triggers.create("nope", "reboot", "tester", "r", "")

    def test_lists(self, with_types: Storage) -> None:
        repo = with_types.triggers
        a = repo.create("cluster1", "reboot", "tester", "a", "")
        b = repo.create("cluster2", "reboot", "tester", "b", "")
        c = repo.create("cluster1", "must-gather", "tester", "c", "")
        assert [t.id for t in repo.list()] == [a.id, b.id, c.id]
        assert [t.id for t in repo.list_for_cluster("cluster1")] == [a.id, c.id]
        assert repo.list_for_cluster("cluster4") == []

    def test_ack(self, with_types: Storage) -> None:
        repo = with_types.triggers
        trigger = repo.create("cluster1", "reboot", "tester", "r", "")
        repo.ack("cluster1", trigger.id)
        acked = repo.get_by_id(trigger.id)
        assert not acked.active
        assert acked.acked_at is not None
        assert repo.list_active_for_cluster("cluster1") == []

    def test_ack_wrong_cluster(self, with_types: Storage) -> None:
        repo = with_types.triggers
        trigger = repo.create("cluster1", "reboot", "tester", "r", "")
        with pytest.raises(NotFoundError) as exc_info:
            repo.ack("cluster2", trigger.id)
        assert exc_info.value.context["cluster"] == "cluster2"
        assert repo.get_by_id(trigger.id).active

    def test_ack_unknown_cluster(self, with_types: Storage) -> None:
        with pytest.raises(NotFoundError):
            with_types.triggers.ack("nope", 1)

    def test_list_active_for_cluster(self, with_types: Storage) -> None:
        repo = with_types.triggers
        first = repo.create("cluster1", "reboot", "tester", "r", "")
        second = repo.create("cluster1", "reboot", "tester", "r", "")
        repo.ack("cluster1", first.id)
        assert [t.id for t in repo.list_active_for_cluster("cluster1")] == [second.id]

    def test_change_state_by_id(self, with_types: Storage) -> None:
        repo = with_types.triggers
        trigger = repo.create("cluster1", "reboot", "tester", "r", "")
        repo.change_state_by_id(trigger.id, False)
        assert not repo.get_by_id(trigger.id).active
        repo.change_state_by_id(str(trigger.id), "1")
        assert repo.get_by_id(trigger.id).active

    def test_change_state_keeps_timestamps(
        self, with_types: Storage, backdate: Callable[..., datetime]
    ) -> None:
        repo = with_types.triggers
        trigger = repo.create("cluster1", "reboot", "tester", "r", "")
        old = backdate(with_types, "trigger", "triggered_at")
        repo.change_state_by_id(trigger.id, False)
        stored = repo.get_by_id(trigger.id)
        assert stored.triggered_at == old
        assert stored.acked_at is None

        repo.ack("cluster1", trigger.id)
        acked_at = repo.get_by_id(trigger.id).acked_at
        assert acked_at is not None
        repo.change_state_by_id(trigger.id, True)
        reopened = repo.get_by_id(trigger.id)
        assert reopened.active
        assert reopened.triggered_at == old
        assert reopened.acked_at == acked_at

    def test_change_state_missing(self, with_types: Storage) -> None:
        with pytest.raises(NotFoundError):
            with_types.triggers.change_state_by_id(42, True)

    def test_delete(self, with_types: Storage) -> None:
        repo = with_types.triggers
        trigger = repo.create("cluster1", "reboot", "tester", "r", "")
        repo.delete(trigger.id)
        with pytest.raises(NotFoundError):
            repo.get_by_id(trigger.id)
        with pytest.raises(NotFoundError):
            repo.delete(trigger.id)

    def test_deleting_cluster_removes_triggers(self, with_types: Storage) -> None:
        with_types.triggers.create("cluster1", "reboot", "tester", "r", "")
        with_types.clusters.delete(1)
        assert with_types.triggers.list() == []

    def test_to_dict(self, with_types: Storage) -> None:
        data = with_types.triggers.create("cluster1", "reboot", "tester", "r", "").to_dict()
        assert data["acked_at"] is None
        assert data["active"] is True
        assert data["type"] == "reboot"
