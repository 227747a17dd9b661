"""Trigger type and trigger repositories.

Tags:
    repository, triggers
"""

from __future__ import annotations

from clusterconf.core.connection import Database
from clusterconf.core.errors import NotFoundError
from clusterconf.core.logging import get_logger
from clusterconf.core.models import (
    TRIGGER_TABLE,
    TRIGGER_TYPE_TABLE,
    Trigger,
    TriggerCol,
    TriggerType,
    TriggerTypeCol,
)
from clusterconf.core.protocols import Connection
from clusterconf.core.repository import BaseRepository

from ._helpers import flag, parse_id, require_text
from .clusters import cluster_id_for_name

logger = get_logger(__name__)


class TriggerTypeRepository(BaseRepository):
    """Registry of trigger types. Types are never mutated once created."""

    TABLE = "trigger_type"

    def list(self) -> list[TriggerType]:
        return self.select(TRIGGER_TYPE_TABLE.query(self.dialect).order_by(TriggerTypeCol.ID))

    def create(self, trigger_type: str, description: str) -> TriggerType:
        """Register a trigger type; ``ConstraintError`` when it already exists."""
        require_text(trigger_type, "type")
        with self.transaction() as conn:
            new_id = self.insert(
                conn, self.TABLE, {"type": trigger_type, "description": description}
            )
        logger.info("trigger_type.created", trigger_type=trigger_type, trigger_type_id=new_id)
        return TriggerType(id=new_id, type=trigger_type, description=description)

    def get_id_by_type(self, trigger_type: str) -> int:
        with self.transaction() as conn:
            return self.id_for_type(conn, trigger_type)

    def id_for_type(self, conn: Connection, trigger_type: str) -> int:
        type_id = self.scalar(
            conn, f"SELECT ID FROM trigger_type WHERE type = {self.p(0)}", (trigger_type,)
        )
        if type_id is None:
            raise NotFoundError("trigger type", trigger_type)
        logger.debug("trigger_type.resolved", trigger_type=trigger_type, trigger_type_id=type_id)
        return int(type_id)


class TriggerRepository(BaseRepository):
    """Triggers raised against clusters.

    A trigger is created active; the agent acknowledges it (``ack``), which
    stamps ``acked_at`` and clears ``active``.
    """

    TABLE = "trigger"

    def __init__(self, db: Database, types: TriggerTypeRepository | None = None) -> None:
        super().__init__(db)
        self.types = types or TriggerTypeRepository(db)

    def list(self) -> list[Trigger]:
        return self.select(TRIGGER_TABLE.query(self.dialect).order_by(TriggerCol.ID))

    def list_for_cluster(self, cluster: str) -> list[Trigger]:
        return self.select(
            TRIGGER_TABLE.query(self.dialect)
            .equals(TriggerCol.CLUSTER, cluster)
            .order_by(TriggerCol.ID)
        )

    def list_active_for_cluster(self, cluster: str) -> list[Trigger]:
        return self.select(
            TRIGGER_TABLE.query(self.dialect)
            .equals(TriggerCol.ACTIVE, 1)
            .equals(TriggerCol.CLUSTER, cluster)
            .order_by(TriggerCol.ID)
        )

    def get_by_id(self, trigger_id: int | str) -> Trigger:
        tid = parse_id(trigger_id)
        query = TRIGGER_TABLE.query(self.dialect).equals(TriggerCol.ID, tid)
        with self.transaction() as conn:
            return self.fetch_one(conn, query, "trigger", tid)

    def create(
        self,
        cluster: str,
        trigger_type: str,
        username: str,
        reason: str,
        link: str,
        parameters: str = "",
    ) -> Trigger:
        """Raise a trigger of a registered type against a cluster."""
        with self.transaction() as conn:
            type_id = self.types.id_for_type(conn, trigger_type)
            cluster_id = cluster_id_for_name(self, conn, cluster)
            new_id = self.insert(
                conn,
                self.TABLE,
                {
                    "type": type_id,
                    "cluster": cluster_id,
                    "reason": reason,
                    "link": link,
                    "triggered_by": username,
                    "acked_at": None,
                    "parameters": parameters,
                    "active": 1,
                },
                now=("triggered_at",),
            )
            trigger = self.fetch_one(
                conn,
                TRIGGER_TABLE.query(self.dialect).equals(TriggerCol.ID, new_id),
                "trigger",
                new_id,
            )
        logger.info(
            "trigger.created",
            trigger_id=new_id,
            trigger_type=trigger_type,
            cluster=cluster,
            triggered_by=username,
        )
        return trigger

    def change_state_by_id(self, trigger_id: int | str, active: bool | int | str) -> None:
        tid = parse_id(trigger_id)
        value = flag(active)
        with self.transaction() as conn:
            conn.execute(
                f"UPDATE trigger SET active = {self.p(0)} WHERE ID = {self.p(1)}",
                (value, tid),
            )
            if conn.rowcount == 0:
                raise NotFoundError("trigger", tid)
        logger.info("trigger.state_changed", trigger_id=tid, active=bool(value))

    def ack(self, cluster: str, trigger_id: int | str) -> None:
        """Acknowledge a trigger of ``cluster``: stamp ``acked_at``, clear ``active``."""
        tid = parse_id(trigger_id)
        with self.transaction() as conn:
            cluster_id = cluster_id_for_name(self, conn, cluster)
            conn.execute(
                f"UPDATE trigger SET acked_at = {self.dialect.now()}, "
                f"active = {self.dialect.boolean_false()} "
                f"WHERE cluster = {self.p(0)} AND ID = {self.p(1)}",
                (cluster_id, tid),
            )
            if conn.rowcount == 0:
                raise NotFoundError("trigger", tid).with_context(cluster=cluster)
        logger.info("trigger.acked", trigger_id=tid, cluster=cluster)

    def delete(self, trigger_id: int | str) -> None:
        tid = parse_id(trigger_id)
        with self.transaction() as conn:
            conn.execute(f"DELETE FROM trigger WHERE ID = {self.p(0)}", (tid,))
            if conn.rowcount == 0:
                raise NotFoundError("trigger", tid)
        logger.info("trigger.deleted", trigger_id=tid)


__all__ = ["TriggerTypeRepository", "TriggerRepository"]
