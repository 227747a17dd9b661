"""Cluster configuration repository and the activation engine.

At most one ``operator_configuration`` row per cluster has ``active = 1``.
Every operation that can turn a row on deactivates the cluster's other
rows in the same transaction, after locking the cluster row, so neither
a reader nor a concurrent writer ever sees two active rows.

Architecture::

    create(cluster, ...)         enable(cluster, ...)        disable(cluster, ...)
         │                             │                            │
         ▼                             ▼                            ▼
    lock cluster row             lock cluster row             lock cluster row
    INSERT profile               pick highest-id row          UPDATE active row
    UPDATE others → 0            UPDATE others → 0              → 0 (no-op if none)
    INSERT row, active = 1       UPDATE row → 1
         │                             │                            │
         └────────── COMMIT ───────────┴──────────── COMMIT ────────┘

Guardrails:
    ❌ DON'T: Flip ``active`` outside ``self.transaction()``
    ✅ DO: Deactivate siblings and activate the target in one transaction

Tags:
    repository, activation, invariant, transaction
"""

from __future__ import annotations

from clusterconf.core.connection import Database
from clusterconf.core.errors import NotFoundError
from clusterconf.core.logging import LogContext, get_logger
from clusterconf.core.models import (
    CLUSTER_CONFIGURATION_TABLE,
    ClusterConfiguration,
    ClusterConfigurationCol,
)
from clusterconf.core.protocols import Connection
from clusterconf.core.repository import BaseRepository

from ._helpers import flag, parse_id
from .clusters import cluster_id_for_name
from .profiles import ConfigurationProfileRepository

logger = get_logger(__name__)

_Col = ClusterConfigurationCol


class ClusterConfigurationRepository(BaseRepository):
    """Cluster configuration assignments with enable/disable lifecycle."""

    TABLE = "operator_configuration"

    def __init__(
        self, db: Database, profiles: ConfigurationProfileRepository | None = None
    ) -> None:
        super().__init__(db)
        self.profiles = profiles or ConfigurationProfileRepository(db)

    # -- reads -----------------------------------------------------------------

    def list(self) -> list[ClusterConfiguration]:
        """Assignments of every cluster, ordered by id."""
        return self.select(CLUSTER_CONFIGURATION_TABLE.query(self.dialect).order_by(_Col.ID))

    def list_for_cluster(self, cluster: str) -> list[ClusterConfiguration]:
        with self.transaction() as conn:
            return self._list_for_cluster(conn, cluster)

    def _list_for_cluster(self, conn: Connection, cluster: str) -> list[ClusterConfiguration]:
        query = (
            CLUSTER_CONFIGURATION_TABLE.query(self.dialect)
            .equals(_Col.CLUSTER, cluster)
            .order_by(_Col.ID)
        )
        return self.fetch(conn, query)

    def get_by_id(self, configuration_id: int | str) -> ClusterConfiguration:
        cid = parse_id(configuration_id)
        with self.transaction() as conn:
            return self._get(conn, cid)

    def _get(self, conn: Connection, configuration_id: int) -> ClusterConfiguration:
        query = CLUSTER_CONFIGURATION_TABLE.query(self.dialect).equals(_Col.ID, configuration_id)
        return self.fetch_one(conn, query, "cluster configuration", configuration_id)

    def get_active_configuration(self, cluster: str) -> str:
        """Configuration text the cluster's agent should apply.

        Raises ``NotFoundError`` when the cluster is unknown or has no
        active assignment.
        """
        logger.debug("configuration.active.lookup", cluster=cluster)
        query = (
            CLUSTER_CONFIGURATION_TABLE.query(self.dialect)
            .equals(_Col.CLUSTER, cluster)
            .equals(_Col.ACTIVE, 1)
        )
        with self.transaction() as conn:
            return self.fetch_one(conn, query, "active configuration", cluster).configuration

    # -- activation ------------------------------------------------------------

    def _deactivate_others(self, conn: Connection, cluster_id: int, keep: int | None = None) -> None:
        sql = f"UPDATE operator_configuration SET active = {self.dialect.boolean_false()} WHERE cluster = {self.p(0)}"
        params: tuple = (cluster_id,)
        if keep is not None:
            sql += f" AND ID <> {self.p(1)}"
            params = (cluster_id, keep)
        conn.execute(sql, params)

    def create(
        self,
        cluster: str,
        username: str,
        reason: str,
        description: str,
        configuration: str,
    ) -> list[ClusterConfiguration]:
        """Store a new profile and make it the cluster's active configuration.

        Returns the cluster's assignments after the change.
        """
        with LogContext(cluster=cluster), self.transaction() as conn:
            cluster_id = cluster_id_for_name(self, conn, cluster, lock=True)
            profile_id = self.profiles.insert_profile(conn, username, description, configuration)
            logger.debug("configuration.profile_stored", profile_id=profile_id)
            self._deactivate_others(conn, cluster_id)
            new_id = self.insert(
                conn,
                self.TABLE,
                {
                    "cluster": cluster_id,
                    "configuration": profile_id,
                    "changed_by": username,
                    "active": 1,
                    "reason": reason,
                },
                now=("changed_at",),
            )
            rows = self._list_for_cluster(conn, cluster)
        logger.info(
            "configuration.created",
            cluster=cluster,
            configuration_id=new_id,
            profile_id=profile_id,
            changed_by=username,
        )
        return rows

    def enable(self, cluster: str, username: str, reason: str) -> list[ClusterConfiguration]:
        """Activate the cluster's most recent assignment, deactivating the rest."""
        with LogContext(cluster=cluster), self.transaction() as conn:
            cluster_id = cluster_id_for_name(self, conn, cluster, lock=True)
            target = self.scalar(
                conn,
                f"SELECT MAX(ID) FROM operator_configuration WHERE cluster = {self.p(0)}",
                (cluster_id,),
            )
            if target is None:
                raise NotFoundError("cluster configuration", cluster)
            target = int(target)
            logger.debug("configuration.enable.target", configuration_id=target)
            self._deactivate_others(conn, cluster_id, keep=target)
            conn.execute(
                f"UPDATE operator_configuration SET active = {self.dialect.boolean_true()}, "
                f"changed_at = {self.dialect.now()}, changed_by = {self.p(0)}, "
                f"reason = {self.p(1)} WHERE ID = {self.p(2)}",
                (username, reason, target),
            )
            rows = self._list_for_cluster(conn, cluster)
        logger.info("configuration.enabled", cluster=cluster, configuration_id=target, changed_by=username)
        return rows

    def disable(self, cluster: str, username: str, reason: str) -> list[ClusterConfiguration]:
        """Deactivate the cluster's active assignment; no-op when none is active."""
        with LogContext(cluster=cluster), self.transaction() as conn:
            cluster_id = cluster_id_for_name(self, conn, cluster, lock=True)
            conn.execute(
                f"UPDATE operator_configuration SET active = {self.dialect.boolean_false()}, "
                f"changed_at = {self.dialect.now()}, changed_by = {self.p(0)}, "
                f"reason = {self.p(1)} WHERE cluster = {self.p(2)} "
                f"AND active = {self.dialect.boolean_true()}",
                (username, reason, cluster_id),
            )
            changed = conn.rowcount
            rows = self._list_for_cluster(conn, cluster)
        logger.info("configuration.disabled", cluster=cluster, changed=changed, changed_by=username)
        return rows

    def enable_or_disable_by_id(self, configuration_id: int | str, active: bool | int | str) -> ClusterConfiguration:
        """Set one assignment's flag by id; enabling deactivates its siblings."""
        cid = parse_id(configuration_id)
        value = flag(active)
        with self.transaction() as conn:
            cluster_id = self.scalar(
                conn,
                f"SELECT cluster FROM operator_configuration WHERE ID = {self.p(0)}",
                (cid,),
            )
            if cluster_id is None:
                raise NotFoundError("cluster configuration", cid)
            if value:
                self.scalar(
                    conn,
                    f"SELECT ID FROM cluster WHERE ID = {self.p(0)}{self.dialect.for_update()}",
                    (cluster_id,),
                )
                self._deactivate_others(conn, int(cluster_id), keep=cid)
            conn.execute(
                f"UPDATE operator_configuration SET active = {self.p(0)}, "
                f"changed_at = {self.dialect.now()} WHERE ID = {self.p(1)}",
                (value, cid),
            )
            result = self._get(conn, cid)
        logger.info("configuration.state_changed", configuration_id=cid, active=bool(value))
        return result

    def delete(self, configuration_id: int | str) -> None:
        cid = parse_id(configuration_id)
        with self.transaction() as conn:
            conn.execute(f"DELETE FROM operator_configuration WHERE ID = {self.p(0)}", (cid,))
            if conn.rowcount == 0:
                raise NotFoundError("cluster configuration", cid)
        logger.info("configuration.deleted", configuration_id=cid)


__all__ = ["ClusterConfigurationRepository"]
