"""Cluster repository and typed cluster search.

Tags:
    repository, clusters, query-builder
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from clusterconf.core.connection import Database
from clusterconf.core.errors import NotFoundError
from clusterconf.core.logging import get_logger
from clusterconf.core.models import CLUSTER_TABLE, Cluster, ClusterCol
from clusterconf.core.protocols import Connection
from clusterconf.core.query import UNSET, Pagination, SelectBuilder, is_set
from clusterconf.core.repository import BaseRepository

from ._helpers import parse_id, require_text

logger = get_logger(__name__)


@dataclass(frozen=True)
class SearchClusterRequest:
    """Cluster lookup; fields left UNSET do not constrain the result."""

    id: Any = UNSET
    name: Any = UNSET
    pagination: Pagination = field(default_factory=Pagination)


class ClusterQuery:
    """Runs :class:`SearchClusterRequest` lookups.

    Example:
        >>> storage.cluster_query.query_one(SearchClusterRequest(name="c1"))
        Cluster(id=1, name='c1')
    """

    def __init__(self, db: Database) -> None:
        self._repo = BaseRepository(db)

    def build(self, request: SearchClusterRequest) -> SelectBuilder[Cluster]:
        return (
            CLUSTER_TABLE.query(self._repo.dialect)
            .equals(ClusterCol.ID, request.id)
            .equals(ClusterCol.NAME, request.name)
            .order_by(ClusterCol.ID)
            .paginate(request.pagination)
        )

    def query_one(self, request: SearchClusterRequest) -> Cluster:
        key = request.id if is_set(request.id) else request.name
        with self._repo.transaction() as conn:
            return self._repo.fetch_one(conn, self.build(request), "cluster", key)

    def search(self, request: SearchClusterRequest) -> list[Cluster]:
        return self._repo.select(self.build(request))


def cluster_id_for_name(
    repo: BaseRepository, conn: Connection, name: str, *, lock: bool = False
) -> int:
    """Resolve a cluster name to its id inside an open transaction.

    With ``lock`` the cluster row stays locked until the transaction ends,
    which serializes activation changes for that cluster.
    """
    suffix = repo.dialect.for_update() if lock else ""
    cluster_id = repo.scalar(
        conn, f"SELECT ID FROM cluster WHERE name = {repo.p(0)}{suffix}", (name,)
    )
    if cluster_id is None:
        raise NotFoundError("cluster", name)
    if lock:
        logger.debug("cluster.locked", cluster_id=cluster_id)
    return int(cluster_id)


class ClusterRepository(BaseRepository):
    """CRUD for the ``cluster`` table.

    Deleting a cluster cascades to its configuration assignments and
    triggers (``ON DELETE CASCADE``).
    """

    TABLE = "cluster"

    def list(self) -> list[Cluster]:
        """All clusters ordered by id."""
        return self.select(CLUSTER_TABLE.query(self.dialect).order_by(ClusterCol.ID))

    def get_by_id(self, cluster_id: int | str) -> Cluster:
        cid = parse_id(cluster_id)
        logger.debug("cluster.lookup", cluster_id=cid)
        query = CLUSTER_TABLE.query(self.dialect).equals(ClusterCol.ID, cid)
        with self.transaction() as conn:
            return self.fetch_one(conn, query, "cluster", cid)

    def get_by_name(self, name: str) -> Cluster:
        logger.debug("cluster.lookup", cluster=name)
        query = CLUSTER_TABLE.query(self.dialect).equals(ClusterCol.NAME, name)
        with self.transaction() as conn:
            return self.fetch_one(conn, query, "cluster", name)

    def search(self, request: SearchClusterRequest) -> list[Cluster]:
        return ClusterQuery(self.db).search(request)

    def register(self, name: str) -> Cluster:
        """Register a cluster; the storage assigns the id.

        Raises ``ConstraintError`` when the name is taken.
        """
        require_text(name, "name")
        with self.transaction() as conn:
            new_id = self.insert(conn, self.TABLE, {"name": name})
        logger.info("cluster.registered", cluster=name, cluster_id=new_id)
        return Cluster(id=new_id, name=name)

    def create(self, cluster_id: int | str, name: str) -> Cluster:
        """Create a cluster with an explicit id."""
        cid = parse_id(cluster_id)
        require_text(name, "name")
        with self.transaction() as conn:
            self.insert(conn, self.TABLE, {"ID": cid, "name": name})
        logger.info("cluster.created", cluster=name, cluster_id=cid)
        return Cluster(id=cid, name=name)

    def delete(self, cluster_id: int | str) -> None:
        cid = parse_id(cluster_id)
        with self.transaction() as conn:
            conn.execute(f"DELETE FROM cluster WHERE ID = {self.p(0)}", (cid,))
            if conn.rowcount == 0:
                raise NotFoundError("cluster", cid)
        logger.info("cluster.deleted", cluster_id=cid)


__all__ = [
    "SearchClusterRequest",
    "ClusterQuery",
    "ClusterRepository",
    "cluster_id_for_name",
]
