"""Configuration profile repository.

Mutations return the refreshed list of all profiles so callers can show
the resulting state.  The configuration text is stored and returned
verbatim.

Tags:
    repository, configuration-profiles
"""

from __future__ import annotations

from clusterconf.core.errors import NotFoundError
from clusterconf.core.logging import get_logger
from clusterconf.core.models import PROFILE_TABLE, ConfigurationProfile, ProfileCol
from clusterconf.core.protocols import Connection
from clusterconf.core.repository import BaseRepository

from ._helpers import parse_id

logger = get_logger(__name__)


class ConfigurationProfileRepository(BaseRepository):
    """CRUD for ``configuration_profile``."""

    TABLE = "configuration_profile"

    def list(self) -> list[ConfigurationProfile]:
        return self.select(PROFILE_TABLE.query(self.dialect).order_by(ProfileCol.ID))

    def get_by_id(self, profile_id: int | str) -> ConfigurationProfile:
        pid = parse_id(profile_id)
        logger.debug("profile.lookup", profile_id=pid)
        query = PROFILE_TABLE.query(self.dialect).equals(ProfileCol.ID, pid)
        with self.transaction() as conn:
            return self.fetch_one(conn, query, "configuration profile", pid)

    def insert_profile(
        self, conn: Connection, username: str, description: str, configuration: str
    ) -> int:
        """Insert one profile inside an open transaction and return its id."""
        return self.insert(
            conn,
            self.TABLE,
            {
                "configuration": configuration,
                "changed_by": username,
                "description": description,
            },
            now=("changed_at",),
        )

    def create(
        self, username: str, description: str, configuration: str
    ) -> list[ConfigurationProfile]:
        with self.transaction() as conn:
            new_id = self.insert_profile(conn, username, description, configuration)
        logger.info("profile.created", profile_id=new_id, changed_by=username)
        return self.list()

    def change(
        self,
        profile_id: int | str,
        username: str,
        description: str,
        configuration: str,
    ) -> list[ConfigurationProfile]:
        """Replace a profile's text and description; refreshes ``changed_at``."""
        pid = parse_id(profile_id)
        with self.transaction() as conn:
            conn.execute(
                f"UPDATE configuration_profile SET configuration = {self.p(0)}, "
                f"changed_at = {self.dialect.now()}, changed_by = {self.p(1)}, "
                f"description = {self.p(2)} WHERE ID = {self.p(3)}",
                (configuration, username, description, pid),
            )
            if conn.rowcount == 0:
                raise NotFoundError("configuration profile", pid)
        logger.info("profile.changed", profile_id=pid, changed_by=username)
        return self.list()

    def delete(self, profile_id: int | str) -> list[ConfigurationProfile]:
        """Delete a profile; its cluster assignments go with it."""
        pid = parse_id(profile_id)
        with self.transaction() as conn:
            conn.execute(
                f"DELETE FROM configuration_profile WHERE ID = {self.p(0)}", (pid,)
            )
            if conn.rowcount == 0:
                raise NotFoundError("configuration profile", pid)
        logger.info("profile.deleted", profile_id=pid)
        return self.list()


__all__ = ["ConfigurationProfileRepository"]
