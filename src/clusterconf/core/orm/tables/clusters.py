"""Cluster, configuration profile and cluster configuration tables.

Column names are lower case so that the unquoted identifiers used in
plain SQL (``ID``, ``name`` ...) resolve on PostgreSQL as well.

Tags:
    orm, sqlalchemy, tables, clusters, configuration
"""

from __future__ import annotations

import datetime

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from clusterconf.core.orm.base import ClusterConfBase


class ClusterTable(ClusterConfBase):
    __tablename__ = "cluster"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)


class ConfigurationProfileTable(ClusterConfBase):
    __tablename__ = "configuration_profile"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    configuration: Mapped[str] = mapped_column(Text, nullable=False)
    changed_at: Mapped[datetime.datetime]
    changed_by: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")


class OperatorConfigurationTable(ClusterConfBase):
    """Assignment of a configuration profile to a cluster."""

    __tablename__ = "operator_configuration"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cluster: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("cluster.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    configuration: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("configuration_profile.id", ondelete="CASCADE"),
        nullable=False,
    )
    changed_at: Mapped[datetime.datetime]
    changed_by: Mapped[str] = mapped_column(Text, nullable=False)
    active: Mapped[bool] = mapped_column(Integer, nullable=False, default=0)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
