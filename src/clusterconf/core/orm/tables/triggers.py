"""Trigger type and trigger tables.

Tags:
    orm, sqlalchemy, tables, triggers
"""

from __future__ import annotations

import datetime

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from clusterconf.core.orm.base import ClusterConfBase


class TriggerTypeTable(ClusterConfBase):
    __tablename__ = "trigger_type"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")


class TriggerTable(ClusterConfBase):
    __tablename__ = "trigger"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("trigger_type.id", ondelete="CASCADE"),
        nullable=False,
    )
    cluster: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("cluster.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    link: Mapped[str] = mapped_column(Text, nullable=False, default="")
    triggered_at: Mapped[datetime.datetime]
    triggered_by: Mapped[str] = mapped_column(Text, nullable=False)
    acked_at: Mapped[datetime.datetime | None]
    parameters: Mapped[str] = mapped_column(Text, nullable=False, default="")
    active: Mapped[bool] = mapped_column(Integer, nullable=False, default=1)
