"""Entities and their query-side column sets.

Each entity is a frozen value object with no back-references; relations
are expressed by id or name.  Next to every entity sits its column class
(``ClusterCol``, ``TriggerCol`` ...) and its :class:`~clusterconf.core.query.Table`,
which is what repositories build queries from.

Entities:
    Cluster                 (id, name)
    ConfigurationProfile    (id, configuration, changed_at, changed_by, description)
    ClusterConfiguration    (id, cluster, configuration, changed_at, changed_by,
                             active, reason, configuration_id)
    TriggerType             (id, type, description)
    Trigger                 (id, type, cluster, reason, link, triggered_at,
                             triggered_by, acked_at, parameters, active)

Tags:
    entities, dataclasses, columns, data-model
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar

from clusterconf.core.query import Column, Table
from clusterconf.core.timestamps import from_db_timestamp, to_iso8601


def _to_bool(value: Any) -> bool:
    # INTEGER 0/1 on every backend, '0'/'1' text from older SQLite rows
    return bool(int(value))


# =============================================================================
# CLUSTER
# =============================================================================


@dataclass(frozen=True, slots=True)
class Cluster:
    """Managed remote cluster, addressed by a UUID-like name."""

    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


class ClusterCol(Column):
    ID: ClassVar[ClusterCol]
    NAME: ClassVar[ClusterCol]


ClusterCol.ID = ClusterCol("ID", "id", convert=int)
ClusterCol.NAME = ClusterCol("Name", "name", convert=str)

CLUSTER_TABLE: Table[Cluster] = Table(
    name="cluster",
    source="cluster",
    columns=(ClusterCol.ID, ClusterCol.NAME),
    factory=Cluster,
    column_type=ClusterCol,
)


# =============================================================================
# CONFIGURATION PROFILE
# =============================================================================


@dataclass(frozen=True, slots=True)
class ConfigurationProfile:
    """Reusable configuration; ``configuration`` is opaque text kept verbatim."""

    id: int
    configuration: str
    changed_at: datetime | None
    changed_by: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "configuration": self.configuration,
            "changed_at": to_iso8601(self.changed_at),
            "changed_by": self.changed_by,
            "description": self.description,
        }


class ProfileCol(Column):
    ID: ClassVar[ProfileCol]
    CONFIGURATION: ClassVar[ProfileCol]
    CHANGED_AT: ClassVar[ProfileCol]
    CHANGED_BY: ClassVar[ProfileCol]
    DESCRIPTION: ClassVar[ProfileCol]


ProfileCol.ID = ProfileCol("ID", "id", convert=int)
ProfileCol.CONFIGURATION = ProfileCol("configuration", "configuration", convert=str)
ProfileCol.CHANGED_AT = ProfileCol("changed_at", "changed_at", convert=from_db_timestamp)
ProfileCol.CHANGED_BY = ProfileCol("changed_by", "changed_by", convert=str)
ProfileCol.DESCRIPTION = ProfileCol("description", "description", convert=str)

PROFILE_TABLE: Table[ConfigurationProfile] = Table(
    name="configuration_profile",
    source="configuration_profile",
    columns=(
        ProfileCol.ID,
        ProfileCol.CONFIGURATION,
        ProfileCol.CHANGED_AT,
        ProfileCol.CHANGED_BY,
        ProfileCol.DESCRIPTION,
    ),
    factory=ConfigurationProfile,
    column_type=ProfileCol,
)


# =============================================================================
# CLUSTER CONFIGURATION
# =============================================================================


@dataclass(frozen=True, slots=True)
class ClusterConfiguration:
    """Assignment of a configuration profile to a cluster.

    ``cluster`` is the cluster name and ``configuration`` the profile text,
    both resolved through joins; ``configuration_id`` is the profile id.
    """

    id: int
    cluster: str
    configuration: str
    changed_at: datetime | None
    changed_by: str
    active: bool
    reason: str
    configuration_id: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "cluster": self.cluster,
            "configuration": self.configuration,
            "configuration_id": self.configuration_id,
            "changed_at": to_iso8601(self.changed_at),
            "changed_by": self.changed_by,
            "active": self.active,
            "reason": self.reason,
        }


class ClusterConfigurationCol(Column):
    ID: ClassVar[ClusterConfigurationCol]
    CLUSTER: ClassVar[ClusterConfigurationCol]
    CONFIGURATION: ClassVar[ClusterConfigurationCol]
    CHANGED_AT: ClassVar[ClusterConfigurationCol]
    CHANGED_BY: ClassVar[ClusterConfigurationCol]
    ACTIVE: ClassVar[ClusterConfigurationCol]
    REASON: ClassVar[ClusterConfigurationCol]
    CONFIGURATION_ID: ClassVar[ClusterConfigurationCol]


_cc = ClusterConfigurationCol
_cc.ID = _cc("ID", "id", "operator_configuration.id", int)
_cc.CLUSTER = _cc("cluster", "cluster", "cluster.name", str)
_cc.CONFIGURATION = _cc("configuration", "configuration", "configuration_profile.configuration", str)
_cc.CHANGED_AT = _cc("changed_at", "changed_at", "operator_configuration.changed_at", from_db_timestamp)
_cc.CHANGED_BY = _cc("changed_by", "changed_by", "operator_configuration.changed_by", str)
_cc.ACTIVE = _cc("active", "active", "operator_configuration.active", _to_bool)
_cc.REASON = _cc("reason", "reason", "operator_configuration.reason", str)
_cc.CONFIGURATION_ID = _cc("configuration_id", "configuration_id", "operator_configuration.configuration", int)

CLUSTER_CONFIGURATION_TABLE: Table[ClusterConfiguration] = Table(
    name="operator_configuration",
    source=(
        "operator_configuration"
        " JOIN cluster ON operator_configuration.cluster = cluster.id"
        " JOIN configuration_profile ON operator_configuration.configuration = configuration_profile.id"
    ),
    columns=(
        _cc.ID,
        _cc.CLUSTER,
        _cc.CONFIGURATION,
        _cc.CHANGED_AT,
        _cc.CHANGED_BY,
        _cc.ACTIVE,
        _cc.REASON,
        _cc.CONFIGURATION_ID,
    ),
    factory=ClusterConfiguration,
    column_type=ClusterConfigurationCol,
)
del _cc


# =============================================================================
# TRIGGER TYPE
# =============================================================================


@dataclass(frozen=True, slots=True)
class TriggerType:
    """Registered kind of trigger (``must-gather`` ...)."""

    id: int
    type: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.type, "description": self.description}


class TriggerTypeCol(Column):
    ID: ClassVar[TriggerTypeCol]
    TYPE: ClassVar[TriggerTypeCol]
    DESCRIPTION: ClassVar[TriggerTypeCol]


TriggerTypeCol.ID = TriggerTypeCol("ID", "id", convert=int)
TriggerTypeCol.TYPE = TriggerTypeCol("type", "type", convert=str)
TriggerTypeCol.DESCRIPTION = TriggerTypeCol("description", "description", convert=str)

TRIGGER_TYPE_TABLE: Table[TriggerType] = Table(
    name="trigger_type",
    source="trigger_type",
    columns=(TriggerTypeCol.ID, TriggerTypeCol.TYPE, TriggerTypeCol.DESCRIPTION),
    factory=TriggerType,
    column_type=TriggerTypeCol,
)


# =============================================================================
# TRIGGER
# =============================================================================


@dataclass(frozen=True, slots=True)
class Trigger:
    """Diagnostic action requested against a cluster.

    ``type`` is the trigger type name, ``cluster`` the cluster name.
    ``acked_at`` stays ``None`` until the agent acknowledges the trigger.
    """

    id: int
    type: str
    cluster: str
    reason: str
    link: str
    triggered_at: datetime | None
    triggered_by: str
    acked_at: datetime | None
    parameters: str
    active: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "cluster": self.cluster,
            "reason": self.reason,
            "link": self.link,
            "triggered_at": to_iso8601(self.triggered_at),
            "triggered_by": self.triggered_by,
            "acked_at": to_iso8601(self.acked_at),
            "parameters": self.parameters,
            "active": self.active,
        }


class TriggerCol(Column):
    ID: ClassVar[TriggerCol]
    TYPE: ClassVar[TriggerCol]
    CLUSTER: ClassVar[TriggerCol]
    REASON: ClassVar[TriggerCol]
    LINK: ClassVar[TriggerCol]
    TRIGGERED_AT: ClassVar[TriggerCol]
    TRIGGERED_BY: ClassVar[TriggerCol]
    ACKED_AT: ClassVar[TriggerCol]
    PARAMETERS: ClassVar[TriggerCol]
    ACTIVE: ClassVar[TriggerCol]


TriggerCol.ID = TriggerCol("ID", "id", "trigger.id", int)
TriggerCol.TYPE = TriggerCol("type", "type", "trigger_type.type", str)
TriggerCol.CLUSTER = TriggerCol("cluster", "cluster", "cluster.name", str)
TriggerCol.REASON = TriggerCol("reason", "reason", "trigger.reason", str)
TriggerCol.LINK = TriggerCol("link", "link", "trigger.link", str)
TriggerCol.TRIGGERED_AT = TriggerCol("triggered_at", "triggered_at", "trigger.triggered_at", from_db_timestamp)
TriggerCol.TRIGGERED_BY = TriggerCol("triggered_by", "triggered_by", "trigger.triggered_by", str)
TriggerCol.ACKED_AT = TriggerCol("acked_at", "acked_at", "trigger.acked_at", from_db_timestamp)
TriggerCol.PARAMETERS = TriggerCol("parameters", "parameters", "trigger.parameters", str)
TriggerCol.ACTIVE = TriggerCol("active", "active", "trigger.active", _to_bool)

TRIGGER_TABLE: Table[Trigger] = Table(
    name="trigger",
    source=(
        "trigger"
        " JOIN trigger_type ON trigger.type = trigger_type.id"
        " JOIN cluster ON trigger.cluster = cluster.id"
    ),
    columns=(
        TriggerCol.ID,
        TriggerCol.TYPE,
        TriggerCol.CLUSTER,
        TriggerCol.REASON,
        TriggerCol.LINK,
        TriggerCol.TRIGGERED_AT,
        TriggerCol.TRIGGERED_BY,
        TriggerCol.ACKED_AT,
        TriggerCol.PARAMETERS,
        TriggerCol.ACTIVE,
    ),
    factory=Trigger,
    column_type=TriggerCol,
)


__all__ = [
    "Cluster",
    "ClusterCol",
    "CLUSTER_TABLE",
    "ConfigurationProfile",
    "ProfileCol",
    "PROFILE_TABLE",
    "ClusterConfiguration",
    "ClusterConfigurationCol",
    "CLUSTER_CONFIGURATION_TABLE",
    "TriggerType",
    "TriggerTypeCol",
    "TRIGGER_TYPE_TABLE",
    "Trigger",
    "TriggerCol",
    "TRIGGER_TABLE",
]
