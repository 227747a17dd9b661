"""SQLAlchemy 2.0 schema declarations for clusterconf.

Modules
-------
base        ClusterConfBase (declarative base + type map)
tables      The five mapped tables (cluster, configuration_profile,
            operator_configuration, trigger_type, trigger)

``create_schema(engine)`` creates every table that does not exist yet.

Tags:
    orm, sqlalchemy, declarative, schema
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from clusterconf.core.orm.base import ClusterConfBase
from clusterconf.core.orm.tables import *  # noqa: F401,F403


def create_schema(engine: Engine) -> list[str]:
    """Create all tables (idempotent) and return their names in creation order."""
    ClusterConfBase.metadata.create_all(engine)
    return [t.name for t in ClusterConfBase.metadata.sorted_tables]


def drop_schema(engine: Engine) -> None:
    """Drop all clusterconf tables."""
    ClusterConfBase.metadata.drop_all(engine)


__all__ = [
    "ClusterConfBase",
    "create_schema",
    "drop_schema",
    "ClusterTable",
    "ConfigurationProfileTable",
    "OperatorConfigurationTable",
    "TriggerTypeTable",
    "TriggerTable",
]
