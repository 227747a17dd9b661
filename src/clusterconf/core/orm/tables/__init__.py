"""ORM table package, re-exports all table classes.

    from clusterconf.core.orm.tables import ClusterTable, TriggerTable

Tags:
    orm, sqlalchemy, tables
"""

from clusterconf.core.orm.tables.clusters import (  # noqa: F401
    ClusterTable,
    ConfigurationProfileTable,
    OperatorConfigurationTable,
)
from clusterconf.core.orm.tables.triggers import (  # noqa: F401
    TriggerTable,
    TriggerTypeTable,
)

__all__ = [
    "ClusterTable",
    "ConfigurationProfileTable",
    "OperatorConfigurationTable",
    "TriggerTypeTable",
    "TriggerTable",
]
