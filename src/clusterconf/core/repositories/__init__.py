"""Repositories for the clusterconf entities.

Each repository class extends :class:`BaseRepository` and provides typed,
dialect-aware CRUD for one entity.  Callers reach them through
:class:`clusterconf.core.storage.Storage`.

Architecture::

    ┌────────────────────────────────────────────────────────────────┐
    │  Storage  (clusters, profiles, cluster_configurations, ...)   │
    └────────────────────────────┬───────────────────────────────────┘
                                 │ owns
                                 ▼
    ┌────────────────────────────────────────────────────────────────┐
    │  clusterconf.core.repositories  (this package)                │
    │                                                               │
    │  clusters.py         ClusterRepository, ClusterQuery,         │
    │                       SearchClusterRequest                    │
    │  profiles.py         ConfigurationProfileRepository           │
    │  configurations.py   ClusterConfigurationRepository           │
    │                       (activation engine)                     │
    │  triggers.py         TriggerTypeRepository,                   │
    │                       TriggerRepository                       │
    │  _helpers.py         parse_id, require_text, flag             │
    └────────────────────────────────────────────────────────────────┘

Tags:
    repository, sql, domain, data-access, crud, dialect-aware
"""

from .clusters import ClusterQuery, ClusterRepository, SearchClusterRequest
from .configurations import ClusterConfigurationRepository
from .profiles import ConfigurationProfileRepository
from .triggers import TriggerRepository, TriggerTypeRepository

__all__ = [
    "ClusterRepository",
    "ClusterQuery",
    "SearchClusterRequest",
    "ConfigurationProfileRepository",
    "ClusterConfigurationRepository",
    "TriggerTypeRepository",
    "TriggerRepository",
]
