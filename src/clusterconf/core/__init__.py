"""clusterconf core -- persistence and configuration-activation engine.

Architecture::

    Layer 1 -- Type System & Errors
        errors.py          Structured error hierarchy (ClusterConfError ...)
        protocols.py       Connection protocol used by repositories
        timestamps.py      UTC helpers (stdlib-only)
        logging.py         structlog configuration
        settings.py        StorageSettings (pydantic-settings)

    Layer 2 -- Database
        dialect.py         SQLite / PostgreSQL dialects
        connection.py      Engine factory, SQLBridge, Database handle
        orm/               SQLAlchemy 2.0 schema declarations

    Layer 3 -- Data Access
        query.py           Typed columns, Table, SelectBuilder, UNSET
        models.py          Entities and their column sets
        repository.py      BaseRepository
        repositories/      One repository per entity
        storage.py         Storage facade

Tags:
    clusterconf, core, storage, activation
"""

from clusterconf.core.errors import (
    ClusterConfError,
    ConfigError,
    ConstraintError,
    ErrorCategory,
    NotFoundError,
    StorageClosedError,
    StorageError,
    UnknownColumnError,
    ValidationError,
)
from clusterconf.core.models import (
    Cluster,
    ClusterConfiguration,
    ConfigurationProfile,
    Trigger,
    TriggerType,
)
from clusterconf.core.query import UNSET, Pagination
from clusterconf.core.repositories import SearchClusterRequest
from clusterconf.core.storage import Storage

__all__ = [
    "Storage",
    "Cluster",
    "ConfigurationProfile",
    "ClusterConfiguration",
    "TriggerType",
    "Trigger",
    "UNSET",
    "Pagination",
    "SearchClusterRequest",
    "ErrorCategory",
    "ClusterConfError",
    "NotFoundError",
    "ValidationError",
    "ConfigError",
    "StorageError",
    "ConstraintError",
    "StorageClosedError",
    "UnknownColumnError",
]
