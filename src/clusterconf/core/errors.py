"""
Structured error types for clusterconf.

Every error raised by the storage engine derives from
:class:`ClusterConfError` and carries a :class:`ErrorCategory`, a context
dict and an optional chained cause.  Callers (the REST layer, the CLI)
map categories to their own outward codes: ``NOT_FOUND`` → 404,
``VALIDATION`` → 400, everything else → 500.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                      ClusterConfError                         │
        │               (category, context, cause)                      │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  NotFoundError      ValidationError       ConfigError         │
        │  (NOT_FOUND)        (VALIDATION)          (CONFIG)            │
        │                                                               │
        │  StorageError (STORAGE)                                       │
        │       │                                                       │
        │  ConstraintError   StorageClosedError   UnknownColumnError    │
        └──────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Wrap NotFoundError / ValidationError into StorageError
    ✅ DO: Let expected, caller-recoverable errors propagate unchanged

    ❌ DON'T: Swallow the driver exception
    ✅ DO: Pass it as ``cause=`` so ``__cause__`` is chained

Examples:
    >>> err = NotFoundError("cluster", "c1")
    >>> err.category
    <ErrorCategory.NOT_FOUND: 'NOT_FOUND'>
    >>> err.to_dict()["context"]
    {'entity': 'cluster', 'key': 'c1'}

Tags:
    error-handling, exception-hierarchy, error-context
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Error categories for classification and outward status mapping.

    Attributes:
        NOT_FOUND: No row matched an id / name / type lookup
        VALIDATION: Malformed input (non-numeric id, empty name)
        STORAGE: Driver, connection, schema or constraint failure
        CONFIG: Missing or invalid settings (unknown driver)
        INTERNAL: Bugs, unexpected state
    """

    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    STORAGE = "STORAGE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


class ClusterConfError(Exception):
    """
    Base exception for all clusterconf errors.

    Subclasses set ``default_category``; ``context`` holds structured
    metadata for logging and ``cause`` the original exception.

    Examples:
        >>> err = ClusterConfError("boom").with_context(cluster="c1")
        >>> err.context
        {'cluster': 'c1'}
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context: dict[str, Any] = dict(context or {})
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ClusterConfError:
        """Add context to this error (fluent API)."""
        self.context.update(kwargs)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if self.context:
            result["context"] = dict(self.context)
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# EXPECTED, CALLER-RECOVERABLE ERRORS
# =============================================================================


class NotFoundError(ClusterConfError):
    """No row matched the lookup.

    ``entity`` names the table-level concept (``"cluster"``,
    ``"trigger type"`` ...), ``key`` the id or name that was looked up.
    """

    default_category = ErrorCategory.NOT_FOUND

    def __init__(self, entity: str, key: Any, message: str | None = None):
        self.entity = entity
        self.key = key
        super().__init__(
            message or f"{entity} with key {key!r} was not found in the storage",
            context={"entity": entity, "key": key},
        )


class ValidationError(ClusterConfError):
    """Malformed input. Never retried; the caller must fix the input."""

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(ClusterConfError):
    """Configuration error (unknown driver, unusable data source)."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class StorageError(ClusterConfError):
    """Driver, connection or schema error."""

    default_category = ErrorCategory.STORAGE


class ConstraintError(StorageError):
    """Unique or foreign-key constraint violation reported by the driver."""


class StorageClosedError(StorageError):
    """The storage was closed and can not serve the operation."""

    def __init__(self, message: str = "storage connection is closed"):
        super().__init__(message)


class UnknownColumnError(StorageError):
    """A query used a column that the target table does not map.

    This is a programming error, raised while the query is built.
    """

    default_category = ErrorCategory.INTERNAL

    def __init__(self, column: Any, table: str):
        self.column = column
        self.table = table
        super().__init__(
            f"unknown col {column} for table {table}",
            context={"column": str(column), "table": table},
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def is_expected(error: BaseException) -> bool:
    """True for errors a caller is expected to handle (not found, bad input)."""
    if isinstance(error, ClusterConfError):
        return error.category in (ErrorCategory.NOT_FOUND, ErrorCategory.VALIDATION)
    return False


def get_error_category(error: BaseException) -> ErrorCategory:
    """Get the category of an error (INTERNAL for foreign exceptions)."""
    if isinstance(error, ClusterConfError):
        return error.category
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ClusterConfError",
    "NotFoundError",
    "ValidationError",
    "ConfigError",
    "StorageError",
    "ConstraintError",
    "StorageClosedError",
    "UnknownColumnError",
    "is_expected",
    "get_error_category",
]
