"""
UTC timestamp utilities (stdlib-only).

Timestamps are written by the database (``dialect.now()``) and come back
either as ``datetime`` (PostgreSQL) or as ``'YYYY-MM-DD HH:MM:SS'`` text
(SQLite).  :func:`from_db_timestamp` normalises both into timezone-aware
UTC datetimes; :func:`to_iso8601` is used when entities are serialised.
"""

from datetime import UTC, datetime


def to_iso8601(dt: datetime | None) -> str | None:
    """ISO 8601 text for JSON output; ``None`` stays ``None``."""
    if dt is None:
        return None
    return dt.isoformat()


def from_iso8601(s: str | None) -> datetime | None:
    if s is None:
        return None
    return datetime.fromisoformat(s)


def from_db_timestamp(value: datetime | str | None) -> datetime | None:
    """Normalise a timestamp column value to an aware UTC datetime.

    Naive values are taken to be UTC: both SQLite's ``strftime(..., 'now')`` and
    ``NOW()`` stored into a naive column are UTC wall-clock times.
    """
    if value is None or value == "":
        return None
    dt = value if isinstance(value, datetime) else from_iso8601(str(value))
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
