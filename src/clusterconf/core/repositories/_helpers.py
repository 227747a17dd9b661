from __future__ import annotations

from typing import Any

from clusterconf.core.errors import ValidationError


def parse_id(value: Any, field: str = "id") -> int:
    """Coerce an id given as ``int`` or numeric ``str`` (path segment).

    Raises ``ValidationError`` for anything else, before any SQL runs.
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer, got {value!r}", field=field, value=value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
    raise ValidationError(f"{field} must be an integer, got {value!r}", field=field, value=value)


def require_text(value: Any, field: str) -> str:
    """Non-empty string after stripping, else ``ValidationError``."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a non-empty string", field=field, value=value)
    return value


def flag(active: Any) -> int:
    """Stored 0/1 for a boolean-ish value (``True``, ``1``, ``"1"``, ``"true"``)."""
    if isinstance(active, str):
        text = active.strip().lower()
        if text in ("1", "true", "yes", "on"):
            return 1
        if text in ("0", "false", "no", "off"):
            return 0
        raise ValidationError(f"active must be a boolean, got {active!r}", field="active", value=active)
    return 1 if active else 0
