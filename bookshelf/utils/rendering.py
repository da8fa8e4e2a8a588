"""Stable string rendering of column values for the audit trail."""

from __future__ import annotations

import enum
from datetime import date, datetime, time
from decimal import Decimal
from uuid import UUID

from bookshelf.utils.time import as_utc

TRUNCATION_SUFFIX = "..."


def render_value(value: object, max_length: int | None = None) -> str | None:
    """Render ``value`` the way it is stored in ``old_value``/``new_value``.

    Never raises. A value whose ``__str__`` fails becomes a placeholder naming
    its type and binary payloads become a size marker. Text longer than
    ``max_length`` is cut down with a ``...`` suffix.
    """
    if value is None:
        return None
    try:
        rendered = _render(value)
    except Exception:
        rendered = f"<unrenderable {type(value).__name__}>"
    return _truncate(rendered, max_length)


def _render(value: object) -> str:
    if isinstance(value, enum.Enum):
        return _render(value.value)
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return as_utc(value).isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<binary {len(value)} bytes>"
    return str(value)


def _truncate(rendered: str, max_length: int | None) -> str:
    if max_length is None or len(rendered) <= max_length:
        return rendered
    if max_length <= len(TRUNCATION_SUFFIX):
        return rendered[:max_length]
    return rendered[: max_length - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX
