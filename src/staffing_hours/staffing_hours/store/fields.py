"""Decoders for loosely-structured store fields.

Lark returns the same logical value in several shapes depending on the column
type: a bare string, a number, a list of ``{"text": ...}`` segments (lookup and
formula columns), a ``{"text": ..., "link": ...}`` object, or a list of user
objects. Everything above the store layer only sees plain values.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..common.timezone import TimeNormalizer


def decode_text(raw: Any) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw.strip()
    if isinstance(raw, bool):
        return str(raw)
    if isinstance(raw, (int, float)):
        return str(int(raw)) if float(raw).is_integer() else str(raw)
    if isinstance(raw, dict):
        return decode_text(raw.get("text") or raw.get("name") or raw.get("value") or "")
    if isinstance(raw, (list, tuple)):
        return decode_text(raw[0]) if raw else ""
    return str(raw)


def decode_employee_id_field(raw: Any) -> str:
    """Employee id arrives as a string, a length-1 list of ``{text}`` or an object."""
    return decode_text(raw)


def decode_names(raw: Any) -> str:
    """User/person columns: join every name (``[{"name": "A"}, {"name": "B"}]`` -> ``"A, B"``)."""
    if isinstance(raw, (list, tuple)):
        return ", ".join(name for name in (decode_names(item) for item in raw) if name)
    if isinstance(raw, dict):
        return decode_text(raw.get("name") or raw.get("en_name") or raw.get("text") or raw.get("id") or "")
    return decode_text(raw)


def decode_number(raw: Any) -> Optional[float]:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    if isinstance(raw, (list, tuple)):
        return decode_number(raw[0]) if raw else None
    if isinstance(raw, dict):
        return decode_number(raw.get("value", raw.get("text")))
    text = str(raw).strip().replace(",", "")
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def decode_int(raw: Any, default: int = 0) -> int:
    number = decode_number(raw)
    return int(number) if number is not None else default


def _unwrap_time_value(raw: Any) -> Any:
    if isinstance(raw, (list, tuple)):
        return _unwrap_time_value(raw[0]) if raw else None
    if isinstance(raw, dict):
        return raw.get("value", raw.get("text"))
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return raw


def decode_datetime(raw: Any, normalizer: TimeNormalizer) -> Optional[datetime]:
    value = _unwrap_time_value(raw)
    if not normalizer.is_valid_date(value):
        return None
    return normalizer.to_civil_time(value)


def decode_date(raw: Any, normalizer: TimeNormalizer) -> Optional[date]:
    value = decode_datetime(raw, normalizer)
    return value.date() if value else None
