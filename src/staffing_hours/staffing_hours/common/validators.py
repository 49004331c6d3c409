from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return str(value).strip()


def require_one_of(value: Optional[str], allowed: tuple[str, ...], field_name: str, *, code: str = "VALIDATION_ERROR") -> str:
    value = require_non_empty(value, field_name)
    if value not in allowed:
        raise ValidationError(f"{field_name} không hợp lệ. Phải là một trong: {', '.join(allowed)}", code)
    return value


def optional_non_negative_number(value: Any, field_name: str) -> Optional[float]:
    """Parse an optional number; empty means "not given", anything else must be >= 0."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} phải là số và không được âm.")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} phải là số và không được âm.")
    if number != number or number < 0:
        raise ValidationError(f"{field_name} phải là số và không được âm.")
    return number
