from __future__ import annotations

import re

from ..core.constants import ZERO_DURATION

_DURATION_RE = re.compile(r"(?:(\d+)\s*giờ)?\s*(?:(\d+)\s*phút)?")


def format_duration(hours: float) -> str:
    """8.5 -> "8 giờ 30 phút"; whole hours drop minutes, under one hour drops hours."""
    total_minutes = int(round(max(float(hours or 0), 0.0) * 60))
    if total_minutes == 0:
        return ZERO_DURATION

    h, m = divmod(total_minutes, 60)
    if m == 0:
        return f"{h} giờ"
    if h == 0:
        return f"{m} phút"
    return f"{h} giờ {m} phút"


def parse_duration(text: str) -> float:
    """Inverse of ``format_duration`` for values typed by hand into the store."""
    match = _DURATION_RE.fullmatch((text or "").strip())
    if not match or not any(match.groups()):
        return 0.0
    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    return hours + minutes / 60
