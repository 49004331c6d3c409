"""Short-lived in-process cache with lazy per-key expiry.

The cache has no idea which records a value was built from; every write path
that can change an aggregate calls ``invalidate_hours_related_caches``.
"""

from __future__ import annotations

import json
import time
from typing import Any, Callable, Optional

from ..core.constants import DEFAULT_CACHE_TTL_SECONDS
from .logger import get_logger

logger = get_logger("cache")


class ExpiringCache:
    def __init__(self, *, default_ttl: float = DEFAULT_CACHE_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self._values: dict[str, Any] = {}
        self._expiry: dict[str, float] = {}
        self._default_ttl = float(default_ttl)
        self._clock = clock

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else float(ttl_seconds)
        self._values[key] = value
        self._expiry[key] = self._clock() + ttl

    def _expired(self, key: str) -> bool:
        expiry = self._expiry.get(key)
        return expiry is not None and self._clock() > expiry

    def get(self, key: str) -> Any:
        if self._expired(key):
            self.delete(key)
            return None
        return self._values.get(key)

    def has(self, key: str) -> bool:
        if self._expired(key):
            self.delete(key)
            return False
        return key in self._values

    def delete(self, key: str) -> None:
        self._values.pop(key, None)
        self._expiry.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        keys = [k for k in self._values if k.startswith(prefix)]
        for key in keys:
            self.delete(key)
        return len(keys)

    def clear(self) -> None:
        self._values.clear()
        self._expiry.clear()

    def size(self) -> int:
        return len(self._values)

    def cleanup(self) -> int:
        """Drop every expired entry now; reads already do this lazily."""
        now = self._clock()
        expired = [k for k, exp in self._expiry.items() if now > exp]
        for key in expired:
            self.delete(key)
        return len(expired)


class CacheKeys:
    """Registry of cache keys for every cached aggregate."""

    ATTENDANCE_LOGS_PREFIX = "attendance_logs_"
    EMPLOYEE_HOURS = "employee_hours"
    EMPLOYEES_ALL = "employees_all"
    WORK_HISTORY_ALL = "work_history_all"
    RECRUITMENT_REQUESTS_PREFIX = "recruitment_requests_"
    HOURS_SUMMARY_TABLE = "hours_summary_table_data"
    RECRUITMENT_HOURS_SUMMARY_PREFIX = "recruitment_hours_summary_"

    HOURS_RELATED_KEYS = (EMPLOYEE_HOURS, WORK_HISTORY_ALL, HOURS_SUMMARY_TABLE)
    HOURS_RELATED_PREFIXES = (ATTENDANCE_LOGS_PREFIX, RECRUITMENT_HOURS_SUMMARY_PREFIX)


def cache_key(prefix: str, filters: Optional[dict] = None) -> str:
    """Deterministic key for a filtered listing (``recruitment_requests_{"status": "x"}``)."""
    cleaned = {k: v for k, v in (filters or {}).items() if v not in (None, "")}
    return prefix + json.dumps(cleaned, sort_keys=True, ensure_ascii=False, default=str)


def invalidate_hours_related_caches(cache: ExpiringCache) -> None:
    """Delete every cached aggregate that attendance or work-history writes can change."""
    for key in CacheKeys.HOURS_RELATED_KEYS:
        cache.delete(key)
    removed = sum(cache.delete_prefix(prefix) for prefix in CacheKeys.HOURS_RELATED_PREFIXES)
    logger.debug("Invalidated hours-related caches (%d prefixed keys)", removed)
