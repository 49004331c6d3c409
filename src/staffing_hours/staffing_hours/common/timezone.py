"""Time normalization to one fixed civil offset (GMT+7 by default).

Every comparison, bucketing and formatting of timestamps goes through
``TimeNormalizer`` so the whole system agrees on one timezone interpretation.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

from ..core.constants import DEFAULT_TIMEZONE_OFFSET_HOURS
from .logger import get_logger

logger = get_logger("timezone")

WEEKDAY_NAMES = ("Thứ Hai", "Thứ Ba", "Thứ Tư", "Thứ Năm", "Thứ Sáu", "Thứ Bảy", "Chủ Nhật")


class TimeNormalizer:
    def __init__(self, offset_hours: int = DEFAULT_TIMEZONE_OFFSET_HOURS):
        self._tz = timezone(timedelta(hours=int(offset_hours)))

    @property
    def tz(self) -> timezone:
        return self._tz

    def now(self) -> datetime:
        """Current civil time.

        Note: Wrapped so tests can patch/mock it easily.
        """
        return datetime.now(self._tz)

    def today_string(self) -> str:
        return self.now().strftime("%Y-%m-%d")

    # -------- Parsing --------
    def parse(self, value: Any) -> Optional[datetime]:
        """Parse ``value`` into civil time, or None when it cannot be understood.

        Naive datetimes and zone-less strings are taken as civil time already;
        epoch numbers are milliseconds (the record store convention).
        """
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, datetime):
            if value.tzinfo is None:
                return value.replace(tzinfo=self._tz)
            return value.astimezone(self._tz)
        if isinstance(value, date):
            return datetime.combine(value, time.min, tzinfo=self._tz)
        if isinstance(value, (int, float)):
            try:
                return datetime.fromtimestamp(float(value) / 1000, tz=self._tz)
            except (OverflowError, OSError, ValueError):
                return None
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            try:
                return datetime.strptime(text, "%d/%m/%Y").replace(tzinfo=self._tz)
            except ValueError:
                pass
            try:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                return None
            return self.parse(parsed)
        return None

    def to_civil_time(self, value: Any) -> datetime:
        """Convert any timestamp representation to civil time.

        Fail-open contract: invalid or empty input yields ``now()`` and never
        raises. Callers treating a missing time as "now" for display rely on it;
        callers that must reject bad input check ``is_valid_date`` first.
        """
        parsed = self.parse(value)
        if parsed is None:
            logger.warning("Invalid timestamp %r, falling back to current time", value)
            return self.now()
        return parsed

    def is_valid_date(self, value: Any) -> bool:
        parsed = self.parse(value)
        return parsed is not None and 1900 < parsed.year < 2100

    # -------- Conversion / formatting --------
    def to_date(self, value: Any) -> date:
        return self.to_civil_time(value).date()

    def date_string(self, value: Any) -> str:
        return self.to_civil_time(value).strftime("%Y-%m-%d")

    def to_epoch_millis(self, value: Any) -> int:
        return int(self.to_civil_time(value).timestamp() * 1000)

    def format_date(self, value: Any) -> str:
        if value is None or value == "":
            return "N/A"
        return self.to_civil_time(value).strftime("%d/%m/%Y")

    def format_time(self, value: Any) -> str:
        if value is None or value == "":
            return "N/A"
        return self.to_civil_time(value).strftime("%H:%M")

    def format_datetime(self, value: Any) -> str:
        if value is None or value == "":
            return "N/A"
        return f"{self.format_date(value)} {self.format_time(value)}"

    def weekday_name(self, value: Any) -> str:
        return WEEKDAY_NAMES[self.to_date(value).weekday()]

    # -------- Comparison (day granularity) --------
    def is_before(self, a: Any, b: Any) -> bool:
        if not self.is_valid_date(a) or not self.is_valid_date(b):
            return False
        return self.to_date(a) < self.to_date(b)

    def is_after(self, a: Any, b: Any) -> bool:
        return self.is_before(b, a)

    def date_ranges_overlap(self, start1: Any, end1: Any, start2: Any, end2: Any) -> bool:
        if not all(self.is_valid_date(v) for v in (start1, end1, start2, end2)):
            return False
        return self.to_date(start1) <= self.to_date(end2) and self.to_date(end1) >= self.to_date(start2)

    def range_contains(self, outer_start: Any, outer_end: Any, inner_start: Any, inner_end: Any) -> bool:
        """True when [inner_start, inner_end] lies inside [outer_start, outer_end] (inclusive)."""
        if not all(self.is_valid_date(v) for v in (outer_start, outer_end, inner_start, inner_end)):
            return False
        return self.to_date(outer_start) <= self.to_date(inner_start) and self.to_date(inner_end) <= self.to_date(outer_end)

    def in_range(self, value: Any, start: Any = None, end: Any = None) -> bool:
        """Day-granularity check with open bounds when ``start``/``end`` are empty."""
        day = self.to_date(value)
        if start and self.is_valid_date(start) and day < self.to_date(start):
            return False
        if end and self.is_valid_date(end) and day > self.to_date(end):
            return False
        return True

    def days_between(self, start: Any, end: Any) -> int:
        if not self.is_valid_date(start) or not self.is_valid_date(end):
            return 0
        return (self.to_date(end) - self.to_date(start)).days

    def iter_days(self, start: Any, end: Any) -> list[date]:
        first = self.to_date(start)
        return [first + timedelta(days=i) for i in range(self.days_between(start, end) + 1)]

    # -------- Durations --------
    def hours_between(self, start: Any, end: Any) -> float:
        delta = self.to_civil_time(end) - self.to_civil_time(start)
        return delta.total_seconds() / 3600

    def is_before_cutoff(self, value: Any, cutoff: time) -> bool:
        return self.to_civil_time(value).time() < cutoff
