"""Where the hours attributed to an assignment come from.

``SummaryTableHoursSource`` trusts the precomputed "Tổng hợp giờ công" table and
credits each employee with their total across every row, whatever the
assignment window. ``AttendanceWindowHoursSource`` recomputes from raw punches
and only counts days inside the assignment's own date range.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Mapping, Optional, Protocol, Sequence

from ..attendance.model import DailyHoursResult
from ..attendance.service import AttendanceService
from ..common.timezone import TimeNormalizer
from ..core.enums import HoursAttribution
from .service import RecruitmentService, hours_by_employee

Window = tuple[Optional[date], Optional[date]]


class HoursLookup(Protocol):
    def hours_for(self, employee_id: str, windows: Sequence[Window]) -> float:
        raise NotImplementedError


class HoursSource(ABC):
    attribution: HoursAttribution

    @abstractmethod
    def collect(self) -> HoursLookup:
        """Load the data once for a whole aggregation pass; store failures propagate."""
        raise NotImplementedError


class SummaryTableLookup:
    def __init__(self, totals: Mapping[str, float]):
        self._totals = dict(totals)

    def hours_for(self, employee_id: str, windows: Sequence[Window]) -> float:
        return self._totals.get(employee_id, 0.0)


class SummaryTableHoursSource(HoursSource):
    attribution = HoursAttribution.SUMMARY_TABLE

    def __init__(self, recruitment: RecruitmentService):
        self._recruitment = recruitment

    def collect(self) -> SummaryTableLookup:
        return SummaryTableLookup(hours_by_employee(self._recruitment.load_hours_summary_rows()))


class AttendanceWindowLookup:
    def __init__(self, daily: Mapping[str, list[DailyHoursResult]], normalizer: TimeNormalizer):
        self._daily = daily
        self._normalizer = normalizer

    def hours_for(self, employee_id: str, windows: Sequence[Window]) -> float:
        # A day covered by two windows is counted once.
        return sum(
            r.total_hours_numeric
            for r in self._daily.get(employee_id, [])
            if any(self._normalizer.in_range(r.date, start, end) for start, end in windows)
        )


class AttendanceWindowHoursSource(HoursSource):
    attribution = HoursAttribution.ATTENDANCE_WINDOW

    def __init__(self, attendance: AttendanceService, normalizer: TimeNormalizer):
        self._attendance = attendance
        self._normalizer = normalizer

    def collect(self) -> AttendanceWindowLookup:
        return AttendanceWindowLookup(self._attendance.load_employee_hours(), self._normalizer)


def build_hours_source(
    attribution: HoursAttribution,
    *,
    recruitment: RecruitmentService,
    attendance: AttendanceService,
    normalizer: TimeNormalizer,
) -> HoursSource:
    if attribution == HoursAttribution.ATTENDANCE_WINDOW:
        return AttendanceWindowHoursSource(attendance, normalizer)
    return SummaryTableHoursSource(recruitment)
