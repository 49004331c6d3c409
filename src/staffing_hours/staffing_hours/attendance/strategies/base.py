from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...common.timezone import TimeNormalizer
from ...core.enums import PunchType, ShiftPolicy
from ..duration import format_duration
from ..model import AttendanceEvent, HoursResult

MISSING_CHECKIN = "Thiếu chấm công vào (Checkin)"
MISSING_CHECKOUT = "Thiếu chấm công ra (Checkout)"
CHECKOUT_BEFORE_CHECKIN = "Giờ ra sớm hơn giờ vào"


class HoursStrategy(ABC):
    """Strategy Pattern: encapsulate how one day's punches become worked hours.

    ``events`` belong to one employee on one civil day and arrive sorted by time.
    """

    policy: ShiftPolicy

    @abstractmethod
    def calculate(self, events: Sequence[AttendanceEvent], *, position: str, normalizer: TimeNormalizer) -> HoursResult:
        raise NotImplementedError

    @staticmethod
    def split_by_type(events: Sequence[AttendanceEvent]) -> tuple[list[AttendanceEvent], list[AttendanceEvent]]:
        checkins = [e for e in events if e.punch_type == PunchType.CHECKIN]
        checkouts = [e for e in events if e.punch_type == PunchType.CHECKOUT]
        return checkins, checkouts

    @staticmethod
    def result(hours: float, *, position: str, warnings: list[str], shifts: Optional[dict[str, float]] = None) -> HoursResult:
        hours = max(float(hours), 0.0)
        return HoursResult(
            total_hours=format_duration(hours),
            total_hours_numeric=round(hours, 4),
            position=position,
            warnings=list(warnings),
            shifts=dict(shifts or {}),
        )

    @classmethod
    def zero(cls, *, position: str, warnings: list[str], shifts: Optional[dict[str, float]] = None) -> HoursResult:
        return cls.result(0.0, position=position, warnings=warnings, shifts=shifts)
