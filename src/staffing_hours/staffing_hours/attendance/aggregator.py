from __future__ import annotations

from typing import Iterable, Mapping

from ..common.logger import get_logger
from ..common.timezone import TimeNormalizer
from .calculator import HoursCalculator
from .model import AttendanceEvent, DailyHoursResult

logger = get_logger("attendance.aggregator")

DailyHoursMap = dict[str, list[DailyHoursResult]]


class DailyHoursAggregator:
    """Group raw punches per employee and civil day, then run the calculator on each group."""

    def __init__(self, calculator: HoursCalculator, normalizer: TimeNormalizer):
        self._calculator = calculator
        self._normalizer = normalizer

    def group_by_employee_and_date(self, events: Iterable[AttendanceEvent]) -> dict[str, dict[str, list[AttendanceEvent]]]:
        grouped: dict[str, dict[str, list[AttendanceEvent]]] = {}
        for event in events:
            if not event.employee_id or event.timestamp is None:
                logger.warning(
                    "Skipping malformed attendance record %s (employee=%r, timestamp=%r)",
                    event.record_id,
                    event.employee_id,
                    event.timestamp,
                )
                continue
            day = self._normalizer.date_string(event.timestamp)
            grouped.setdefault(event.employee_id, {}).setdefault(day, []).append(event)
        return grouped

    def compute_all_employee_hours(self, events: Iterable[AttendanceEvent]) -> DailyHoursMap:
        result: DailyHoursMap = {}
        for employee_id, days in self.group_by_employee_and_date(events).items():
            rows = []
            for day, day_events in sorted(days.items()):
                position = next((e.position for e in day_events if e.position), "")
                hours = self._calculator.calculate(day_events, position)
                rows.append(
                    DailyHoursResult(
                        employee_id=employee_id,
                        date=day,
                        total_hours=hours.total_hours,
                        total_hours_numeric=hours.total_hours_numeric,
                        position=hours.position,
                        warnings=hours.warnings,
                        shifts=hours.shifts,
                    )
                )
            result[employee_id] = rows
        return result

    @staticmethod
    def hours_by_employee(daily: Mapping[str, list[DailyHoursResult]]) -> dict[str, float]:
        return {employee_id: sum(r.total_hours_numeric for r in rows) for employee_id, rows in daily.items()}

    @staticmethod
    def hours_by_employee_and_day(daily: Mapping[str, list[DailyHoursResult]]) -> dict[tuple[str, str], DailyHoursResult]:
        return {(r.employee_id, r.date): r for rows in daily.values() for r in rows}
