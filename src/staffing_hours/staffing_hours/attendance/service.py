from __future__ import annotations

from collections import Counter
from typing import Any, Mapping, Optional

from ..common.cache import CacheKeys, ExpiringCache, cache_key, invalidate_hours_related_caches
from ..common.logger import get_logger
from ..common.timezone import TimeNormalizer
from ..common.validators import require_one_of
from ..core.constants import VALID_POSITIONS
from ..core.enums import PunchType
from ..core.exceptions import StoreError, ValidationError
from ..employees.model import Employee
from .aggregator import DailyHoursAggregator, DailyHoursMap
from .model import (
    AttendanceEvent,
    AttendanceFilters,
    AttendanceStats,
    EmployeeDetailedHours,
    EmployeeHoursReport,
    EmployeeHoursRow,
)
from .repository import AttendanceRepository

logger = get_logger("attendance.service")


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        cache: ExpiringCache,
        normalizer: TimeNormalizer,
        *,
        aggregator: DailyHoursAggregator,
        valid_positions: tuple[str, ...] = VALID_POSITIONS,
        cache_ttl: Optional[float] = None,
    ):
        self._attendance = attendance
        self._cache = cache
        self._normalizer = normalizer
        self._aggregator = aggregator
        self._valid_positions = tuple(valid_positions)
        self._cache_ttl = cache_ttl

    # -------- Reads --------
    def _matches(self, event: AttendanceEvent, filters: AttendanceFilters) -> bool:
        if filters.employee_id and event.employee_id != filters.employee_id:
            return False
        if filters.date_from or filters.date_to:
            if event.timestamp is None:
                return False
            return self._normalizer.in_range(event.timestamp, filters.date_from, filters.date_to)
        return True

    def load_attendance_logs(self, filters: Optional[AttendanceFilters] = None) -> list[AttendanceEvent]:
        """Punch records matching ``filters``; store failures propagate and nothing is cached."""
        filters = filters or AttendanceFilters()
        key = cache_key(CacheKeys.ATTENDANCE_LOGS_PREFIX, filters.as_dict())
        cached = self._cache.get(key)
        if cached is not None:
            return list(cached)

        events = self._attendance.list_events(employee_id=filters.employee_id)
        # The store filter is best-effort; re-apply it here.
        events = [e for e in events if self._matches(e, filters)]
        self._cache.set(key, events, self._cache_ttl)
        return list(events)

    def get_attendance_logs(self, filters: Optional[AttendanceFilters] = None) -> list[AttendanceEvent]:
        """Punch records matching ``filters``; empty when the store cannot be read."""
        try:
            return self.load_attendance_logs(filters)
        except StoreError as exc:
            logger.error("Failed to load attendance logs (%s): %s", exc.code, exc.message)
            return []

    def load_employee_hours(self) -> DailyHoursMap:
        cached = self._cache.get(CacheKeys.EMPLOYEE_HOURS)
        if cached is not None:
            return dict(cached)

        daily = self._aggregator.compute_all_employee_hours(self.load_attendance_logs())
        self._cache.set(CacheKeys.EMPLOYEE_HOURS, daily, self._cache_ttl)
        return dict(daily)

    def get_employee_hours(self) -> DailyHoursMap:
        try:
            return self.load_employee_hours()
        except StoreError as exc:
            logger.error("Failed to compute employee hours (%s): %s", exc.code, exc.message)
            return {}

    def get_employee_hours_report(self, employees: Mapping[str, Employee]) -> EmployeeHoursReport:
        rows: list[EmployeeHoursRow] = []
        for employee_id, daily_rows in self.get_employee_hours().items():
            employee = employees.get(employee_id)
            if employee is None:
                logger.warning("Attendance for unknown employee %s left out of the report", employee_id)
                continue
            for r in daily_rows:
                rows.append(
                    EmployeeHoursRow(
                        employee_id=employee_id,
                        full_name=employee.full_name,
                        date=r.date,
                        position=r.position,
                        total_hours=r.total_hours,
                        total_hours_numeric=r.total_hours_numeric,
                        warnings=list(r.warnings),
                    )
                )

        rows.sort(key=lambda r: r.date, reverse=True)
        rows.sort(key=lambda r: r.full_name)
        return EmployeeHoursReport(
            rows=rows,
            total_employees=len({r.employee_id for r in rows}),
            total_records=len(rows),
            records_with_warnings=sum(1 for r in rows if r.warnings),
        )

    def get_attendance_stats(self, date_from: Optional[str] = None, date_to: Optional[str] = None) -> AttendanceStats:
        logs = self.get_attendance_logs(AttendanceFilters(date_from=date_from, date_to=date_to))
        return AttendanceStats(
            total_logs=len(logs),
            unique_employees=len({e.employee_id for e in logs if e.employee_id}),
            checkin_count=sum(1 for e in logs if e.punch_type == PunchType.CHECKIN),
            checkout_count=sum(1 for e in logs if e.punch_type == PunchType.CHECKOUT),
            by_position=dict(Counter(e.position or "Không xác định" for e in logs)),
        )

    def get_employee_detailed_hours(
        self,
        employee_id: str,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> EmployeeDetailedHours:
        employee_id = (employee_id or "").strip()
        if not employee_id:
            raise ValidationError("Mã nhân viên là bắt buộc")

        logs = self.get_attendance_logs(AttendanceFilters(employee_id=employee_id, date_from=date_from, date_to=date_to))
        daily = [
            r
            for r in self.get_employee_hours().get(employee_id, [])
            if self._normalizer.in_range(r.date, date_from, date_to)
        ]
        return EmployeeDetailedHours(
            employee_id=employee_id,
            logs=logs,
            daily_hours=daily,
            total_days=len(daily),
            total_hours_numeric=sum(r.total_hours_numeric for r in daily),
        )

    # -------- Writes --------
    def add_attendance_log(
        self,
        *,
        employee_id: str,
        punch_type: Any,
        position: str,
        timestamp: Any = None,
        notes: str = "",
    ) -> AttendanceEvent:
        employee_id = (employee_id or "").strip()
        if not employee_id or not punch_type or not position:
            raise ValidationError("Thiếu thông tin bắt buộc: Mã nhân viên, Phân loại (Checkin/Checkout), Vị trí")

        try:
            punch = PunchType(punch_type)
        except ValueError:
            raise ValidationError('Phân loại phải là "Checkin" hoặc "Checkout"', "INVALID_TYPE")

        position = require_one_of(position, self._valid_positions, "Vị trí", code="INVALID_POSITION")

        if timestamp is None or timestamp == "":
            when = self._normalizer.now()
        elif self._normalizer.is_valid_date(timestamp):
            when = self._normalizer.to_civil_time(timestamp)
        else:
            raise ValidationError("Thời gian chấm công không hợp lệ")

        event = self._attendance.create_event(
            employee_id=employee_id,
            punch_type=punch,
            position=position,
            timestamp=when,
            notes=(notes or "").strip(),
        )
        invalidate_hours_related_caches(self._cache)
        logger.info("Attendance %s recorded for %s at %s", punch.value, employee_id, self._normalizer.format_datetime(when))
        return event
