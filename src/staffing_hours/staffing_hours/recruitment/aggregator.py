from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..attendance.duration import format_duration
from ..common.cache import CacheKeys, ExpiringCache, cache_key
from ..common.logger import get_logger
from ..common.timezone import TimeNormalizer
from ..core.exceptions import NotFoundError, StoreError, ValidationError
from ..employees.service import EmployeeService
from ..work_history.model import WorkHistoryEntry
from ..work_history.service import WorkHistoryLedger
from .hours_source import HoursSource, Window
from .model import (
    AssignmentHours,
    DailyComparison,
    DailyComparisonRow,
    EmployeeHoursLine,
    RecruitmentHoursReport,
    RequestFilters,
    RequestHoursDetail,
    RequestHoursSummary,
    StaffingRequest,
)
from .service import RecruitmentService

logger = get_logger("recruitment.aggregator")


class RecruitmentHoursAggregator:
    """Join staffing requests, assignments, employees and an hours source into per-request summaries."""

    def __init__(
        self,
        recruitment: RecruitmentService,
        work_history: WorkHistoryLedger,
        employees: EmployeeService,
        hours_source: HoursSource,
        cache: ExpiringCache,
        normalizer: TimeNormalizer,
        *,
        cache_ttl: Optional[float] = None,
    ):
        self._recruitment = recruitment
        self._work_history = work_history
        self._employees = employees
        self._hours_source = hours_source
        self._cache = cache
        self._normalizer = normalizer
        self._cache_ttl = cache_ttl

    @staticmethod
    def _merge_rows(requests: list[StaffingRequest]) -> list[StaffingRequest]:
        """One request per ``request_no`` (first row wins), window widened over all its rows."""
        merged: dict[str, StaffingRequest] = {}
        for r in requests:
            current = merged.get(r.request_no)
            if current is None:
                merged[r.request_no] = r
                continue
            starts = [d for d in (current.from_date, r.from_date) if d]
            ends = [d for d in (current.to_date, r.to_date) if d]
            merged[r.request_no] = replace(
                current,
                from_date=min(starts) if starts else None,
                to_date=max(ends) if ends else None,
            )
        return list(merged.values())

    @staticmethod
    def _entry_window(entry: WorkHistoryEntry, request: StaffingRequest) -> Window:
        return (entry.from_date or request.from_date, entry.to_date or request.to_date)

    def summarize(self, filters: Optional[RequestFilters] = None) -> list[RequestHoursSummary]:
        filters = filters or RequestFilters()
        key = cache_key(CacheKeys.RECRUITMENT_HOURS_SUMMARY_PREFIX, filters.as_dict())
        cached = self._cache.get(key)
        if cached is not None:
            return list(cached)

        # A failed read yields an empty summary that is not cached.
        try:
            requests = self._merge_rows(self._recruitment.load_requests(filters))
            entries = self._work_history.load_all()
            employees = self._employees.load_employee_map()
            lookup = self._hours_source.collect()
        except StoreError as exc:
            logger.error("Recruitment hours summary unavailable (%s): %s", exc.code, exc.message)
            return []

        entries_by_request: dict[str, list[WorkHistoryEntry]] = {}
        for entry in entries:
            entries_by_request.setdefault(entry.request_no, []).append(entry)

        summaries: list[RequestHoursSummary] = []
        for request in requests:
            windows: dict[str, list[Window]] = {}
            for entry in entries_by_request.get(request.request_no, []):
                if entry.employee_id not in employees:
                    logger.warning(
                        "Orphan assignment %s: employee %s of request %s not found",
                        entry.record_id,
                        entry.employee_id,
                        request.request_no,
                    )
                    continue
                windows.setdefault(entry.employee_id, []).append(self._entry_window(entry, request))

            if not windows:
                continue

            lines = []
            for employee_id, employee_windows in windows.items():
                hours = lookup.hours_for(employee_id, employee_windows)
                lines.append(
                    EmployeeHoursLine(
                        employee_id=employee_id,
                        full_name=employees[employee_id].full_name,
                        total_hours=format_duration(hours),
                        total_hours_numeric=hours,
                    )
                )
            total = sum(line.total_hours_numeric for line in lines)
            summaries.append(
                RequestHoursSummary(
                    request_no=request.request_no,
                    department=request.department,
                    status=request.status,
                    position=request.position,
                    from_date=request.from_date,
                    to_date=request.to_date,
                    total_employees=len(lines),
                    total_hours=format_duration(total),
                    total_hours_numeric=total,
                    employees=lines,
                )
            )

        self._cache.set(key, summaries, self._cache_ttl)
        return list(summaries)

    def build_report(self, filters: Optional[RequestFilters] = None) -> RecruitmentHoursReport:
        summaries = self.summarize(filters)
        total_hours = sum(s.total_hours_numeric for s in summaries)
        return RecruitmentHoursReport(
            summaries=summaries,
            total_requests=len(summaries),
            total_employees=sum(s.total_employees for s in summaries),
            total_hours=format_duration(total_hours),
            total_hours_numeric=total_hours,
            generated_at=self._normalizer.now(),
        )

    def _require_request(self, request_no: str) -> list[StaffingRequest]:
        rows = self._recruitment.get_requests_by_no(request_no)
        if not rows:
            raise NotFoundError(f"Không tìm thấy đề xuất tuyển dụng với mã: {request_no}")
        return rows

    def detailed_hours_for_request(self, request_no: str) -> RequestHoursDetail:
        request = self._merge_rows(self._require_request(request_no))[0]
        employees = self._employees.get_employee_map()
        summary_rates = self._recruitment.hourly_rate_map()
        lookup = self._hours_source.collect()

        records: list[AssignmentHours] = []
        for entry in self._work_history.get_all():
            if entry.request_no != request.request_no:
                continue
            employee = employees.get(entry.employee_id)
            if employee is None:
                logger.warning("Orphan assignment %s: employee %s not found", entry.record_id, entry.employee_id)
                continue

            hours = lookup.hours_for(entry.employee_id, [self._entry_window(entry, request)])
            if entry.hourly_rate is not None:
                rate = entry.hourly_rate
            elif entry.employee_id in summary_rates:
                rate = summary_rates[entry.employee_id]
            else:
                rate = employee.hourly_rate or 0.0
            records.append(
                AssignmentHours(
                    work_history_id=entry.record_id,
                    employee_id=entry.employee_id,
                    full_name=employee.full_name,
                    from_date=entry.from_date,
                    to_date=entry.to_date,
                    total_hours=format_duration(hours),
                    total_hours_numeric=hours,
                    hourly_rate=rate,
                    total_salary=hours * rate,
                )
            )

        return RequestHoursDetail(
            request_no=request.request_no,
            records=records,
            total_records=len(records),
            total_hours_numeric=sum(r.total_hours_numeric for r in records),
            total_salary=sum(r.total_salary for r in records),
        )

    def daily_comparison(self, request_no: str) -> DailyComparison:
        """Planned headcount vs. employees actually paid, for each day of the request window."""
        rows = self._require_request(request_no)
        request = self._merge_rows(rows)[0]
        if request.from_date is None or request.to_date is None:
            raise ValidationError("Đề xuất tuyển dụng thiếu thông tin ngày bắt đầu hoặc kết thúc.", "INVALID_DATE_RANGE")

        paid: dict[str, set[str]] = {}
        for row in self._recruitment.get_hours_summary_rows():
            if row.request_no != request.request_no or row.salary <= 0 or row.work_date is None:
                continue
            if not self._normalizer.in_range(row.work_date, request.from_date, request.to_date):
                continue
            paid.setdefault(self._normalizer.date_string(row.work_date), set()).add(row.employee_id)

        result: list[DailyComparisonRow] = []
        for day in self._normalizer.iter_days(request.from_date, request.to_date):
            planned = max(
                (r.quantity for r in rows if r.from_date and r.to_date and self._normalizer.in_range(day, r.from_date, r.to_date)),
                default=0,
            )
            day_key = self._normalizer.date_string(day)
            actual = len(paid.get(day_key, ()))
            result.append(
                DailyComparisonRow(
                    date=day_key,
                    day_name=self._normalizer.weekday_name(day),
                    planned_count=planned,
                    actual_count=actual,
                    variance=actual - planned,
                    utilization_rate=f"{actual / planned * 100:.1f}" if planned > 0 else "0",
                )
            )

        return DailyComparison(request_no=request.request_no, request=request, rows=result)
