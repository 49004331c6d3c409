from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class StaffingRequest:
    """Thực thể miền (domain): Một dòng đề xuất tuyển dụng.

    Một mã đề xuất (``request_no``) có thể trải trên nhiều dòng với các khoảng
    ngày và số lượng khác nhau.
    """

    record_id: str
    request_no: str
    requester: str = ""
    status: str = ""
    department: str = ""
    quantity: int = 0
    gender: str = ""
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    position: str = ""


@dataclass(frozen=True)
class RequestFilters:
    status: Optional[str] = None
    department: Optional[str] = None

    def as_dict(self) -> dict:
        return {"status": self.status, "department": self.department}


@dataclass(frozen=True)
class HoursSummaryRow:
    """Một dòng của bảng "Tổng hợp giờ công" (tính sẵn bên ngoài hệ thống)."""

    record_id: str
    employee_id: str
    request_no: str
    work_date: Optional[date]
    hours: float
    hourly_rate: Optional[float] = None
    salary: float = 0.0


@dataclass(frozen=True)
class EmployeeHoursLine:
    employee_id: str
    full_name: str
    total_hours: str
    total_hours_numeric: float


@dataclass(frozen=True)
class RequestHoursSummary:
    request_no: str
    department: str
    status: str
    position: str
    from_date: Optional[date]
    to_date: Optional[date]
    total_employees: int
    total_hours: str
    total_hours_numeric: float
    employees: list[EmployeeHoursLine] = field(default_factory=list)


@dataclass(frozen=True)
class RecruitmentHoursReport:
    summaries: list[RequestHoursSummary]
    total_requests: int
    total_employees: int
    total_hours: str
    total_hours_numeric: float
    generated_at: datetime


@dataclass(frozen=True)
class AssignmentHours:
    work_history_id: str
    employee_id: str
    full_name: str
    from_date: Optional[date]
    to_date: Optional[date]
    total_hours: str
    total_hours_numeric: float
    hourly_rate: float
    total_salary: float


@dataclass(frozen=True)
class RequestHoursDetail:
    request_no: str
    records: list[AssignmentHours]
    total_records: int
    total_hours_numeric: float
    total_salary: float


@dataclass(frozen=True)
class DailyComparisonRow:
    date: str
    day_name: str
    planned_count: int
    actual_count: int
    variance: int
    utilization_rate: str


@dataclass(frozen=True)
class DailyComparison:
    request_no: str
    request: StaffingRequest
    rows: list[DailyComparisonRow]
