from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import PunchType


@dataclass(frozen=True)
class AttendanceEvent:
    """Thực thể miền (domain): Một lần chấm công (Checkin/Checkout). Không bao giờ bị sửa."""

    record_id: str
    employee_id: str
    punch_type: PunchType
    position: str
    timestamp: Optional[datetime]
    notes: str = ""


@dataclass(frozen=True)
class HoursResult:
    """Kết quả tính giờ công của một nhân viên trong một ngày."""

    total_hours: str
    total_hours_numeric: float
    position: str
    warnings: list[str] = field(default_factory=list)
    shifts: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class DailyHoursResult:
    """Read-model: giờ công theo ngày, tính lại mỗi lần truy vấn (không lưu)."""

    employee_id: str
    date: str
    total_hours: str
    total_hours_numeric: float
    position: str
    warnings: list[str] = field(default_factory=list)
    shifts: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class AttendanceFilters:
    employee_id: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None

    def as_dict(self) -> dict:
        return {"employee_id": self.employee_id, "date_from": self.date_from, "date_to": self.date_to}


@dataclass(frozen=True)
class AttendanceStats:
    total_logs: int
    unique_employees: int
    checkin_count: int
    checkout_count: int
    by_position: dict[str, int]


@dataclass(frozen=True)
class EmployeeHoursRow:
    employee_id: str
    full_name: str
    date: str
    position: str
    total_hours: str
    total_hours_numeric: float
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class EmployeeHoursReport:
    rows: list[EmployeeHoursRow]
    total_employees: int
    total_records: int
    records_with_warnings: int


@dataclass(frozen=True)
class EmployeeDetailedHours:
    employee_id: str
    logs: list[AttendanceEvent]
    daily_hours: list[DailyHoursResult]
    total_days: int
    total_hours_numeric: float
