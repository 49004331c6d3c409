from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from ..attendance.duration import format_duration
from ..attendance.service import AttendanceService
from ..common.timezone import TimeNormalizer
from ..employees.service import EmployeeService
from ..recruitment.aggregator import RecruitmentHoursAggregator
from ..recruitment.model import RequestFilters


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class ReportService:
    """Flatten aggregates into rows with Vietnamese column headers, ready for export."""

    def __init__(
        self,
        recruitment_hours: RecruitmentHoursAggregator,
        attendance: AttendanceService,
        employees: EmployeeService,
        normalizer: TimeNormalizer,
    ):
        self._recruitment_hours = recruitment_hours
        self._attendance = attendance
        self._employees = employees
        self._normalizer = normalizer

    def build_recruitment_report(self, filters: Optional[RequestFilters] = None) -> ReportData:
        out_rows: list[dict] = []
        summary: list[dict] = []

        for s in self._recruitment_hours.summarize(filters):
            from_date = self._normalizer.format_date(s.from_date)
            to_date = self._normalizer.format_date(s.to_date)
            for line in s.employees:
                out_rows.append(
                    {
                        "Mã đề xuất": s.request_no,
                        "Phòng ban": s.department or "-",
                        "Vị trí": s.position or "-",
                        "Từ ngày": from_date,
                        "Đến ngày": to_date,
                        "Mã NV": line.employee_id,
                        "Họ Tên": line.full_name,
                        "Tổng giờ": line.total_hours,
                        "Số giờ": round(line.total_hours_numeric, 2),
                    }
                )
            summary.append(
                {
                    "Mã đề xuất": s.request_no,
                    "Phòng ban": s.department or "-",
                    "Trạng thái": s.status or "-",
                    "Số nhân viên": s.total_employees,
                    "Tổng giờ": s.total_hours,
                    "Số giờ": round(s.total_hours_numeric, 2),
                }
            )

        return ReportData(rows=out_rows, summary=summary)

    def build_employee_hours_report(self) -> ReportData:
        report = self._attendance.get_employee_hours_report(self._employees.get_employee_map())

        summary_map: dict[str, dict] = {}
        out_rows: list[dict] = []
        for r in report.rows:
            out_rows.append(
                {
                    "Mã NV": r.employee_id,
                    "Họ Tên": r.full_name,
                    "Ngày": self._normalizer.format_date(r.date),
                    "Vị trí": r.position or "-",
                    "Tổng giờ": r.total_hours,
                    "Số giờ": round(r.total_hours_numeric, 2),
                    "Cảnh báo": "; ".join(r.warnings),
                }
            )

            s = summary_map.get(r.employee_id)
            if not s:
                s = {"Mã NV": r.employee_id, "Họ Tên": r.full_name, "Số ngày": 0, "hours": 0.0}
                summary_map[r.employee_id] = s
            s["Số ngày"] += 1
            s["hours"] += r.total_hours_numeric

        summary = []
        for s in summary_map.values():
            hours = s.pop("hours")
            summary.append({**s, "Tổng giờ": format_duration(hours), "Số giờ": round(hours, 2)})

        summary.sort(key=lambda x: x["Số giờ"], reverse=True)
        return ReportData(rows=out_rows, summary=summary)

    @staticmethod
    def export_excel(report: ReportData, *, sheet_name: str = "ChiTiet", summary_sheet_name: str = "TongHop") -> bytes:
        """Write both tables to an in-memory .xlsx workbook."""
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            pd.DataFrame(report.rows).to_excel(writer, index=False, sheet_name=sheet_name)
            pd.DataFrame(report.summary).to_excel(writer, index=False, sheet_name=summary_sheet_name)
        return output.getvalue()
