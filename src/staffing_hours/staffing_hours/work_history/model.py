from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional


@dataclass(frozen=True)
class WorkHistoryEntry:
    """Thực thể miền (domain): Nhân viên X làm cho đề xuất Y trong [from_date, to_date] với mức lương R."""

    record_id: str
    employee_id: str
    request_no: str
    from_date: Optional[date]
    to_date: Optional[date]
    hourly_rate: Optional[float] = None


@dataclass(frozen=True)
class NewWorkHistory:
    """Dữ liệu đầu vào (chưa kiểm tra) cho thêm/sửa lịch sử công việc."""

    employee_id: str
    request_no: str
    from_date: Any = None
    to_date: Any = None
    hourly_rate: Any = None
