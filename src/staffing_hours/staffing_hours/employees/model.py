from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên thời vụ (master data, chỉ đọc)."""

    record_id: str
    employee_id: str
    full_name: str
    phone_number: str = ""
    gender: str = ""
    position: str = ""
    hourly_rate: Optional[float] = None
    status: str = ""
