from __future__ import annotations

from enum import Enum


class PunchType(str, Enum):
    """Loại bản ghi chấm công."""

    CHECKIN = "Checkin"
    CHECKOUT = "Checkout"


class ShiftPolicy(str, Enum):
    """Quy tắc tính giờ công theo vị trí."""

    DEFAULT = "default"
    FIXED_SHIFT = "fixed_shift"
    SINGLE_PAIR = "single_pair"


class HoursAttribution(str, Enum):
    """Nguồn giờ công dùng khi tổng hợp theo đề xuất tuyển dụng."""

    SUMMARY_TABLE = "summary_table"
    ATTENDANCE_WINDOW = "attendance_window"
