from __future__ import annotations

import pytest

from src.staffing_hours.staffing_hours.attendance.model import AttendanceEvent
from src.staffing_hours.staffing_hours.common.cache import ExpiringCache
from src.staffing_hours.staffing_hours.common.timezone import TimeNormalizer
from src.staffing_hours.staffing_hours.container import build_container
from src.staffing_hours.staffing_hours.core.enums import PunchType
from src.staffing_hours.staffing_hours.core.exceptions import StoreError
from src.staffing_hours.staffing_hours.store.gateway import StoreRecord


class FakeRecordStore:
    """In-memory RecordStoreGateway.

    ``fail_on`` holds ``(operation, table)`` pairs that raise StoreError, e.g.
    ``("list_all", "attendance")``; use ``"*"`` as table to fail every table.
    """

    def __init__(self):
        self.tables: dict[str, dict[str, dict]] = {}
        self.fail_on: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []
        self._next_id = 1

    def _new_id(self) -> str:
        rid = f"rec{self._next_id:04d}"
        self._next_id += 1
        return rid

    def _check(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        if (operation, table) in self.fail_on or (operation, "*") in self.fail_on:
            raise StoreError(f"{operation} failed", "NETWORK_ERROR", operation=f"{operation}:{table}")

    def seed(self, table: str, fields: dict) -> str:
        rid = self._new_id()
        self.tables.setdefault(table, {})[rid] = dict(fields)
        return rid

    def list_all(self, table, filters=None):
        self._check("list_all", table)
        out = []
        for rid, fields in self.tables.get(table, {}).items():
            if all(v in (None, "") or fields.get(k) == v for k, v in (filters or {}).items()):
                out.append(StoreRecord(rid, dict(fields)))
        return out

    def get_by_id(self, table, record_id):
        self._check("get_by_id", table)
        fields = self.tables.get(table, {}).get(record_id)
        return StoreRecord(record_id, dict(fields)) if fields is not None else None

    def insert(self, table, fields):
        self._check("insert", table)
        rid = self.seed(table, fields)
        return StoreRecord(rid, dict(fields))

    def update_by_id(self, table, record_id, fields):
        self._check("update_by_id", table)
        current = self.tables.get(table, {}).get(record_id)
        if current is None:
            raise StoreError("Record not found", "RECORD_NOT_FOUND", operation=f"update_by_id:{table}")
        current.update(fields)
        return StoreRecord(record_id, dict(current))

    def delete_by_id(self, table, record_id):
        self._check("delete_by_id", table)
        if self.tables.get(table, {}).pop(record_id, None) is None:
            raise StoreError("Record not found", "RECORD_NOT_FOUND", operation=f"delete_by_id:{table}")


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def normalizer():
    return TimeNormalizer(7)


@pytest.fixture
def cache():
    return ExpiringCache(default_ttl=300)


@pytest.fixture
def container(store):
    return build_container(gateway=store)


@pytest.fixture
def make_event(normalizer):
    """``make_event("Checkin", "08:00")`` -> AttendanceEvent on 2025-01-06 (civil time)."""

    def _make(kind, hhmm, *, day="2025-01-06", position="Nhân viên Bán hàng", employee_id="NV01"):
        return AttendanceEvent(
            record_id=f"{employee_id}-{day}-{hhmm}-{kind}",
            employee_id=employee_id,
            punch_type=PunchType(kind),
            position=position,
            timestamp=normalizer.to_civil_time(f"{day}T{hhmm}:00"),
        )

    return _make


def seed_employee(store, employee_id, full_name, *, position="Nhân viên Bán hàng", hourly_rate=None):
    fields = {"Mã nhân viên": employee_id, "Họ tên": full_name, "Vị trí": position, "Trạng thái": "active"}
    if hourly_rate is not None:
        fields["Mức lương/giờ"] = hourly_rate
    return store.seed("employees", fields)


def seed_request(store, request_no, from_date, to_date, *, quantity=1, department="Bán hàng", status="Đang tuyển dụng"):
    return store.seed(
        "recruitment",
        {
            "Request No.": {"text": request_no, "link": f"https://example.invalid/{request_no}"},
            "Status": status,
            "Details_Phòng ban": department,
            "Details_Số lượng cần tuyển": str(quantity),
            "Details_Từ ngày": from_date,
            "Details_Đến ngày": to_date,
            "Details_Vị trí": "Nhân viên Bán hàng",
        },
    )


def seed_work_history(store, employee_id, request_no, from_date, to_date, *, hourly_rate=None):
    fields = {"Mã nhân viên": employee_id, "Request No.": request_no, "Từ ngày": from_date, "Đến ngày": to_date}
    if hourly_rate is not None:
        fields["Mức lương/giờ"] = hourly_rate
    return store.seed("work_history", fields)


def seed_hours_summary(store, employee_id, request_no, work_date, hours, *, hourly_rate=None, salary=0):
    fields = {
        "Mã nhân viên": [{"text": employee_id}],
        "Request No.": [{"text": request_no}],
        "Ngày chấm công": work_date,
        "Tổng giờ": hours,
        "Lương": salary,
    }
    if hourly_rate is not None:
        fields["Mức lương/giờ"] = hourly_rate
    return store.seed("hours_summary", fields)


def seed_punch(store, employee_id, kind, when, *, position="Nhân viên Bán hàng"):
    return store.seed(
        "attendance",
        {"Mã nhân viên": employee_id, "Phân loại": kind, "Vị trí": position, "Thời gian chấm công": when},
    )


@pytest.fixture
def seed():
    """Seeding helpers for the in-memory store, keyed by table."""

    class _Seed:
        employee = staticmethod(seed_employee)
        request = staticmethod(seed_request)
        work_history = staticmethod(seed_work_history)
        hours_summary = staticmethod(seed_hours_summary)
        punch = staticmethod(seed_punch)

    return _Seed
