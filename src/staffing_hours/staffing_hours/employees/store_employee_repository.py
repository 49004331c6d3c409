from __future__ import annotations

from typing import Sequence

from ..store.fields import decode_employee_id_field, decode_number, decode_text
from ..store.gateway import RecordStoreGateway, StoreRecord
from .model import Employee
from .repository import EmployeeRepository

FIELD_EMPLOYEE_ID = "Mã nhân viên"
FIELD_FULL_NAME = "Họ tên"
FIELD_PHONE = "Số điện thoại"
FIELD_GENDER = "Giới tính"
FIELD_POSITION = "Vị trí"
FIELD_HOURLY_RATE = "Mức lương/giờ"
FIELD_STATUS = "Trạng thái"


class StoreEmployeeRepository(EmployeeRepository):
    def __init__(self, gateway: RecordStoreGateway, *, table: str = "employees"):
        self._gateway = gateway
        self._table = table

    @staticmethod
    def _to_employee(record: StoreRecord) -> Employee:
        f = record.fields
        return Employee(
            record_id=record.record_id,
            employee_id=decode_employee_id_field(f.get(FIELD_EMPLOYEE_ID)),
            full_name=decode_text(f.get(FIELD_FULL_NAME)),
            phone_number=decode_text(f.get(FIELD_PHONE)),
            gender=decode_text(f.get(FIELD_GENDER)),
            position=decode_text(f.get(FIELD_POSITION)),
            hourly_rate=decode_number(f.get(FIELD_HOURLY_RATE)),
            status=decode_text(f.get(FIELD_STATUS)),
        )

    def list_all(self) -> Sequence[Employee]:
        return [self._to_employee(r) for r in self._gateway.list_all(self._table)]
