from __future__ import annotations

from typing import Sequence

from ..attendance.duration import parse_duration
from ..common.timezone import TimeNormalizer
from ..store.fields import decode_date, decode_employee_id_field, decode_number, decode_text
from ..store.gateway import RecordStoreGateway, StoreRecord
from .model import HoursSummaryRow
from .repository import HoursSummaryRepository

FIELD_EMPLOYEE_ID = "Mã nhân viên"
FIELD_REQUEST_NO = ("Request No.", "Mã đề xuất")
FIELD_WORK_DATE = "Ngày chấm công"
FIELD_TOTAL_HOURS = "Tổng giờ"
FIELD_HOURLY_RATE = "Mức lương/giờ"
FIELD_SALARY = "Lương"


class StoreHoursSummaryRepository(HoursSummaryRepository):
    """Read-only access to the precomputed "Tổng hợp giờ công" table."""

    def __init__(self, gateway: RecordStoreGateway, normalizer: TimeNormalizer, *, table: str = "hours_summary"):
        self._gateway = gateway
        self._normalizer = normalizer
        self._table = table

    def _hours(self, raw) -> float:
        number = decode_number(raw)
        if number is not None:
            return number
        return parse_duration(decode_text(raw))

    def _to_row(self, record: StoreRecord) -> HoursSummaryRow:
        f = record.fields
        request_raw = next((f.get(name) for name in FIELD_REQUEST_NO if f.get(name)), None)
        return HoursSummaryRow(
            record_id=record.record_id,
            employee_id=decode_employee_id_field(f.get(FIELD_EMPLOYEE_ID)),
            request_no=decode_text(request_raw),
            work_date=decode_date(f.get(FIELD_WORK_DATE), self._normalizer),
            hours=self._hours(f.get(FIELD_TOTAL_HOURS)),
            hourly_rate=decode_number(f.get(FIELD_HOURLY_RATE)),
            salary=decode_number(f.get(FIELD_SALARY)) or 0.0,
        )

    def list_rows(self) -> Sequence[HoursSummaryRow]:
        return [self._to_row(r) for r in self._gateway.list_all(self._table)]
