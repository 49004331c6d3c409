from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.timezone import TimeNormalizer
from ..store.fields import decode_date, decode_employee_id_field, decode_number, decode_text
from ..store.gateway import RecordStoreGateway, StoreRecord
from .model import WorkHistoryEntry
from .repository import WorkHistoryRepository

FIELD_EMPLOYEE_ID = "Mã nhân viên"
FIELD_REQUEST_NO = "Request No."
FIELD_FROM_DATE = "Từ ngày"
FIELD_TO_DATE = "Đến ngày"
FIELD_HOURLY_RATE = "Mức lương/giờ"


class StoreWorkHistoryRepository(WorkHistoryRepository):
    def __init__(self, gateway: RecordStoreGateway, normalizer: TimeNormalizer, *, table: str = "work_history"):
        self._gateway = gateway
        self._normalizer = normalizer
        self._table = table

    def _to_entry(self, record: StoreRecord) -> WorkHistoryEntry:
        f = record.fields
        return WorkHistoryEntry(
            record_id=record.record_id,
            employee_id=decode_employee_id_field(f.get(FIELD_EMPLOYEE_ID)),
            request_no=decode_text(f.get(FIELD_REQUEST_NO)),
            from_date=decode_date(f.get(FIELD_FROM_DATE), self._normalizer),
            to_date=decode_date(f.get(FIELD_TO_DATE), self._normalizer),
            hourly_rate=decode_number(f.get(FIELD_HOURLY_RATE)),
        )

    def _to_fields(
        self,
        *,
        employee_id: str,
        request_no: str,
        from_date: date,
        to_date: date,
        hourly_rate: Optional[float],
        clear_empty_rate: bool = False,
    ) -> dict[str, Any]:
        fields: dict[str, Any] = {
            FIELD_EMPLOYEE_ID: employee_id,
            FIELD_REQUEST_NO: request_no,
            FIELD_FROM_DATE: self._normalizer.to_epoch_millis(from_date),
            FIELD_TO_DATE: self._normalizer.to_epoch_millis(to_date),
        }
        # Updates merge into the stored record, so an empty rate is written as null to clear it.
        if hourly_rate is not None or clear_empty_rate:
            fields[FIELD_HOURLY_RATE] = hourly_rate
        return fields

    def list_all(self) -> Sequence[WorkHistoryEntry]:
        return [self._to_entry(r) for r in self._gateway.list_all(self._table)]

    def list_by_employee(self, employee_id: str) -> Sequence[WorkHistoryEntry]:
        records = self._gateway.list_all(self._table, {FIELD_EMPLOYEE_ID: employee_id})
        entries = [self._to_entry(r) for r in records]
        return [e for e in entries if e.employee_id == employee_id]

    def get_by_id(self, record_id: str) -> Optional[WorkHistoryEntry]:
        record = self._gateway.get_by_id(self._table, record_id)
        return self._to_entry(record) if record else None

    def create(
        self,
        *,
        employee_id: str,
        request_no: str,
        from_date: date,
        to_date: date,
        hourly_rate: Optional[float] = None,
    ) -> WorkHistoryEntry:
        record = self._gateway.insert(
            self._table,
            self._to_fields(
                employee_id=employee_id,
                request_no=request_no,
                from_date=from_date,
                to_date=to_date,
                hourly_rate=hourly_rate,
            ),
        )
        return WorkHistoryEntry(record.record_id, employee_id, request_no, from_date, to_date, hourly_rate)

    def update(
        self,
        record_id: str,
        *,
        employee_id: str,
        request_no: str,
        from_date: date,
        to_date: date,
        hourly_rate: Optional[float] = None,
    ) -> WorkHistoryEntry:
        self._gateway.update_by_id(
            self._table,
            record_id,
            self._to_fields(
                employee_id=employee_id,
                request_no=request_no,
                from_date=from_date,
                to_date=to_date,
                hourly_rate=hourly_rate,
                clear_empty_rate=True,
            ),
        )
        return WorkHistoryEntry(record_id, employee_id, request_no, from_date, to_date, hourly_rate)

    def delete(self, record_id: str) -> None:
        self._gateway.delete_by_id(self._table, record_id)
