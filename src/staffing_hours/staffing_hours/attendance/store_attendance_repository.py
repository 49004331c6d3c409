from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.logger import get_logger
from ..common.timezone import TimeNormalizer
from ..core.enums import PunchType
from ..store.fields import decode_datetime, decode_employee_id_field, decode_text
from ..store.gateway import RecordStoreGateway, StoreRecord
from .model import AttendanceEvent
from .repository import AttendanceRepository

logger = get_logger("attendance.repository")

FIELD_EMPLOYEE_ID = "Mã nhân viên"
FIELD_TYPE = "Phân loại"
FIELD_POSITION = "Vị trí"
FIELD_TIMESTAMP = "Thời gian chấm công"
FIELD_NOTES = "Ghi chú"


class StoreAttendanceRepository(AttendanceRepository):
    def __init__(self, gateway: RecordStoreGateway, normalizer: TimeNormalizer, *, table: str = "attendance"):
        self._gateway = gateway
        self._normalizer = normalizer
        self._table = table

    def _to_event(self, record: StoreRecord) -> Optional[AttendanceEvent]:
        f = record.fields
        raw_type = decode_text(f.get(FIELD_TYPE))
        try:
            punch_type = PunchType(raw_type)
        except ValueError:
            logger.warning("Skipping attendance record %s with unknown type %r", record.record_id, raw_type)
            return None
        return AttendanceEvent(
            record_id=record.record_id,
            employee_id=decode_employee_id_field(f.get(FIELD_EMPLOYEE_ID)),
            punch_type=punch_type,
            position=decode_text(f.get(FIELD_POSITION)),
            timestamp=decode_datetime(f.get(FIELD_TIMESTAMP), self._normalizer),
            notes=decode_text(f.get(FIELD_NOTES)),
        )

    def list_events(self, *, employee_id: Optional[str] = None) -> Sequence[AttendanceEvent]:
        filters = {FIELD_EMPLOYEE_ID: employee_id} if employee_id else None
        records = self._gateway.list_all(self._table, filters)
        events = [self._to_event(r) for r in records]
        return [e for e in events if e is not None]

    def create_event(
        self,
        *,
        employee_id: str,
        punch_type: PunchType,
        position: str,
        timestamp: datetime,
        notes: str = "",
    ) -> AttendanceEvent:
        record = self._gateway.insert(
            self._table,
            {
                FIELD_EMPLOYEE_ID: employee_id,
                FIELD_TYPE: punch_type.value,
                FIELD_POSITION: position,
                FIELD_TIMESTAMP: self._normalizer.to_epoch_millis(timestamp),
                FIELD_NOTES: notes or "",
            },
        )
        return AttendanceEvent(
            record_id=record.record_id,
            employee_id=employee_id,
            punch_type=punch_type,
            position=position,
            timestamp=timestamp,
            notes=notes or "",
        )
