from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.timezone import TimeNormalizer
from ..store.fields import decode_date, decode_int, decode_names, decode_text
from ..store.gateway import RecordStoreGateway, StoreRecord
from .model import StaffingRequest
from .repository import RecruitmentRepository

FIELD_REQUEST_NO = "Request No."
FIELD_REQUESTER = "Requester"
FIELD_STATUS = "Status"

# Form-generated columns carry a "Details_" prefix; manually created tables use English names.
FIELD_DEPARTMENT = ("Details_Phòng ban", "Department")
FIELD_QUANTITY = ("Details_Số lượng cần tuyển", "Quantity")
FIELD_GENDER = ("Details_Giới tính", "Gender")
FIELD_FROM_DATE = ("Details_Từ ngày", "From Date")
FIELD_TO_DATE = ("Details_Đến ngày", "To Date")
FIELD_POSITION = ("Details_Vị trí", "Position")


def _first(fields: Mapping[str, Any], names: tuple[str, ...]) -> Any:
    for name in names:
        value = fields.get(name)
        if value not in (None, "", []):
            return value
    return None


class StoreRecruitmentRepository(RecruitmentRepository):
    def __init__(self, gateway: RecordStoreGateway, normalizer: TimeNormalizer, *, table: str = "recruitment"):
        self._gateway = gateway
        self._normalizer = normalizer
        self._table = table

    def _to_request(self, record: StoreRecord) -> StaffingRequest:
        f = record.fields
        return StaffingRequest(
            record_id=record.record_id,
            request_no=decode_text(f.get(FIELD_REQUEST_NO)),
            requester=decode_names(f.get(FIELD_REQUESTER)),
            status=decode_text(f.get(FIELD_STATUS)),
            department=decode_text(_first(f, FIELD_DEPARTMENT)),
            quantity=decode_int(_first(f, FIELD_QUANTITY)),
            gender=decode_text(_first(f, FIELD_GENDER)),
            from_date=decode_date(_first(f, FIELD_FROM_DATE), self._normalizer),
            to_date=decode_date(_first(f, FIELD_TO_DATE), self._normalizer),
            position=decode_text(_first(f, FIELD_POSITION)),
        )

    def list_requests(self, *, status: Optional[str] = None) -> Sequence[StaffingRequest]:
        filters = {FIELD_STATUS: status} if status else None
        return [self._to_request(r) for r in self._gateway.list_all(self._table, filters)]

    def list_by_no(self, request_no: str) -> Sequence[StaffingRequest]:
        # "Request No." is often a link column, which a formula filter cannot match reliably.
        wanted = (request_no or "").strip()
        return [r for r in self.list_requests() if r.request_no == wanted]
