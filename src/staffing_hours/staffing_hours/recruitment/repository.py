from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import HoursSummaryRow, StaffingRequest


class RecruitmentRepository(Protocol):
    def list_requests(self, *, status: Optional[str] = None) -> Sequence[StaffingRequest]:
        raise NotImplementedError

    def list_by_no(self, request_no: str) -> Sequence[StaffingRequest]:
        raise NotImplementedError


class HoursSummaryRepository(Protocol):
    def list_rows(self) -> Sequence[HoursSummaryRow]:
        raise NotImplementedError
