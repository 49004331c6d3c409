from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import WorkHistoryEntry


class WorkHistoryRepository(Protocol):
    def list_all(self) -> Sequence[WorkHistoryEntry]:
        raise NotImplementedError

    def list_by_employee(self, employee_id: str) -> Sequence[WorkHistoryEntry]:
        raise NotImplementedError

    def get_by_id(self, record_id: str) -> Optional[WorkHistoryEntry]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: str,
        request_no: str,
        from_date: date,
        to_date: date,
        hourly_rate: Optional[float] = None,
    ) -> WorkHistoryEntry:
        raise NotImplementedError

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
        raise NotImplementedError

    def delete(self, record_id: str) -> None:
        raise NotImplementedError
