from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PunchType
from .model import AttendanceEvent


class AttendanceRepository(Protocol):
    def list_events(self, *, employee_id: Optional[str] = None) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def create_event(
        self,
        *,
        employee_id: str,
        punch_type: PunchType,
        position: str,
        timestamp: datetime,
        notes: str = "",
    ) -> AttendanceEvent:
        raise NotImplementedError
