from __future__ import annotations

from typing import Sequence

from ...common.timezone import TimeNormalizer
from ...core.enums import ShiftPolicy
from ..model import AttendanceEvent, HoursResult
from .base import CHECKOUT_BEFORE_CHECKIN, MISSING_CHECKIN, MISSING_CHECKOUT, HoursStrategy


class DefaultStrategy(HoursStrategy):
    """Earliest Checkin to latest Checkout; extra punches only raise a warning."""

    policy = ShiftPolicy.DEFAULT

    def calculate(self, events: Sequence[AttendanceEvent], *, position: str, normalizer: TimeNormalizer) -> HoursResult:
        warnings: list[str] = []
        if len(events) > 2:
            warnings.append(f"Có {len(events)} lần chấm công trong ngày")

        checkins, checkouts = self.split_by_type(events)
        if not checkins:
            warnings.append(MISSING_CHECKIN)
        if not checkouts:
            warnings.append(MISSING_CHECKOUT)
        if not checkins or not checkouts:
            return self.zero(position=position, warnings=warnings)

        first_in = min(checkins, key=lambda e: normalizer.to_epoch_millis(e.timestamp))
        last_out = max(checkouts, key=lambda e: normalizer.to_epoch_millis(e.timestamp))
        hours = normalizer.hours_between(first_in.timestamp, last_out.timestamp)
        if hours < 0:
            warnings.append(CHECKOUT_BEFORE_CHECKIN)

        return self.result(hours, position=position, warnings=warnings)
