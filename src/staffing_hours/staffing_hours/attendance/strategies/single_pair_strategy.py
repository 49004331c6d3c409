from __future__ import annotations

from typing import Sequence

from ...common.timezone import TimeNormalizer
from ...core.enums import ShiftPolicy
from ..model import AttendanceEvent, HoursResult
from .base import CHECKOUT_BEFORE_CHECKIN, MISSING_CHECKIN, MISSING_CHECKOUT, HoursStrategy


class SinglePairStrategy(HoursStrategy):
    """Exactly one Checkin and one Checkout per day."""

    policy = ShiftPolicy.SINGLE_PAIR

    def calculate(self, events: Sequence[AttendanceEvent], *, position: str, normalizer: TimeNormalizer) -> HoursResult:
        checkins, checkouts = self.split_by_type(events)

        warnings: list[str] = []
        if not checkins:
            warnings.append(MISSING_CHECKIN)
        elif len(checkins) > 1:
            warnings.append(f"Có {len(checkins)} lần Checkin, chỉ được phép 1")
        if not checkouts:
            warnings.append(MISSING_CHECKOUT)
        elif len(checkouts) > 1:
            warnings.append(f"Có {len(checkouts)} lần Checkout, chỉ được phép 1")
        if warnings:
            return self.zero(position=position, warnings=warnings)

        hours = normalizer.hours_between(checkins[0].timestamp, checkouts[0].timestamp)
        if hours < 0:
            warnings.append(CHECKOUT_BEFORE_CHECKIN)
        return self.result(hours, position=position, warnings=warnings)
