from __future__ import annotations

from datetime import time
from typing import Sequence

from ...common.timezone import TimeNormalizer
from ...core.constants import FIXED_SHIFT_CUTOFF, FIXED_SHIFT_PUNCHES
from ...core.enums import ShiftPolicy
from ..model import AttendanceEvent, HoursResult
from .base import HoursStrategy

SHIFT_LABELS = {"morning": "Ca sáng", "afternoon": "Ca chiều"}


class FixedShiftStrategy(HoursStrategy):
    """Two fixed shifts per day (e.g. Mascot): exactly 4 punches, split at the cutoff.

    Any deviation gives zero hours for the whole day; there is no partial credit.
    """

    policy = ShiftPolicy.FIXED_SHIFT

    def __init__(self, cutoff: time = FIXED_SHIFT_CUTOFF):
        self._cutoff = cutoff

    def calculate(self, events: Sequence[AttendanceEvent], *, position: str, normalizer: TimeNormalizer) -> HoursResult:
        if len(events) != FIXED_SHIFT_PUNCHES:
            return self.zero(
                position=position,
                warnings=[f"Vị trí {position or 'ca cố định'} cần đúng {FIXED_SHIFT_PUNCHES} lần chấm công/ngày (hiện có {len(events)})"],
            )

        buckets = {
            "morning": [e for e in events if normalizer.is_before_cutoff(e.timestamp, self._cutoff)],
            "afternoon": [e for e in events if not normalizer.is_before_cutoff(e.timestamp, self._cutoff)],
        }

        warnings: list[str] = []
        shifts: dict[str, float] = {}
        for name, bucket in buckets.items():
            checkins, checkouts = self.split_by_type(bucket)
            if len(checkins) != 1 or len(checkouts) != 1:
                warnings.append(
                    f"{SHIFT_LABELS[name]} cần đúng 1 Checkin và 1 Checkout "
                    f"(hiện có {len(checkins)} Checkin, {len(checkouts)} Checkout)"
                )
                shifts[name] = 0.0
                continue
            shifts[name] = max(normalizer.hours_between(checkins[0].timestamp, checkouts[0].timestamp), 0.0)

        if warnings:
            return self.zero(position=position, warnings=warnings, shifts={name: 0.0 for name in buckets})

        return self.result(sum(shifts.values()), position=position, warnings=[], shifts=shifts)
