from __future__ import annotations

from typing import Optional, Sequence

from ..common.timezone import TimeNormalizer
from .factory import HoursStrategyFactory
from .model import AttendanceEvent, HoursResult


class HoursCalculator:
    """Dispatch one employee-day of punches to the strategy of its position."""

    def __init__(self, normalizer: TimeNormalizer, *, factory: Optional[HoursStrategyFactory] = None):
        self._normalizer = normalizer
        self._factory = factory or HoursStrategyFactory()

    def calculate(self, events: Sequence[AttendanceEvent], position: str) -> HoursResult:
        ordered = sorted(events, key=lambda e: self._normalizer.to_epoch_millis(e.timestamp))
        strategy = self._factory.for_position(position)
        return strategy.calculate(ordered, position=position, normalizer=self._normalizer)
