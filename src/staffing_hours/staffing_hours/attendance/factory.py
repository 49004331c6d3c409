from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Mapping

from ..core.constants import FIXED_SHIFT_CUTOFF, POSITION_CASHIER, POSITION_MASCOT
from ..core.enums import ShiftPolicy
from .strategies.base import HoursStrategy
from .strategies.default_strategy import DefaultStrategy
from .strategies.fixed_shift_strategy import FixedShiftStrategy
from .strategies.single_pair_strategy import SinglePairStrategy

DEFAULT_POSITION_POLICIES: dict[str, ShiftPolicy] = {
    POSITION_MASCOT: ShiftPolicy.FIXED_SHIFT,
    POSITION_CASHIER: ShiftPolicy.SINGLE_PAIR,
}


def parse_position_policies(raw: Mapping[str, str]) -> dict[str, ShiftPolicy]:
    return {str(position).strip(): ShiftPolicy(str(policy)) for position, policy in raw.items()}


@dataclass
class HoursStrategyFactory:
    """Factory Pattern: choose the shift-segmentation strategy for a position."""

    position_policies: dict[str, ShiftPolicy] = field(default_factory=lambda: dict(DEFAULT_POSITION_POLICIES))
    cutoff: time = FIXED_SHIFT_CUTOFF

    def policy_for(self, position: str) -> ShiftPolicy:
        name = (position or "").strip()
        if name in self.position_policies:
            return self.position_policies[name]
        if "mascot" in name.lower():
            return ShiftPolicy.FIXED_SHIFT
        return ShiftPolicy.DEFAULT

    def for_position(self, position: str) -> HoursStrategy:
        policy = self.policy_for(position)
        if policy == ShiftPolicy.FIXED_SHIFT:
            return FixedShiftStrategy(self.cutoff)
        if policy == ShiftPolicy.SINGLE_PAIR:
            return SinglePairStrategy()
        return DefaultStrategy()
