from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo

from ...breaks.accountant import BreakAccountant
from ...common.datetime_utils import at_local_time
from ...shifts.policy import ShiftPolicy
from .base import LogoutStrategy
from .narrow_window_strategy import NarrowWindowEarlyLoginStrategy
from .standard_strategy import NarrowWindowStandardStrategy, StandardLogoutStrategy


@dataclass
class LogoutStrategyFactory:
    """Factory Pattern: choose the logout rule for a policy and clock-in."""

    accountant: BreakAccountant = field(default_factory=BreakAccountant)

    def for_policy(self, policy: ShiftPolicy, clock_in: datetime, tz: tzinfo) -> LogoutStrategy:
        if not policy.is_special_narrow_window:
            return StandardLogoutStrategy(self.accountant)

        nominal_start = at_local_time(clock_in, policy.nominal_start, tz)
        if clock_in < nominal_start:
            return NarrowWindowEarlyLoginStrategy(self.accountant)
        return NarrowWindowStandardStrategy(self.accountant)
