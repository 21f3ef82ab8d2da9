from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, tzinfo

from ...breaks.accountant import BreakAccountant, BreakTotals
from ...shifts.policy import ShiftPolicy


@dataclass(frozen=True)
class LogoutComputation:
    """Calculated logout instant plus the minutes that produced it."""

    logout_time: datetime
    strategy: str
    base_shift_minutes: int
    excess_paid_minutes: int
    effective_unpaid_minutes: int
    active_break_minutes: int
    early_login_minutes: int = 0
    adjustment_minutes: int = 0

    @property
    def total_extension_minutes(self) -> int:
        return self.excess_paid_minutes + self.effective_unpaid_minutes


class LogoutStrategy(ABC):
    """Strategy Pattern: encapsulate how the required logout instant is derived."""

    name: str = "base"

    def __init__(self, accountant: BreakAccountant):
        self._accountant = accountant

    @abstractmethod
    def compute(
        self,
        *,
        clock_in: datetime,
        totals: BreakTotals,
        policy: ShiftPolicy,
        tz: tzinfo,
    ) -> LogoutComputation:
        raise NotImplementedError
