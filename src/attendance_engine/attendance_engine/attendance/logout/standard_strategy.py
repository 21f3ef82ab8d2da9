from __future__ import annotations

from datetime import datetime, tzinfo

from ...breaks.accountant import BreakTotals
from ...common.datetime_utils import add_minutes, at_local_time
from ...shifts.policy import ShiftPolicy
from .base import LogoutComputation, LogoutStrategy


class StandardLogoutStrategy(LogoutStrategy):
    """clock-in + base shift + excess paid break + effective unpaid break."""

    name = "standard"

    def compute(self, *, clock_in: datetime, totals: BreakTotals, policy: ShiftPolicy, tz: tzinfo) -> LogoutComputation:
        excess_paid = self._accountant.excess_paid_minutes(totals, policy.paid_break_allowance_minutes)
        unpaid = self._accountant.effective_unpaid_minutes(totals)
        logout = add_minutes(clock_in, policy.base_shift_minutes + excess_paid + unpaid)
        return LogoutComputation(
            logout_time=logout,
            strategy=self.name,
            base_shift_minutes=policy.base_shift_minutes,
            excess_paid_minutes=excess_paid,
            effective_unpaid_minutes=unpaid,
            active_break_minutes=totals.active_break_projected_minutes,
        )


class NarrowWindowStandardStrategy(StandardLogoutStrategy):
    """Special shift, clock-in at/after nominal start: standard rule, never before nominal end."""

    name = "narrow_window_standard"

    def compute(self, *, clock_in: datetime, totals: BreakTotals, policy: ShiftPolicy, tz: tzinfo) -> LogoutComputation:
        result = super().compute(clock_in=clock_in, totals=totals, policy=policy, tz=tz)
        nominal_end = at_local_time(clock_in, policy.nominal_end, tz)
        if result.logout_time >= nominal_end:
            return result
        return LogoutComputation(
            logout_time=nominal_end,
            strategy=self.name,
            base_shift_minutes=result.base_shift_minutes,
            excess_paid_minutes=result.excess_paid_minutes,
            effective_unpaid_minutes=result.effective_unpaid_minutes,
            active_break_minutes=result.active_break_minutes,
        )
