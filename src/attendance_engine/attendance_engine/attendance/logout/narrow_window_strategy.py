from __future__ import annotations

from datetime import datetime, tzinfo

from ...breaks.accountant import BreakTotals
from ...common.datetime_utils import add_minutes, at_local_time, minutes_between
from ...shifts.policy import ShiftPolicy
from .base import LogoutComputation, LogoutStrategy


class NarrowWindowEarlyLoginStrategy(LogoutStrategy):
    """Special shift, clock-in before nominal start.

    Minutes worked early offset break overrun; logout is anchored on the
    nominal end and never moves before it.
    """

    name = "narrow_window_early_login"

    def compute(self, *, clock_in: datetime, totals: BreakTotals, policy: ShiftPolicy, tz: tzinfo) -> LogoutComputation:
        nominal_start = at_local_time(clock_in, policy.nominal_start, tz)
        nominal_end = at_local_time(clock_in, policy.nominal_end, tz)

        early = max(0, minutes_between(clock_in, nominal_start))
        excess_paid = self._accountant.excess_paid_minutes(totals, policy.paid_break_allowance_minutes)
        # No free unpaid allowance here: every unpaid/extra minute competes with the early minutes.
        total_extra = excess_paid + totals.unpaid_running_minutes + totals.extra_running_minutes
        adjustment = max(total_extra - early, 0)

        return LogoutComputation(
            logout_time=max(add_minutes(nominal_end, adjustment), nominal_end),
            strategy=self.name,
            base_shift_minutes=policy.base_shift_minutes,
            excess_paid_minutes=excess_paid,
            effective_unpaid_minutes=totals.unpaid_running_minutes + totals.extra_running_minutes,
            active_break_minutes=totals.active_break_projected_minutes,
            early_login_minutes=early,
            adjustment_minutes=adjustment,
        )
