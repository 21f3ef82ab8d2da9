from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Optional

from ...breaks.accountant import BreakTotals
from ...common.datetime_utils import ensure_aware, get_timezone
from ...shifts.policy import ShiftPolicy
from .base import LogoutComputation
from .factory import LogoutStrategyFactory

logger = logging.getLogger(__name__)


class LogoutTimeCalculator:
    """Earliest instant an employee may clock out without a shortfall.

    Pure function of (clock-in, break totals, policy); the time zone only
    places nominal shift times on the clock-in's calendar day.
    """

    def __init__(self, *, factory: Optional[LogoutStrategyFactory] = None, tz: Optional[tzinfo] = None):
        self._factory = factory or LogoutStrategyFactory()
        self._tz = tz or get_timezone()

    def calculate(
        self,
        clock_in: Optional[datetime],
        totals: BreakTotals,
        policy: Optional[ShiftPolicy],
    ) -> Optional[LogoutComputation]:
        if clock_in is None or policy is None:
            return None

        clock_in = ensure_aware(clock_in, self._tz)
        strategy = self._factory.for_policy(policy, clock_in, self._tz)
        result = strategy.compute(clock_in=clock_in, totals=totals, policy=policy, tz=self._tz)
        logger.debug(
            "logout strategy=%s clock_in=%s logout=%s excess_paid=%s unpaid=%s",
            result.strategy,
            clock_in.isoformat(),
            result.logout_time.isoformat(),
            result.excess_paid_minutes,
            result.effective_unpaid_minutes,
        )
        return result

    def calculated_logout_time(
        self,
        clock_in: Optional[datetime],
        totals: BreakTotals,
        policy: Optional[ShiftPolicy],
    ) -> Optional[datetime]:
        result = self.calculate(clock_in, totals, policy)
        return result.logout_time if result else None
