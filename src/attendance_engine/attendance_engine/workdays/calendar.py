from __future__ import annotations

import math
from datetime import date
from typing import Optional

from ..core.enums import SaturdayPolicy
from .model import DaySignals
from .repository import HolidayRepository, LeaveRepository

_SUNDAY = 6
_SATURDAY = 5


def saturday_week_number(day: date) -> int:
    """1-based week of month used by the Saturday policy: ceil(day / 7)."""
    return math.ceil(day.day / 7)


def is_weekly_off(day: date, saturday_policy: SaturdayPolicy) -> bool:
    weekday = day.weekday()
    if weekday == _SUNDAY:
        return True
    if weekday != _SATURDAY:
        return False

    if saturday_policy == SaturdayPolicy.ALL_OFF:
        return True
    if saturday_policy == SaturdayPolicy.WEEKS_1_3_OFF:
        return saturday_week_number(day) in (1, 3)
    if saturday_policy == SaturdayPolicy.WEEKS_2_4_OFF:
        return saturday_week_number(day) in (2, 4)
    return False


class WorkCalendar:
    """Holiday / weekly-off / approved-leave signals for one employee-day."""

    def __init__(self, holidays: HolidayRepository, leaves: Optional[LeaveRepository] = None):
        self._holidays = holidays
        self._leaves = leaves

    def holiday_name(self, day: date) -> Optional[str]:
        holiday = self._holidays.get_for_date(day)
        # Tentative holidays are announced but not yet binding.
        if holiday is None or holiday.is_tentative:
            return None
        return holiday.name

    def describe(self, user_id: int, day: date, *, saturday_policy: SaturdayPolicy = SaturdayPolicy.ALL_WORKING) -> DaySignals:
        on_leave = False
        if self._leaves is not None:
            on_leave = self._leaves.get_approved_for_date(user_id, day) is not None
        return DaySignals(
            holiday_name=self.holiday_name(day),
            is_weekly_off=is_weekly_off(day, saturday_policy),
            on_leave=on_leave,
        )
