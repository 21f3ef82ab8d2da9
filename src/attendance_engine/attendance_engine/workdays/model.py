from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Holiday:
    holiday_date: date
    name: str
    is_tentative: bool = False


@dataclass(frozen=True)
class LeaveSpan:
    """Approved leave request covering [start_date, end_date]."""

    leave_request_id: int
    user_id: int
    start_date: date
    end_date: date
    leave_type: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class DaySignals:
    holiday_name: Optional[str] = None
    is_weekly_off: bool = False
    on_leave: bool = False

    @property
    def is_non_working(self) -> bool:
        return bool(self.holiday_name) or self.is_weekly_off
