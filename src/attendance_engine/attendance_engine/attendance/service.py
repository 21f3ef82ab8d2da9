from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..breaks.accountant import BreakAccountant, BreakTotals
from ..common.clock import Clock
from ..core.enums import PresenceState
from ..settings.service import AttendanceSettingsService
from ..shifts.policy import ShiftPolicyResolver
from ..shifts.repository import ShiftRepository
from ..workdays.calendar import WorkCalendar
from .logout.calculator import LogoutTimeCalculator
from .model import Classification, DailyAttendanceRecord
from .repository import AttendanceRepository
from .status import AttendanceStatusResolver, DayContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyStatus:
    user_id: int
    work_date: date
    presence: PresenceState
    break_totals: BreakTotals
    calculated_logout_time: Optional[datetime]
    classification: Classification
    evaluated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        totals = self.break_totals
        return {
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "presence": self.presence.value,
            "breaks": {
                "paid_minutes": totals.paid_running_minutes,
                "unpaid_minutes": totals.unpaid_running_minutes,
                "extra_minutes": totals.extra_running_minutes,
                "active_break": totals.active_break_kind.value if totals.active_break_kind else None,
                "active_break_minutes": totals.active_break_projected_minutes,
            },
            "calculated_logout_time": self.calculated_logout_time.isoformat() if self.calculated_logout_time else None,
            "classification": self.classification.to_dict(),
            "evaluated_at": self.evaluated_at.isoformat(),
        }


def presence_of(record: DailyAttendanceRecord | None, totals: BreakTotals) -> PresenceState:
    if record is None or record.first_clock_in is None:
        return PresenceState.NOT_CLOCKED_IN
    if totals.is_on_break:
        return PresenceState.ON_BREAK
    if record.has_open_session:
        return PresenceState.CLOCKED_IN
    return PresenceState.CLOCKED_OUT


class DailyStatusService:
    """Live evaluation of one employee-day for dashboards.

    Settings are read for every call so an admin change to the grace period
    applies to the very next evaluation.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        shifts: ShiftRepository,
        calendar: WorkCalendar,
        settings: AttendanceSettingsService,
        *,
        clock: Clock,
        policy_resolver: ShiftPolicyResolver | None = None,
        accountant: BreakAccountant | None = None,
        logout_calculator: LogoutTimeCalculator | None = None,
        status_resolver: AttendanceStatusResolver | None = None,
    ):
        self._attendance = attendance
        self._shifts = shifts
        self._calendar = calendar
        self._settings = settings
        self._clock = clock
        self._policies = policy_resolver or ShiftPolicyResolver()
        self._accountant = accountant or BreakAccountant()
        self._logout = logout_calculator or LogoutTimeCalculator()
        self._status = status_resolver or AttendanceStatusResolver()

    def get_daily_status(self, user_id: int, work_date: date | None = None) -> DailyStatus:
        now = self._clock.now()
        work_date = work_date or now.date()

        settings = self._settings.current()
        record = self._attendance.get_for_user_and_date(user_id, work_date)
        policy = self._policies.resolve(self._shifts.get_for_user(user_id))
        signals = self._calendar.describe(user_id, work_date, saturday_policy=settings.saturday_policy)

        # Open breaks are only projected up to "now" on the current day.
        projection_now = now if work_date == now.date() else None
        totals = self._accountant.account(record.breaks if record else (), now=projection_now)

        logout_time = None
        if record is not None:
            logout_time = self._logout.calculated_logout_time(record.first_clock_in, totals, policy)

        classification = self._status.resolve(
            DayContext(
                work_date=work_date,
                record=record,
                policy=policy,
                holiday_name=signals.holiday_name,
                is_weekly_off=signals.is_weekly_off,
                on_leave=signals.on_leave,
                grace_minutes=settings.late_grace_minutes,
                half_day_threshold_minutes=settings.late_half_day_threshold_minutes,
                minimum_working_minutes=settings.minimum_working_minutes,
            )
        )
        if policy is None and record is not None:
            logger.debug("no shift policy for user_id=%s on %s", user_id, work_date)

        return DailyStatus(
            user_id=int(user_id),
            work_date=work_date,
            presence=presence_of(record, totals),
            break_totals=totals,
            calculated_logout_time=logout_time,
            classification=classification,
            evaluated_at=now,
        )
