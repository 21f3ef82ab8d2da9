from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import format_minutes
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_MINIMUM_WORKING_MINUTES
from ..core.enums import AttendanceStatus, HalfDayReason, HalfDaySource
from ..shifts.policy import ShiftPolicy
from .late import LateStatusResolver, LateVerdict
from .model import Classification, DailyAttendanceRecord
from .worked_time import WorkedTimeCalculator


@dataclass(frozen=True)
class DayContext:
    """Everything the status resolver needs for one employee-day."""

    work_date: date
    record: Optional[DailyAttendanceRecord] = None
    policy: Optional[ShiftPolicy] = None
    holiday_name: Optional[str] = None
    is_weekly_off: bool = False
    on_leave: bool = False
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    half_day_threshold_minutes: Optional[int] = None
    minimum_working_minutes: int = DEFAULT_MINIMUM_WORKING_MINUTES


class AttendanceStatusResolver:
    """Final status of a day, in strict priority order.

    1. admin override (stored value is returned untouched)
    2. holiday / weekly off
    3. approved leave or stored Leave
    4. no clock-in -> Absent
    5. late-login half-day
    6. completed day under the minimum hours -> half-day
    7. On-time / Late
    """

    def __init__(
        self,
        *,
        late_resolver: Optional[LateStatusResolver] = None,
        worked_time: Optional[WorkedTimeCalculator] = None,
    ):
        self._late = late_resolver or LateStatusResolver()
        self._worked = worked_time or WorkedTimeCalculator()

    def resolve(self, context: DayContext) -> Classification:
        record = context.record

        if record is not None and (record.overridden_by_admin or record.is_admin_half_day):
            return record.classification

        if context.holiday_name:
            return Classification(attendance_status=AttendanceStatus.HOLIDAY)
        if context.is_weekly_off:
            return Classification(attendance_status=AttendanceStatus.WEEKLY_OFF)

        if context.on_leave or (record is not None and record.classification.attendance_status == AttendanceStatus.LEAVE):
            return Classification(attendance_status=AttendanceStatus.LEAVE)

        clock_in = record.first_clock_in if record is not None else None
        if clock_in is None:
            return Classification(attendance_status=AttendanceStatus.ABSENT)

        verdict = self._late.resolve(
            clock_in,
            context.policy,
            grace_minutes=context.grace_minutes,
            half_day_threshold_minutes=context.half_day_threshold_minutes,
        )
        if verdict.half_day_reason_code == HalfDayReason.LATE_LOGIN:
            return _from_verdict(verdict)

        sessions = record.effective_sessions
        if self._worked.is_day_complete(sessions):
            worked = self._worked.worked_minutes(sessions)
            minimum = int(context.minimum_working_minutes)
            if worked < minimum:
                return Classification(
                    attendance_status=AttendanceStatus.HALF_DAY,
                    is_late=verdict.is_late,
                    late_minutes=verdict.late_minutes,
                    is_half_day=True,
                    half_day_reason_code=HalfDayReason.INSUFFICIENT_WORKING_HOURS,
                    half_day_reason_text=f"Worked {format_minutes(worked)}, minimum required is {format_minutes(minimum)}",
                    half_day_source=HalfDaySource.AUTO,
                )

        return _from_verdict(verdict)


def _from_verdict(verdict: LateVerdict) -> Classification:
    return Classification(
        attendance_status=verdict.attendance_status,
        is_late=verdict.is_late,
        late_minutes=verdict.late_minutes,
        is_half_day=verdict.is_half_day,
        half_day_reason_code=verdict.half_day_reason_code,
        half_day_reason_text=verdict.half_day_reason_text,
        half_day_source=HalfDaySource.AUTO if verdict.is_half_day else None,
    )
