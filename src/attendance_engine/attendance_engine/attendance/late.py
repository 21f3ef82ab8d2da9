from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Optional

from ..common.datetime_utils import add_minutes, at_local_time, ensure_aware, format_clock_time, get_timezone, minutes_between
from ..core.enums import AttendanceStatus, HalfDayReason
from ..shifts.policy import ShiftPolicy


@dataclass(frozen=True)
class LateVerdict:
    attendance_status: AttendanceStatus
    is_late: bool = False
    late_minutes: int = 0
    is_half_day: bool = False
    half_day_reason_code: Optional[HalfDayReason] = None
    half_day_reason_text: Optional[str] = None


ON_TIME = LateVerdict(attendance_status=AttendanceStatus.ON_TIME)


class LateStatusResolver:
    """Classify a clock-in as On-time / Late / late-login Half-day.

    The grace period is an argument, never cached: callers read it from the
    settings store for every evaluation.
    """

    def __init__(self, *, tz: Optional[tzinfo] = None):
        self._tz = tz or get_timezone()

    def resolve(
        self,
        clock_in: Optional[datetime],
        policy: Optional[ShiftPolicy],
        *,
        grace_minutes: int,
        half_day_threshold_minutes: Optional[int] = None,
    ) -> LateVerdict:
        if clock_in is None or policy is None or not policy.is_fixed or policy.nominal_start is None:
            return ON_TIME

        clock_in = ensure_aware(clock_in, self._tz)
        start = at_local_time(clock_in, policy.nominal_start, self._tz)
        if clock_in <= add_minutes(start, int(grace_minutes)):
            return ON_TIME

        late_minutes = minutes_between(start, clock_in)

        threshold = int(grace_minutes) if half_day_threshold_minutes is None else int(half_day_threshold_minutes)
        if late_minutes > threshold:
            return LateVerdict(
                attendance_status=AttendanceStatus.HALF_DAY,
                is_late=True,
                late_minutes=late_minutes,
                is_half_day=True,
                half_day_reason_code=HalfDayReason.LATE_LOGIN,
                half_day_reason_text=f"Late login beyond grace period (logged at {format_clock_time(clock_in)})",
            )

        return LateVerdict(attendance_status=AttendanceStatus.LATE, is_late=True, late_minutes=late_minutes)
