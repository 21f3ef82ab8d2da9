from __future__ import annotations

from typing import Optional

from ..attendance.model import Classification, DailyAttendanceRecord
from ..core.enums import SkipReason
from ..shifts.policy import ShiftPolicy
from ..workdays.model import DaySignals


def same_classification(stored: Classification, computed: Classification) -> bool:
    """Equality of the classification proper; the half-day source is bookkeeping."""
    return (
        stored.attendance_status == computed.attendance_status
        and stored.is_late == computed.is_late
        and stored.late_minutes == computed.late_minutes
        and stored.is_half_day == computed.is_half_day
        and stored.half_day_reason_code == computed.half_day_reason_code
        and (stored.half_day_reason_text or None) == (computed.half_day_reason_text or None)
    )


class EligibilityGate:
    """Decide whether the reconciler may touch a record.

    Protected records (admin decisions, leave) are checked first so that
    nothing downstream ever sees them.
    """

    def check(
        self,
        record: DailyAttendanceRecord,
        signals: DaySignals,
        policy: Optional[ShiftPolicy],
    ) -> Optional[SkipReason]:
        if record.overridden_by_admin:
            return SkipReason.ADMIN_OVERRIDE
        if record.is_admin_half_day:
            return SkipReason.ADMIN_HALF_DAY
        if record.is_leave_record or signals.on_leave:
            return SkipReason.LEAVE_RECORD
        if record.first_clock_in is None:
            return SkipReason.NO_CLOCK_IN
        if record.has_open_session:
            return SkipReason.DAY_IN_PROGRESS
        if signals.is_non_working:
            return SkipReason.NON_WORKING_DAY
        if policy is None:
            return SkipReason.NO_POLICY
        return None

    @staticmethod
    def check_result(record: DailyAttendanceRecord, computed: Classification) -> Optional[SkipReason]:
        if same_classification(record.classification, computed):
            return SkipReason.ALREADY_CORRECT
        return None
