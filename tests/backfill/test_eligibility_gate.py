from datetime import date, datetime

from src.attendance_engine.attendance_engine.attendance.model import Classification, DailyAttendanceRecord, Session
from src.attendance_engine.attendance_engine.backfill.eligibility import EligibilityGate
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus, HalfDayReason, HalfDaySource, SkipReason
from src.attendance_engine.attendance_engine.shifts.policy import ShiftPolicy
from src.attendance_engine.attendance_engine.workdays.model import DaySignals

POLICY = ShiftPolicy(working_minutes=510, paid_break_allowance_minutes=30, is_fixed=False)
ON_TIME = Classification(attendance_status=AttendanceStatus.ON_TIME)


def _record(**kwargs) -> DailyAttendanceRecord:
    start = datetime(2025, 3, 3, 9, 0)
    values = dict(
        record_id=1,
        user_id=1,
        work_date=date(2025, 3, 3),
        clock_in_time=start,
        classification=ON_TIME,
        sessions=(Session(start_time=start, end_time=datetime(2025, 3, 3, 18, 0)),),
    )
    values.update(kwargs)
    return DailyAttendanceRecord(**values)


def test_regular_record_passes():
    assert EligibilityGate().check(_record(), DaySignals(), POLICY) is None


def test_protected_records_are_skipped_first():
    gate = EligibilityGate()
    admin_half = Classification(
        attendance_status=AttendanceStatus.HALF_DAY,
        is_half_day=True,
        half_day_reason_code=HalfDayReason.ADMIN,
        half_day_source=HalfDaySource.ADMIN,
    )

    assert gate.check(_record(overridden_by_admin=True, clock_in_time=None), DaySignals(), None) == SkipReason.ADMIN_OVERRIDE
    assert gate.check(_record(classification=admin_half), DaySignals(), POLICY) == SkipReason.ADMIN_HALF_DAY
    assert gate.check(_record(leave_request_id=9), DaySignals(), POLICY) == SkipReason.LEAVE_RECORD
    leave = Classification(attendance_status=AttendanceStatus.LEAVE)
    assert gate.check(_record(classification=leave), DaySignals(), POLICY) == SkipReason.LEAVE_RECORD
    assert gate.check(_record(), DaySignals(on_leave=True), POLICY) == SkipReason.LEAVE_RECORD


def test_unfinished_or_unclassifiable_days_are_skipped():
    gate = EligibilityGate()
    open_day = _record(sessions=(Session(start_time=datetime(2025, 3, 3, 9, 0)),))

    assert gate.check(_record(clock_in_time=None, sessions=()), DaySignals(), POLICY) == SkipReason.NO_CLOCK_IN
    assert gate.check(open_day, DaySignals(), POLICY) == SkipReason.DAY_IN_PROGRESS
    assert gate.check(_record(), DaySignals(is_weekly_off=True), POLICY) == SkipReason.NON_WORKING_DAY
    assert gate.check(_record(), DaySignals(holiday_name="Diwali"), POLICY) == SkipReason.NON_WORKING_DAY
    assert gate.check(_record(), DaySignals(), None) == SkipReason.NO_POLICY


def test_already_correct_ignores_half_day_source():
    computed = Classification(attendance_status=AttendanceStatus.ON_TIME, half_day_source=HalfDaySource.AUTO)

    assert EligibilityGate.check_result(_record(), computed) == SkipReason.ALREADY_CORRECT
    late = Classification(attendance_status=AttendanceStatus.LATE, is_late=True, late_minutes=12)
    assert EligibilityGate.check_result(_record(), late) is None
