from datetime import date, datetime, time

from src.attendance_engine.attendance_engine.attendance.late import LateStatusResolver
from src.attendance_engine.attendance_engine.attendance.model import Classification, DailyAttendanceRecord, Session
from src.attendance_engine.attendance_engine.attendance.status import AttendanceStatusResolver, DayContext
from src.attendance_engine.attendance_engine.common.datetime_utils import get_timezone
from src.attendance_engine.attendance_engine.core.enums import AttendanceStatus, HalfDayReason, HalfDaySource
from src.attendance_engine.attendance_engine.shifts.policy import ShiftPolicy

TZ = get_timezone("Asia/Kolkata")
DAY = date(2025, 3, 3)
POLICY = ShiftPolicy(
    working_minutes=510,
    paid_break_allowance_minutes=30,
    is_fixed=True,
    nominal_start=time(9, 0),
    nominal_end=time(18, 0),
)


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 3, 3, hour, minute, tzinfo=TZ)


def _record(clock_in=None, clock_out=None, *, status=AttendanceStatus.ON_TIME, **kwargs) -> DailyAttendanceRecord:
    sessions = ()
    if clock_in is not None:
        sessions = (Session(start_time=clock_in, end_time=clock_out),)
    return DailyAttendanceRecord(
        record_id=1,
        user_id=7,
        work_date=DAY,
        clock_in_time=clock_in,
        clock_out_time=clock_out,
        classification=Classification(attendance_status=status),
        sessions=sessions,
        **kwargs,
    )


def _resolve(**kwargs) -> Classification:
    kwargs.setdefault("policy", POLICY)
    resolver = AttendanceStatusResolver(late_resolver=LateStatusResolver(tz=TZ))
    return resolver.resolve(DayContext(work_date=DAY, **kwargs))


def test_admin_override_returns_stored_classification():
    stored = Classification(attendance_status=AttendanceStatus.ABSENT)
    record = DailyAttendanceRecord(
        record_id=1,
        user_id=7,
        work_date=DAY,
        clock_in_time=_at(11, 0),
        classification=stored,
        overridden_by_admin=True,
    )

    assert _resolve(record=record, holiday_name="Holi") is stored


def test_admin_half_day_is_kept():
    stored = Classification(
        attendance_status=AttendanceStatus.HALF_DAY,
        is_half_day=True,
        half_day_reason_code=HalfDayReason.ADMIN,
        half_day_source=HalfDaySource.ADMIN,
    )
    record = DailyAttendanceRecord(
        record_id=1, user_id=7, work_date=DAY, clock_in_time=_at(9, 0), classification=stored
    )

    assert _resolve(record=record) is stored


def test_non_working_days_ignore_logs():
    record = _record(_at(9, 0), _at(18, 0))

    assert _resolve(record=record, holiday_name="Republic Day").attendance_status == AttendanceStatus.HOLIDAY
    assert _resolve(record=record, is_weekly_off=True).attendance_status == AttendanceStatus.WEEKLY_OFF


def test_leave_beats_absent():
    assert _resolve(record=None, on_leave=True).attendance_status == AttendanceStatus.LEAVE
    assert _resolve(record=_record(status=AttendanceStatus.LEAVE)).attendance_status == AttendanceStatus.LEAVE


def test_no_clock_in_is_absent():
    assert _resolve(record=None).attendance_status == AttendanceStatus.ABSENT
    assert _resolve(record=_record()).attendance_status == AttendanceStatus.ABSENT


def test_full_day_on_time():
    result = _resolve(record=_record(_at(9, 0), _at(18, 0)))

    assert result.attendance_status == AttendanceStatus.ON_TIME
    assert not result.is_half_day


def test_insufficient_hours_half_day_with_reason_text():
    result = _resolve(record=_record(_at(9, 0), _at(15, 30)))

    assert result.attendance_status == AttendanceStatus.HALF_DAY
    assert result.half_day_reason_code == HalfDayReason.INSUFFICIENT_WORKING_HOURS
    assert result.half_day_reason_text == "Worked 6h 30m, minimum required is 8h 0m"
    assert result.half_day_source == HalfDaySource.AUTO


def test_open_day_is_not_judged_on_hours():
    result = _resolve(record=_record(_at(9, 0), None))

    assert result.attendance_status == AttendanceStatus.ON_TIME


def test_late_login_wins_over_insufficient_hours():
    result = _resolve(record=_record(_at(10, 0), _at(12, 0)), grace_minutes=30)

    assert result.half_day_reason_code == HalfDayReason.LATE_LOGIN
    assert result.late_minutes == 60


def test_late_within_threshold_and_enough_hours_is_late():
    result = _resolve(
        record=_record(_at(9, 40), _at(18, 40)),
        grace_minutes=30,
        half_day_threshold_minutes=60,
    )

    assert result.attendance_status == AttendanceStatus.LATE
    assert result.late_minutes == 40
    assert not result.is_half_day


def test_worked_minutes_sum_closed_sessions():
    record = DailyAttendanceRecord(
        record_id=1,
        user_id=7,
        work_date=DAY,
        clock_in_time=_at(9, 0),
        classification=Classification(attendance_status=AttendanceStatus.ON_TIME),
        sessions=(
            Session(start_time=_at(9, 0), end_time=_at(13, 0)),
            Session(start_time=_at(14, 0), end_time=_at(18, 0)),
        ),
    )

    result = _resolve(record=record, minimum_working_minutes=480)

    assert result.attendance_status == AttendanceStatus.ON_TIME
