import json
from datetime import date, datetime, time, timedelta

from src.attendance_engine.attendance_engine.attendance.mysql_attendance_repository import (
    parse_snapshot,
    rows_to_records,
)
from src.attendance_engine.attendance_engine.common.datetime_utils import get_timezone
from src.attendance_engine.attendance_engine.core.enums import (
    AttendanceStatus,
    BreakKind,
    HalfDayReason,
    HalfDaySource,
    ShiftType,
    SpecialShiftFlag,
)
from src.attendance_engine.attendance_engine.shifts.mysql_shift_repository import row_to_shift

TZ = get_timezone("Asia/Kolkata")


class ScriptedCursor:
    """Returns canned rows keyed by the table each query reads."""

    def __init__(self, rows_by_table):
        self.rows_by_table = rows_by_table
        self._pending = []

    def execute(self, sql, params=None):
        for table, rows in self.rows_by_table.items():
            if f"FROM {table}" in sql:
                self._pending = rows
                return
        self._pending = []

    def fetchall(self):
        return self._pending


def _log_row(**overrides):
    row = {
        "log_id": 10,
        "user_id": 3,
        "attendance_date": date(2025, 3, 3),
        "clock_in_time": datetime(2025, 3, 3, 9, 5),
        "clock_out_time": datetime(2025, 3, 3, 18, 10),
        "attendance_status": "Half-day",
        "is_late": 0,
        "late_minutes": 0,
        "is_half_day": 1,
        "half_day_reason_code": "INSUFFICIENT_WORKING_HOURS",
        "half_day_reason_text": "Worked 7h 0m, minimum required is 8h 0m",
        "half_day_source": "AUTO",
        "overridden_by_admin": 0,
        "leave_request_id": None,
        "backfilled_at": None,
        "backfilled_by": None,
        "backfill_version": None,
        "backfill_reason": None,
        "backfill_previous": None,
    }
    row.update(overrides)
    return row


def test_rows_to_records_attaches_sessions_and_breaks_in_local_zone():
    cur = ScriptedCursor(
        {
            "attendance_sessions": [
                {"session_id": 1, "log_id": 10, "start_time": datetime(2025, 3, 3, 9, 5), "end_time": datetime(2025, 3, 3, 13, 0)},
                {"session_id": 2, "log_id": 10, "start_time": datetime(2025, 3, 3, 14, 0), "end_time": None},
            ],
            "break_logs": [
                {"break_id": 5, "log_id": 10, "break_type": "Unpaid", "start_time": datetime(2025, 3, 3, 13, 0), "end_time": datetime(2025, 3, 3, 14, 0)},
            ],
        }
    )

    record = rows_to_records(cur, [_log_row()], TZ)[0]

    assert record.record_id == 10
    assert record.classification.attendance_status == AttendanceStatus.HALF_DAY
    assert record.classification.half_day_reason_code == HalfDayReason.INSUFFICIENT_WORKING_HOURS
    assert record.classification.half_day_source == HalfDaySource.AUTO
    assert record.first_clock_in == datetime(2025, 3, 3, 9, 5, tzinfo=TZ)
    assert record.has_open_session
    assert record.breaks[0].kind == BreakKind.UNPAID
    assert record.audit is None


def test_audit_and_snapshot_are_read_back():
    snapshot = {
        "classification": {"attendance_status": "On-time", "is_late": False, "late_minutes": 0, "is_half_day": False},
        "audit": None,
    }
    row = _log_row(
        backfilled_at=datetime(2025, 4, 1, 2, 0),
        backfilled_by="RUN_1",
        backfill_version="v1.0",
        backfill_reason="fix",
        backfill_previous=json.dumps(snapshot),
    )

    record = rows_to_records(ScriptedCursor({}), [row], TZ)[0]

    assert record.audit.backfilled_by == "RUN_1"
    assert record.audit.backfilled_at == datetime(2025, 4, 1, 2, 0, tzinfo=TZ)
    assert record.backfill_previous.classification.attendance_status == AttendanceStatus.ON_TIME
    assert record.backfill_previous.audit is None


def test_parse_snapshot_accepts_bytes_and_empty():
    assert parse_snapshot(None) is None
    raw = json.dumps({"classification": {"attendance_status": "Late", "is_late": True, "late_minutes": 12}}).encode()
    assert parse_snapshot(raw).classification.late_minutes == 12


def test_row_to_shift_reads_flags_and_time_deltas():
    shift = row_to_shift(
        {
            "shift_id": 4,
            "shift_name": "Narrow",
            "shift_type": "Fixed",
            "start_time": timedelta(hours=10),
            "end_time": timedelta(hours=19),
            "duration_hours": "9.00",
            "paid_break_minutes": None,
            "working_minutes": 510,
            "special_flags": "NARROW_WINDOW",
        }
    )

    assert shift.shift_type == ShiftType.FIXED
    assert shift.start_time == time(10, 0)
    assert shift.special_flags == frozenset({SpecialShiftFlag.NARROW_WINDOW})
    assert shift.paid_break_minutes is None
    assert shift.working_minutes == 510
