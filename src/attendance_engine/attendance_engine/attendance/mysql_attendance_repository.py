from __future__ import annotations

import json
import logging
from collections import defaultdict
from datetime import date, tzinfo
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..breaks.model import BreakInterval
from ..common.datetime_utils import ensure_aware, get_timezone
from ..core.enums import AttendanceStatus, BreakKind, HalfDayReason, HalfDaySource
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import (
    UNCLASSIFIED,
    BackfillAudit,
    Classification,
    ClassificationSnapshot,
    DailyAttendanceRecord,
    Session,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

RECORD_COLUMNS = """
    a.log_id, a.user_id, a.attendance_date, a.clock_in_time, a.clock_out_time,
    a.attendance_status, a.is_late, a.late_minutes, a.is_half_day,
    a.half_day_reason_code, a.half_day_reason_text, a.half_day_source,
    a.overridden_by_admin, a.leave_request_id,
    a.backfilled_at, a.backfilled_by, a.backfill_version, a.backfill_reason, a.backfill_previous
"""


def row_to_classification(r: Dict[str, Any]) -> Classification:
    code = r.get("half_day_reason_code")
    source = r.get("half_day_source")
    return Classification(
        attendance_status=AttendanceStatus(r["attendance_status"]),
        is_late=bool(r.get("is_late")),
        late_minutes=int(r.get("late_minutes") or 0),
        is_half_day=bool(r.get("is_half_day")),
        half_day_reason_code=HalfDayReason(code) if code else None,
        half_day_reason_text=r.get("half_day_reason_text"),
        half_day_source=HalfDaySource(source) if source else None,
    )


def row_to_audit(r: Dict[str, Any], tz: tzinfo) -> Optional[BackfillAudit]:
    if not r.get("backfilled_by"):
        return None
    return BackfillAudit(
        backfilled_at=ensure_aware(r.get("backfilled_at"), tz),
        backfilled_by=r["backfilled_by"],
        backfill_version=r.get("backfill_version") or "",
        backfill_reason=r.get("backfill_reason") or "",
    )


def parse_snapshot(raw: Any) -> Optional[ClassificationSnapshot]:
    if not raw:
        return None
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    data = json.loads(raw) if isinstance(raw, str) else raw
    return ClassificationSnapshot.from_dict(data)


def load_sessions(cur, log_ids: Sequence[int]) -> Dict[int, List[Dict[str, Any]]]:
    out: Dict[int, List[Dict[str, Any]]] = defaultdict(list)
    if not log_ids:
        return out
    cur.execute(
        f"""
        SELECT session_id, log_id, start_time, end_time
        FROM attendance_sessions
        WHERE log_id IN ({in_clause(log_ids)})
        ORDER BY log_id, start_time
        """,
        tuple(log_ids),
    )
    for r in fetchall(cur):
        out[int(r["log_id"])].append(r)
    return out


def load_breaks(cur, log_ids: Sequence[int]) -> Dict[int, List[Dict[str, Any]]]:
    out: Dict[int, List[Dict[str, Any]]] = defaultdict(list)
    if not log_ids:
        return out
    cur.execute(
        f"""
        SELECT break_id, log_id, break_type, start_time, end_time
        FROM break_logs
        WHERE log_id IN ({in_clause(log_ids)})
        ORDER BY log_id, start_time
        """,
        tuple(log_ids),
    )
    for r in fetchall(cur):
        out[int(r["log_id"])].append(r)
    return out


def _row_to_session(r: Dict[str, Any], tz: tzinfo) -> Session:
    return Session(
        start_time=ensure_aware(r["start_time"], tz),
        end_time=ensure_aware(r.get("end_time"), tz),
        session_id=int(r["session_id"]),
    )


def _row_to_break(r: Dict[str, Any], tz: tzinfo) -> BreakInterval:
    return BreakInterval(
        kind=BreakKind(r["break_type"]),
        start_time=ensure_aware(r["start_time"], tz),
        end_time=ensure_aware(r.get("end_time"), tz),
        break_id=int(r["break_id"]),
    )


def classification_or_unclassified(r: Dict[str, Any]) -> Classification:
    """Stored classification, or UNCLASSIFIED when the row holds values this engine does not know."""
    try:
        return row_to_classification(r)
    except ValueError as e:
        logger.warning("unreadable classification on log_id=%s: %s", r.get("log_id"), e)
        return UNCLASSIFIED


def row_to_record(
    r: Dict[str, Any],
    session_rows: Sequence[Dict[str, Any]],
    break_rows: Sequence[Dict[str, Any]],
    tz: tzinfo,
    *,
    classify: Callable[[Dict[str, Any]], Classification] = row_to_classification,
) -> DailyAttendanceRecord:
    leave_id = r.get("leave_request_id")
    return DailyAttendanceRecord(
        record_id=int(r["log_id"]),
        user_id=int(r["user_id"]),
        work_date=r["attendance_date"],
        clock_in_time=ensure_aware(r.get("clock_in_time"), tz),
        clock_out_time=ensure_aware(r.get("clock_out_time"), tz),
        classification=classify(r),
        sessions=tuple(_row_to_session(s, tz) for s in session_rows),
        breaks=tuple(_row_to_break(b, tz) for b in break_rows),
        overridden_by_admin=bool(r.get("overridden_by_admin")),
        leave_request_id=int(leave_id) if leave_id is not None else None,
        audit=row_to_audit(r, tz),
        backfill_previous=parse_snapshot(r.get("backfill_previous")),
    )


def rows_to_records(
    cur,
    rows: Sequence[Dict[str, Any]],
    tz: tzinfo,
    *,
    failures: Optional[List[Tuple[int, Exception]]] = None,
    classify: Callable[[Dict[str, Any]], Classification] = row_to_classification,
) -> List[DailyAttendanceRecord]:
    """Attach sessions and breaks to attendance_logs rows (two extra queries per batch).

    With ``failures`` given, a row that cannot be mapped is appended there as
    ``(log_id, error)`` and left out; otherwise the error propagates.
    """
    log_ids = [int(r["log_id"]) for r in rows]
    sessions = load_sessions(cur, log_ids)
    breaks = load_breaks(cur, log_ids)
    records = []
    for r in rows:
        log_id = int(r["log_id"])
        try:
            records.append(row_to_record(r, sessions.get(log_id, ()), breaks.get(log_id, ()), tz, classify=classify))
        except (KeyError, TypeError, ValueError) as e:
            if failures is None:
                raise
            failures.append((log_id, e))
    return records


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: Optional[tzinfo] = None):
        self._conn_factory = conn_factory
        self._tz = tz or get_timezone()

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[DailyAttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {RECORD_COLUMNS}
                FROM attendance_logs a
                WHERE a.user_id=%s AND a.attendance_date=%s
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            if not r:
                return None
            return rows_to_records(cur, [r], self._tz, classify=classification_or_unclassified)[0]
