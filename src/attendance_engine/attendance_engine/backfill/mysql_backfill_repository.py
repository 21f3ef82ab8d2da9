from __future__ import annotations

import json
from datetime import tzinfo
from typing import List, Optional, Sequence, Tuple

from ..attendance.model import BackfillAudit, Classification, DailyAttendanceRecord
from ..attendance.mysql_attendance_repository import RECORD_COLUMNS, rows_to_records
from ..common.datetime_utils import get_timezone, to_naive_local
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import DateRange, RecordChange, RecordPage
from .repository import BackfillRepository

_UPDATE_SQL = """
    UPDATE attendance_logs
    SET attendance_status=%s, is_late=%s, late_minutes=%s, is_half_day=%s,
        half_day_reason_code=%s, half_day_reason_text=%s, half_day_source=%s,
        backfilled_at=%s, backfilled_by=%s, backfill_version=%s, backfill_reason=%s,
        backfill_previous=%s
    WHERE log_id=%s AND overridden_by_admin=0
"""


def _classification_params(c: Classification) -> List:
    return [
        c.attendance_status.value,
        int(c.is_late),
        int(c.late_minutes),
        int(c.is_half_day),
        c.half_day_reason_code.value if c.half_day_reason_code else None,
        c.half_day_reason_text,
        c.half_day_source.value if c.half_day_source else None,
    ]


def _audit_params(audit: Optional[BackfillAudit], tz: tzinfo) -> List:
    if audit is None:
        return [None, None, None, None]
    return [
        to_naive_local(audit.backfilled_at, tz),
        audit.backfilled_by,
        audit.backfill_version,
        audit.backfill_reason,
    ]


class MySQLBackfillRepository(BackfillRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, tz: Optional[tzinfo] = None):
        self._conn_factory = conn_factory
        self._tz = tz or get_timezone()

    def fetch_candidate_batch(self, *, after_id: int, limit: int, dates: DateRange) -> RecordPage:
        where = ["a.log_id > %s"]
        params: list = [int(after_id)]
        if dates.start is not None:
            where.append("a.attendance_date >= %s")
            params.append(dates.start)
        if dates.end is not None:
            where.append("a.attendance_date <= %s")
            params.append(dates.end)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {RECORD_COLUMNS}
                FROM attendance_logs a
                WHERE {" AND ".join(where)}
                ORDER BY a.log_id
                LIMIT %s
                """,
                tuple(params),
            )
            return self._page(cur)

    def fetch_backfilled_batch(
        self,
        *,
        run_id: str,
        after_id: int,
        limit: int,
        revertible_only: bool = False,
    ) -> RecordPage:
        snapshot_filter = "AND a.backfill_previous IS NOT NULL" if revertible_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {RECORD_COLUMNS}
                FROM attendance_logs a
                WHERE a.backfilled_by=%s AND a.log_id > %s {snapshot_filter}
                ORDER BY a.log_id
                LIMIT %s
                """,
                (run_id, int(after_id), int(limit)),
            )
            return self._page(cur)

    def _page(self, cur) -> RecordPage:
        failures: List[Tuple[int, Exception]] = []
        records = rows_to_records(cur, fetchall(cur), self._tz, failures=failures)
        return RecordPage(records=records, failures=failures)

    def apply_batch(self, changes: Sequence[RecordChange], audit: BackfillAudit) -> int:
        if not changes:
            return 0
        written = 0
        # db_cursor commits once at the end or rolls the whole batch back.
        with db_cursor(self._conn_factory) as (_, cur):
            for change in changes:
                snapshot = change.snapshot_for(audit)
                params = (
                    _classification_params(change.after)
                    + _audit_params(audit, self._tz)
                    + [json.dumps(snapshot.to_dict()), int(change.record_id)]
                )
                cur.execute(_UPDATE_SQL, tuple(params))
                written += cur.rowcount
        return written

    def revert_batch(self, records: Sequence[DailyAttendanceRecord]) -> int:
        restored = 0
        with db_cursor(self._conn_factory) as (_, cur):
            for record in records:
                snapshot = record.backfill_previous
                if snapshot is None:
                    continue
                params = (
                    _classification_params(snapshot.classification)
                    + _audit_params(snapshot.audit, self._tz)
                    + [None, int(record.record_id)]
                )
                cur.execute(_UPDATE_SQL, tuple(params))
                restored += cur.rowcount
        return restored
