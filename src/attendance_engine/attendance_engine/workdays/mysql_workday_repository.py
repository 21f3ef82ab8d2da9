from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Holiday, LeaveSpan
from .repository import HolidayRepository, LeaveRepository


def _row_to_holiday(r: Dict[str, Any]) -> Holiday:
    return Holiday(
        holiday_date=r["holiday_date"],
        name=r["name"],
        is_tentative=bool(r.get("is_tentative")),
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_date(self, day: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_date, name, is_tentative
                FROM holidays
                WHERE holiday_date=%s
                ORDER BY is_tentative ASC
                LIMIT 1
                """,
                (day,),
            )
            r = fetchone(cur)
            return _row_to_holiday(r) if r else None


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_approved_for_date(self, user_id: int, day: date) -> Optional[LeaveSpan]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_id, user_id, start_date, end_date, leave_type
                FROM leave_requests
                WHERE user_id=%s AND status='Approved' AND %s BETWEEN start_date AND end_date
                ORDER BY leave_id DESC
                LIMIT 1
                """,
                (int(user_id), day),
            )
            r = fetchone(cur)
            if not r:
                return None
            return LeaveSpan(
                leave_request_id=int(r["leave_id"]),
                user_id=int(r["user_id"]),
                start_date=r["start_date"],
                end_date=r["end_date"],
                leave_type=r.get("leave_type"),
            )
