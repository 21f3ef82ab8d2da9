from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.enums import ShiftType, SpecialShiftFlag
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, normalize_mysql_time
from .model import ShiftDefinition
from .repository import ShiftRepository

_SHIFT_COLUMNS = """
    s.shift_id, s.shift_name, s.shift_type, s.start_time, s.end_time,
    s.duration_hours, s.paid_break_minutes, s.working_minutes, s.special_flags
"""


def _parse_flags(raw: Optional[str]) -> frozenset:
    flags = set()
    for part in (raw or "").split(","):
        part = part.strip()
        if part:
            flags.add(SpecialShiftFlag(part))
    return frozenset(flags)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


def row_to_shift(r: Dict[str, Any]) -> ShiftDefinition:
    return ShiftDefinition(
        shift_id=int(r["shift_id"]),
        shift_name=r["shift_name"],
        shift_type=ShiftType(r["shift_type"]),
        start_time=normalize_mysql_time(r.get("start_time")),
        end_time=normalize_mysql_time(r.get("end_time")),
        duration_hours=float(r.get("duration_hours") or 0),
        paid_break_minutes=_optional_int(r.get("paid_break_minutes")),
        working_minutes=_optional_int(r.get("working_minutes")),
        special_flags=_parse_flags(r.get("special_flags")),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user(self, user_id: int) -> Optional[ShiftDefinition]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_SHIFT_COLUMNS}
                FROM users u
                JOIN shifts s ON s.shift_id = u.shift_id
                WHERE u.user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return row_to_shift(r) if r else None
