from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import DailyAttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[DailyAttendanceRecord]:
        """Record with its sessions and breaks, or None if the employee has no row that day."""

        raise NotImplementedError
