from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from .model import Holiday, LeaveSpan


class HolidayRepository(Protocol):
    def get_for_date(self, day: date) -> Optional[Holiday]:
        raise NotImplementedError


class LeaveRepository(Protocol):
    def get_approved_for_date(self, user_id: int, day: date) -> Optional[LeaveSpan]:
        """Approved leave of the user covering ``day``, if any."""

        raise NotImplementedError
