from __future__ import annotations

from typing import Iterable

from ..common.datetime_utils import minutes_between
from .model import Session


class WorkedTimeCalculator:
    """Worked minutes of a day: closed sessions only, whole minutes each."""

    def worked_minutes(self, sessions: Iterable[Session]) -> int:
        total = 0
        for s in sessions:
            if s.end_time is None:
                continue
            total += max(0, minutes_between(s.start_time, s.end_time))
        return total

    @staticmethod
    def is_day_complete(sessions: Iterable[Session]) -> bool:
        sessions = list(sessions)
        return bool(sessions) and not any(s.is_open for s in sessions)
