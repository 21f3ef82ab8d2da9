from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..common.datetime_utils import parse_hhmm
from ..core.constants import (
    NARROW_WINDOW_END,
    NARROW_WINDOW_START,
    PAID_BREAK_ALLOWANCE_MINUTES,
    SHIFT_WORKING_MINUTES,
)
from ..core.enums import SpecialShiftFlag
from .model import ShiftDefinition


@dataclass(frozen=True)
class ShiftPolicy:
    """Numeric policy every calculator works from."""

    working_minutes: int
    paid_break_allowance_minutes: int
    is_fixed: bool
    is_special_narrow_window: bool = False
    nominal_start: Optional[time] = None
    nominal_end: Optional[time] = None

    @property
    def base_shift_minutes(self) -> int:
        return self.working_minutes + self.paid_break_allowance_minutes


class ShiftPolicyResolver:
    """Turn a ShiftDefinition into a ShiftPolicy.

    Returns None ("no policy") when a Fixed shift lacks its start/end times;
    callers must then leave any previously stored classification alone.
    """

    def __init__(
        self,
        *,
        default_working_minutes: int = SHIFT_WORKING_MINUTES,
        default_paid_break_minutes: int = PAID_BREAK_ALLOWANCE_MINUTES,
    ):
        self._default_working = int(default_working_minutes)
        self._default_paid_break = int(default_paid_break_minutes)
        self._narrow_start = parse_hhmm(NARROW_WINDOW_START)
        self._narrow_end = parse_hhmm(NARROW_WINDOW_END)

    def resolve(self, shift: Optional[ShiftDefinition]) -> Optional[ShiftPolicy]:
        if shift is None:
            return None

        working = self._default_working if shift.working_minutes is None else int(shift.working_minutes)
        allowance = self._default_paid_break if shift.paid_break_minutes is None else int(shift.paid_break_minutes)
        if working < 0 or allowance < 0:
            return None

        if not shift.is_fixed:
            return ShiftPolicy(
                working_minutes=working,
                paid_break_allowance_minutes=allowance,
                is_fixed=False,
            )

        if shift.start_time is None or shift.end_time is None:
            return None

        return ShiftPolicy(
            working_minutes=working,
            paid_break_allowance_minutes=allowance,
            is_fixed=True,
            is_special_narrow_window=self._is_narrow_window(shift),
            nominal_start=shift.start_time,
            nominal_end=shift.end_time,
        )

    def _is_narrow_window(self, shift: ShiftDefinition) -> bool:
        if SpecialShiftFlag.NARROW_WINDOW in shift.special_flags:
            return True
        return (
            _hhmm(shift.start_time) == self._narrow_start
            and _hhmm(shift.end_time) == self._narrow_end
        )


def _hhmm(value: Optional[time]) -> Optional[time]:
    if value is None:
        return None
    return value.replace(second=0, microsecond=0)
