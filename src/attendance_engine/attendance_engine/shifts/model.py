from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import FrozenSet, Optional

from ..core.enums import ShiftType, SpecialShiftFlag


@dataclass(frozen=True)
class ShiftDefinition:
    """Domain entity: a shift as configured by admins."""

    shift_id: int
    shift_name: str
    shift_type: ShiftType
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    duration_hours: float = 9.0
    paid_break_minutes: Optional[int] = None
    working_minutes: Optional[int] = None
    special_flags: FrozenSet[SpecialShiftFlag] = field(default_factory=frozenset)

    @property
    def is_fixed(self) -> bool:
        return self.shift_type == ShiftType.FIXED
