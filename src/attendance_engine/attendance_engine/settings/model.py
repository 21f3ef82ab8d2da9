from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_MINIMUM_WORKING_MINUTES
from ..core.enums import SaturdayPolicy


@dataclass(frozen=True)
class AttendanceSettings:
    """Admin-configurable values, as read for one evaluation."""

    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    late_half_day_threshold_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    minimum_working_minutes: int = DEFAULT_MINIMUM_WORKING_MINUTES
    saturday_policy: SaturdayPolicy = SaturdayPolicy.ALL_WORKING

    def to_dict(self) -> dict[str, Any]:
        return {
            "late_grace_minutes": self.late_grace_minutes,
            "late_half_day_threshold_minutes": self.late_half_day_threshold_minutes,
            "minimum_working_minutes": self.minimum_working_minutes,
            "saturday_policy": self.saturday_policy.value,
        }
