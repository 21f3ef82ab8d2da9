from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import BreakKind


@dataclass(frozen=True)
class BreakInterval:
    """Domain entity: one break taken during the day (end_time None while open)."""

    kind: BreakKind
    start_time: datetime
    end_time: Optional[datetime] = None
    break_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None
