from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..common.datetime_utils import minutes_between
from ..core.constants import FREE_UNPAID_BREAK_MINUTES
from ..core.enums import BreakKind
from .model import BreakInterval


@dataclass(frozen=True)
class BreakTotals:
    """Break minutes for one day.

    The ``*_minutes_taken`` fields only count closed breaks and are safe to
    persist. The running totals add the projected minutes of the open break
    to its own kind and exist for real-time evaluation only.
    """

    paid_minutes_taken: int = 0
    unpaid_minutes_taken: int = 0
    extra_minutes_taken: int = 0
    active_break_kind: Optional[BreakKind] = None
    active_break_projected_minutes: int = 0

    def _active(self, kind: BreakKind) -> int:
        return self.active_break_projected_minutes if self.active_break_kind == kind else 0

    @property
    def paid_running_minutes(self) -> int:
        return self.paid_minutes_taken + self._active(BreakKind.PAID)

    @property
    def unpaid_running_minutes(self) -> int:
        return self.unpaid_minutes_taken + self._active(BreakKind.UNPAID)

    @property
    def extra_running_minutes(self) -> int:
        return self.extra_minutes_taken + self._active(BreakKind.EXTRA)

    @property
    def has_taken_paid_break(self) -> bool:
        return self.paid_running_minutes > 0

    @property
    def is_on_break(self) -> bool:
        return self.active_break_kind is not None


class BreakAccountant:
    """Aggregate break intervals into per-kind minutes."""

    def __init__(self, *, free_unpaid_minutes: int = FREE_UNPAID_BREAK_MINUTES):
        self._free_unpaid = int(free_unpaid_minutes)

    def account(self, breaks: Iterable[BreakInterval], *, now: Optional[datetime] = None) -> BreakTotals:
        closed = {BreakKind.PAID: 0, BreakKind.UNPAID: 0, BreakKind.EXTRA: 0}
        active: Optional[BreakInterval] = None

        for b in breaks:
            if b.is_open:
                # Only one break may be open; keep the most recent if data says otherwise.
                if active is None or b.start_time > active.start_time:
                    active = b
                continue
            closed[b.kind] += max(0, minutes_between(b.start_time, b.end_time))

        projected = 0
        if active is not None and now is not None:
            projected = max(0, minutes_between(active.start_time, now))

        return BreakTotals(
            paid_minutes_taken=closed[BreakKind.PAID],
            unpaid_minutes_taken=closed[BreakKind.UNPAID],
            extra_minutes_taken=closed[BreakKind.EXTRA],
            active_break_kind=active.kind if active is not None else None,
            active_break_projected_minutes=projected,
        )

    @staticmethod
    def excess_paid_minutes(totals: BreakTotals, allowance_minutes: int) -> int:
        """Paid minutes beyond the allowance; the allowance itself is inside the base shift."""
        return max(0, totals.paid_running_minutes - int(allowance_minutes))

    def effective_unpaid_minutes(self, totals: BreakTotals) -> int:
        """Unpaid + extra minutes that push logout later.

        Until a paid break is taken the first ``free_unpaid_minutes`` of unpaid
        break are absorbed. Extra breaks always count in full.
        """

        unpaid = totals.unpaid_running_minutes
        if not totals.has_taken_paid_break:
            unpaid = max(0, unpaid - self._free_unpaid)
        return unpaid + totals.extra_running_minutes
