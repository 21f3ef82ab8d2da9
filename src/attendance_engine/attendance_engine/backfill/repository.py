from __future__ import annotations

from typing import Protocol, Sequence

from ..attendance.model import BackfillAudit, DailyAttendanceRecord
from .model import DateRange, RecordChange, RecordPage


class BackfillRepository(Protocol):
    def fetch_candidate_batch(self, *, after_id: int, limit: int, dates: DateRange) -> RecordPage:
        """Records with ``record_id > after_id`` ordered by id (keyset page).

        Rows that cannot be mapped come back in ``RecordPage.failures`` instead of raising.
        """

        raise NotImplementedError

    def fetch_backfilled_batch(
        self,
        *,
        run_id: str,
        after_id: int,
        limit: int,
        revertible_only: bool = False,
    ) -> RecordPage:
        """Records tagged ``backfilled_by=run_id``; ``revertible_only`` keeps those with a snapshot."""

        raise NotImplementedError

    def apply_batch(self, changes: Sequence[RecordChange], audit: BackfillAudit) -> int:
        """Write all changes in one transaction; raises if the transaction fails."""

        raise NotImplementedError

    def revert_batch(self, records: Sequence[DailyAttendanceRecord]) -> int:
        """Restore each record's snapshot and clear it, in one transaction."""

        raise NotImplementedError

