from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Any, List, Optional, Sequence, Tuple

from ..attendance.model import BackfillAudit, Classification, ClassificationSnapshot, DailyAttendanceRecord
from ..core.constants import (
    DEFAULT_BACKFILL_BATCH_SIZE,
    DEFAULT_BACKFILL_REASON,
    DEFAULT_BACKFILL_RUN_ID,
    DEFAULT_BACKFILL_VERSION,
)
from ..core.enums import BackfillMode, SkipReason


@dataclass(frozen=True)
class BackfillRunConfig:
    run_id: str = DEFAULT_BACKFILL_RUN_ID
    version: str = DEFAULT_BACKFILL_VERSION
    reason: str = DEFAULT_BACKFILL_REASON
    batch_size: int = DEFAULT_BACKFILL_BATCH_SIZE


@dataclass(frozen=True)
class DateRange:
    """Inclusive work-date filter; open ends mean unbounded."""

    start: Optional[date] = None
    end: Optional[date] = None

    @classmethod
    def build(
        cls,
        *,
        work_date: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> "DateRange":
        if work_date is not None:
            return cls(start=work_date, end=work_date)
        return cls(start=start_date, end=end_date)


@dataclass(frozen=True)
class RecordChange:
    """One record whose stored classification differs from the recomputed one."""

    record_id: int
    user_id: int
    work_date: date
    before: Classification
    after: Classification
    previous_audit: Optional[BackfillAudit] = None
    previous_snapshot: Optional[ClassificationSnapshot] = None

    def snapshot_for(self, audit: BackfillAudit) -> ClassificationSnapshot:
        """State to keep for rollback.

        A record written earlier under the same run id keeps its first snapshot,
        so re-running a run id never loses the values from before that run.
        """
        if (
            self.previous_snapshot is not None
            and self.previous_audit is not None
            and self.previous_audit.backfilled_by == audit.backfilled_by
        ):
            return self.previous_snapshot
        return ClassificationSnapshot(classification=self.before, audit=self.previous_audit)

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.record_id,
            "user_id": self.user_id,
            "work_date": self.work_date.isoformat(),
            "before": self.before.to_dict(),
            "after": self.after.to_dict(),
        }


@dataclass(frozen=True)
class RecordPage:
    """One keyset page: the records that mapped cleanly and the ids of rows that did not."""

    records: Sequence[DailyAttendanceRecord] = ()
    failures: Sequence[Tuple[int, Exception]] = ()

    @property
    def size(self) -> int:
        return len(self.records) + len(self.failures)

    @property
    def last_record_id(self) -> Optional[int]:
        ids = [r.record_id for r in self.records] + [record_id for record_id, _ in self.failures]
        return max(ids) if ids else None


@dataclass(frozen=True)
class ValidationIssue:
    record_id: int
    problem: str

    def to_dict(self) -> dict[str, Any]:
        return {"record_id": self.record_id, "problem": self.problem}


@dataclass
class BackfillReport:
    """Running counters of one reconciler run; logged after every batch."""

    mode: BackfillMode
    run_id: str
    scanned: int = 0
    eligible: int = 0
    updated: int = 0
    rolled_back: int = 0
    skipped: Counter = field(default_factory=Counter)
    errors: int = 0
    error_details: List[dict] = field(default_factory=list)
    batches: int = 0
    last_record_id: Optional[int] = None
    changes: List[RecordChange] = field(default_factory=list)
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())

    def skip(self, reason: SkipReason) -> None:
        self.skipped[reason] += 1

    def record_error(self, record_id: int, error: Exception) -> None:
        self.errors += 1
        self.error_details.append({"record_id": record_id, "error": f"{type(error).__name__}: {error}"})

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "run_id": self.run_id,
            "scanned": self.scanned,
            "eligible": self.eligible,
            "updated": self.updated,
            "rolled_back": self.rolled_back,
            "skipped": {reason.value: count for reason, count in sorted(self.skipped.items(), key=lambda kv: kv[0].value)},
            "skipped_total": self.skipped_total,
            "errors": self.errors,
            "error_details": list(self.error_details),
            "batches": self.batches,
            "last_record_id": self.last_record_id,
            "changes": [c.to_dict() for c in self.changes],
            "issues": [i.to_dict() for i in self.issues],
        }
