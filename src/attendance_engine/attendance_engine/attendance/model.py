from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Tuple

from ..breaks.model import BreakInterval
from ..core.enums import AttendanceStatus, HalfDayReason, HalfDaySource


@dataclass(frozen=True)
class Session:
    """One clock-in/clock-out pair (end_time None while clocked in)."""

    start_time: datetime
    end_time: Optional[datetime] = None
    session_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class Classification:
    """Classification fields of a day; the only fields resolvers may change."""

    attendance_status: AttendanceStatus
    is_late: bool = False
    late_minutes: int = 0
    is_half_day: bool = False
    half_day_reason_code: Optional[HalfDayReason] = None
    half_day_reason_text: Optional[str] = None
    half_day_source: Optional[HalfDaySource] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "attendance_status": self.attendance_status.value,
            "is_late": self.is_late,
            "late_minutes": self.late_minutes,
            "is_half_day": self.is_half_day,
            "half_day_reason_code": self.half_day_reason_code.value if self.half_day_reason_code else None,
            "half_day_reason_text": self.half_day_reason_text,
            "half_day_source": self.half_day_source.value if self.half_day_source else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Classification":
        code = data.get("half_day_reason_code")
        source = data.get("half_day_source")
        return cls(
            attendance_status=AttendanceStatus(data["attendance_status"]),
            is_late=bool(data.get("is_late")),
            late_minutes=int(data.get("late_minutes") or 0),
            is_half_day=bool(data.get("is_half_day")),
            half_day_reason_code=HalfDayReason(code) if code else None,
            half_day_reason_text=data.get("half_day_reason_text"),
            half_day_source=HalfDaySource(source) if source else None,
        )


UNCLASSIFIED = Classification(attendance_status=AttendanceStatus.ON_TIME)


@dataclass(frozen=True)
class BackfillAudit:
    backfilled_at: datetime
    backfilled_by: str
    backfill_version: str
    backfill_reason: str

    @property
    def is_complete(self) -> bool:
        return bool(self.backfilled_at and self.backfilled_by and self.backfill_version and self.backfill_reason)


@dataclass(frozen=True)
class ClassificationSnapshot:
    """Pre-backfill state kept with the record so rollback restores it exactly."""

    classification: Classification
    audit: Optional[BackfillAudit] = None

    def to_dict(self) -> dict[str, Any]:
        audit = None
        if self.audit is not None:
            audit = {
                "backfilled_at": self.audit.backfilled_at.isoformat(),
                "backfilled_by": self.audit.backfilled_by,
                "backfill_version": self.audit.backfill_version,
                "backfill_reason": self.audit.backfill_reason,
            }
        return {"classification": self.classification.to_dict(), "audit": audit}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ClassificationSnapshot":
        audit_data = data.get("audit")
        audit = None
        if audit_data:
            audit = BackfillAudit(
                backfilled_at=datetime.fromisoformat(audit_data["backfilled_at"]),
                backfilled_by=audit_data["backfilled_by"],
                backfill_version=audit_data["backfill_version"],
                backfill_reason=audit_data["backfill_reason"],
            )
        return cls(classification=Classification.from_dict(data["classification"]), audit=audit)


@dataclass(frozen=True)
class DailyAttendanceRecord:
    """Domain entity: one employee-day of attendance (attendance_logs row)."""

    record_id: int
    user_id: int
    work_date: date
    clock_in_time: Optional[datetime]
    classification: Classification
    clock_out_time: Optional[datetime] = None
    sessions: Tuple[Session, ...] = field(default_factory=tuple)
    breaks: Tuple[BreakInterval, ...] = field(default_factory=tuple)
    overridden_by_admin: bool = False
    leave_request_id: Optional[int] = None
    audit: Optional[BackfillAudit] = None
    backfill_previous: Optional[ClassificationSnapshot] = None

    @property
    def first_clock_in(self) -> Optional[datetime]:
        """Earliest session start; falls back to the stored clock-in."""
        starts = [s.start_time for s in self.sessions]
        if starts:
            return min(starts)
        return self.clock_in_time

    @property
    def effective_sessions(self) -> Tuple[Session, ...]:
        """Recorded sessions, or the single clock-in/out pair of legacy rows."""
        if self.sessions:
            return self.sessions
        if self.clock_in_time is None:
            return ()
        return (Session(start_time=self.clock_in_time, end_time=self.clock_out_time),)

    @property
    def has_open_session(self) -> bool:
        return any(s.is_open for s in self.effective_sessions)

    @property
    def is_leave_record(self) -> bool:
        return self.classification.attendance_status == AttendanceStatus.LEAVE or self.leave_request_id is not None

    @property
    def is_admin_half_day(self) -> bool:
        return self.classification.is_half_day and self.classification.half_day_source == HalfDaySource.ADMIN
