from __future__ import annotations

from enum import Enum


class ShiftType(str, Enum):
    FIXED = "Fixed"
    FLEXIBLE = "Flexible"


class SpecialShiftFlag(str, Enum):
    """Shift variants that change logout arithmetic."""

    NARROW_WINDOW = "NARROW_WINDOW"


class BreakKind(str, Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"
    EXTRA = "Extra"


class AttendanceStatus(str, Enum):
    """Final per-day status stored on the attendance log."""

    ON_TIME = "On-time"
    LATE = "Late"
    HALF_DAY = "Half-day"
    ABSENT = "Absent"
    LEAVE = "Leave"
    HOLIDAY = "Holiday"
    WEEKLY_OFF = "Weekly-off"


class HalfDayReason(str, Enum):
    INSUFFICIENT_WORKING_HOURS = "INSUFFICIENT_WORKING_HOURS"
    LATE_LOGIN = "LATE_LOGIN"
    ADMIN = "ADMIN"


class HalfDaySource(str, Enum):
    AUTO = "AUTO"
    ADMIN = "ADMIN"


class PresenceState(str, Enum):
    """Live state of the employee for the day."""

    NOT_CLOCKED_IN = "Not Clocked In"
    CLOCKED_IN = "Clocked In"
    ON_BREAK = "On Break"
    CLOCKED_OUT = "Clocked Out"


class SaturdayPolicy(str, Enum):
    ALL_WORKING = "All Saturdays Working"
    ALL_OFF = "All Saturdays Off"
    WEEKS_1_3_OFF = "Week 1 & 3 Off"
    WEEKS_2_4_OFF = "Week 2 & 4 Off"


class BackfillMode(str, Enum):
    DRY_RUN = "DRY_RUN"
    EXECUTE = "EXECUTE"
    ROLLBACK = "ROLLBACK"
    VALIDATE = "VALIDATE"


class SkipReason(str, Enum):
    """Why the reconciler left a record alone."""

    ADMIN_OVERRIDE = "ADMIN_OVERRIDE"
    ADMIN_HALF_DAY = "ADMIN_HALF_DAY"
    LEAVE_RECORD = "LEAVE_RECORD"
    NO_CLOCK_IN = "NO_CLOCK_IN"
    DAY_IN_PROGRESS = "DAY_IN_PROGRESS"
    NON_WORKING_DAY = "NON_WORKING_DAY"
    NO_POLICY = "NO_POLICY"
    ALREADY_CORRECT = "ALREADY_CORRECT"
