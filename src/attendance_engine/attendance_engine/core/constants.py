"""Policy constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Shift policy: 8h30m of work plus a 30 minute paid break inside a 9h shift.
SHIFT_WORKING_MINUTES = 510
PAID_BREAK_ALLOWANCE_MINUTES = 30

# Unpaid minutes absorbed when no paid break has been taken that day.
FREE_UNPAID_BREAK_MINUTES = 30

DEFAULT_LATE_GRACE_MINUTES = 30
DEFAULT_MINIMUM_WORKING_MINUTES = 480

# Special narrow-window shift detected from its nominal times.
NARROW_WINDOW_START = "10:00"
NARROW_WINDOW_END = "19:00"

DEFAULT_TIMEZONE = "Asia/Kolkata"

DEFAULT_BACKFILL_BATCH_SIZE = 100
DEFAULT_BACKFILL_RUN_ID = "SYSTEM_BACKFILL"
DEFAULT_BACKFILL_VERSION = "v1.0"
DEFAULT_BACKFILL_REASON = "Historical attendance classification correction"

# Keys of the settings table.
SETTING_LATE_GRACE_MINUTES = "lateGraceMinutes"
SETTING_LATE_HALF_DAY_THRESHOLD = "lateHalfDayThresholdMinutes"
SETTING_MINIMUM_WORKING_MINUTES = "minimumWorkingMinutes"
SETTING_SATURDAY_POLICY = "saturdayPolicy"
