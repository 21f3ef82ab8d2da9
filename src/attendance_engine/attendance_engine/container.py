from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from typing import Optional

from .attendance.logout.calculator import LogoutTimeCalculator
from .attendance.late import LateStatusResolver
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import DailyStatusService
from .attendance.status import AttendanceStatusResolver
from .backfill.model import BackfillRunConfig
from .backfill.mysql_backfill_repository import MySQLBackfillRepository
from .backfill.reconciler import BackfillReconciler
from .common.clock import Clock, SystemClock
from .common.datetime_utils import get_timezone
from .database.connection import DBConfig, DatabaseConnection
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.service import AttendanceSettingsService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.policy import ShiftPolicyResolver
from .workdays.calendar import WorkCalendar
from .workdays.mysql_workday_repository import MySQLHolidayRepository, MySQLLeaveRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    tz: tzinfo
    clock: Clock

    shifts_repo: MySQLShiftRepository
    attendance_repo: MySQLAttendanceRepository
    settings_repo: MySQLSettingsRepository
    backfill_repo: MySQLBackfillRepository

    settings_service: AttendanceSettingsService
    daily_status_service: DailyStatusService
    reconciler: BackfillReconciler

    def close(self) -> None:
        self.conn.close()


def build_container(
    *,
    db_config: dict,
    timezone: Optional[str] = None,
    backfill: Optional[BackfillRunConfig] = None,
    clock: Optional[Clock] = None,
) -> Container:
    tz = get_timezone(timezone)
    clock = clock or SystemClock(tz)
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    shifts_repo = MySQLShiftRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn, tz=tz)
    settings_repo = MySQLSettingsRepository(conn)
    backfill_repo = MySQLBackfillRepository(conn, tz=tz)
    calendar = WorkCalendar(MySQLHolidayRepository(conn), MySQLLeaveRepository(conn))

    policy_resolver = ShiftPolicyResolver()
    status_resolver = AttendanceStatusResolver(late_resolver=LateStatusResolver(tz=tz))
    settings_service = AttendanceSettingsService(settings_repo)

    daily_status_service = DailyStatusService(
        attendance_repo,
        shifts_repo,
        calendar,
        settings_service,
        clock=clock,
        policy_resolver=policy_resolver,
        logout_calculator=LogoutTimeCalculator(tz=tz),
        status_resolver=status_resolver,
    )
    reconciler = BackfillReconciler(
        backfill_repo,
        shifts_repo,
        calendar,
        settings_service,
        clock=clock,
        config=backfill or BackfillRunConfig(),
        policy_resolver=policy_resolver,
        status_resolver=status_resolver,
    )

    return Container(
        conn=conn,
        tz=tz,
        clock=clock,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        backfill_repo=backfill_repo,
        settings_service=settings_service,
        daily_status_service=daily_status_service,
        reconciler=reconciler,
    )
