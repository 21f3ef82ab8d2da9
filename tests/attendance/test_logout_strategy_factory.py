from datetime import datetime, time

from src.attendance_engine.attendance_engine.attendance.logout.factory import LogoutStrategyFactory
from src.attendance_engine.attendance_engine.attendance.logout.narrow_window_strategy import NarrowWindowEarlyLoginStrategy
from src.attendance_engine.attendance_engine.attendance.logout.standard_strategy import (
    NarrowWindowStandardStrategy,
    StandardLogoutStrategy,
)
from src.attendance_engine.attendance_engine.common.datetime_utils import get_timezone
from src.attendance_engine.attendance_engine.shifts.policy import ShiftPolicy

TZ = get_timezone("Asia/Kolkata")


def _policy(special: bool) -> ShiftPolicy:
    return ShiftPolicy(
        working_minutes=510,
        paid_break_allowance_minutes=30,
        is_fixed=True,
        is_special_narrow_window=special,
        nominal_start=time(10, 0),
        nominal_end=time(19, 0),
    )


def test_factory_uses_standard_strategy_for_regular_shift():
    strategy = LogoutStrategyFactory().for_policy(_policy(False), datetime(2025, 1, 1, 9, 0, tzinfo=TZ), TZ)

    assert isinstance(strategy, StandardLogoutStrategy)
    assert not isinstance(strategy, NarrowWindowStandardStrategy)


def test_factory_early_login_strategy_before_nominal_start():
    strategy = LogoutStrategyFactory().for_policy(_policy(True), datetime(2025, 1, 1, 9, 59, 59, tzinfo=TZ), TZ)

    assert isinstance(strategy, NarrowWindowEarlyLoginStrategy)


def test_factory_floored_standard_strategy_at_or_after_start():
    strategy = LogoutStrategyFactory().for_policy(_policy(True), datetime(2025, 1, 1, 10, 0, tzinfo=TZ), TZ)

    assert isinstance(strategy, NarrowWindowStandardStrategy)
