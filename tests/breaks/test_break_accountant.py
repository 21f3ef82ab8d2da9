from datetime import datetime, timedelta

from src.attendance_engine.attendance_engine.breaks.accountant import BreakAccountant, BreakTotals
from src.attendance_engine.attendance_engine.breaks.model import BreakInterval
from src.attendance_engine.attendance_engine.common.datetime_utils import get_timezone
from src.attendance_engine.attendance_engine.core.enums import BreakKind

TZ = get_timezone("Asia/Kolkata")


def _at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2025, 3, 3, hour, minute, second, tzinfo=TZ)


def _brk(kind: BreakKind, start: datetime, minutes=None) -> BreakInterval:
    end = None if minutes is None else start + timedelta(minutes=minutes)
    return BreakInterval(kind=kind, start_time=start, end_time=end)


def test_closed_breaks_are_summed_per_kind_in_whole_minutes():
    breaks = [
        _brk(BreakKind.PAID, _at(12), 20),
        _brk(BreakKind.PAID, _at(15), 15),
        _brk(BreakKind.UNPAID, _at(13), 10),
        BreakInterval(kind=BreakKind.EXTRA, start_time=_at(16), end_time=_at(16, 4, 59)),
    ]

    totals = BreakAccountant().account(breaks)

    assert totals.paid_minutes_taken == 35
    assert totals.unpaid_minutes_taken == 10
    assert totals.extra_minutes_taken == 4
    assert not totals.is_on_break


def test_inverted_interval_counts_as_zero():
    breaks = [BreakInterval(kind=BreakKind.PAID, start_time=_at(13), end_time=_at(12, 50))]

    assert BreakAccountant().account(breaks).paid_minutes_taken == 0


def test_open_break_projection_joins_its_own_kind_only():
    breaks = [
        _brk(BreakKind.PAID, _at(12), 10),
        _brk(BreakKind.UNPAID, _at(14)),
    ]

    totals = BreakAccountant().account(breaks, now=_at(14, 25))

    assert totals.active_break_kind == BreakKind.UNPAID
    assert totals.active_break_projected_minutes == 25
    assert totals.unpaid_minutes_taken == 0
    assert totals.unpaid_running_minutes == 25
    assert totals.paid_running_minutes == 10


def test_open_break_without_now_projects_nothing():
    totals = BreakAccountant().account([_brk(BreakKind.PAID, _at(12))])

    assert totals.is_on_break
    assert totals.paid_running_minutes == 0


def test_excess_paid_respects_allowance_boundary():
    assert BreakAccountant.excess_paid_minutes(BreakTotals(paid_minutes_taken=30), 30) == 0
    assert BreakAccountant.excess_paid_minutes(BreakTotals(paid_minutes_taken=31), 30) == 1


def test_free_unpaid_allowance_only_without_paid_break():
    accountant = BreakAccountant()

    assert accountant.effective_unpaid_minutes(BreakTotals(unpaid_minutes_taken=20)) == 0
    assert accountant.effective_unpaid_minutes(BreakTotals(unpaid_minutes_taken=45)) == 15
    assert accountant.effective_unpaid_minutes(BreakTotals(paid_minutes_taken=5, unpaid_minutes_taken=20)) == 20


def test_extra_breaks_always_count():
    totals = BreakTotals(unpaid_minutes_taken=10, extra_minutes_taken=7)

    assert BreakAccountant().effective_unpaid_minutes(totals) == 7
