from dataclasses import dataclass, field
from datetime import date, datetime

from src.attendance_engine.attendance_engine.attendance.model import UNCLASSIFIED
from src.attendance_engine.attendance_engine.attendance.service import DailyStatus
from src.attendance_engine.attendance_engine.breaks.accountant import BreakTotals
from src.attendance_engine.attendance_engine.common.datetime_utils import get_timezone
from src.attendance_engine.attendance_engine.core.enums import PresenceState
from src.attendance_engine.attendance_engine.main import create_app
from src.attendance_engine.attendance_engine.settings.service import AttendanceSettingsService

TZ = get_timezone("Asia/Kolkata")


class FakeDailyStatus:
    def __init__(self):
        self.calls = []

    def get_daily_status(self, user_id, work_date=None):
        self.calls.append((user_id, work_date))
        now = datetime(2025, 3, 3, 12, 0, tzinfo=TZ)
        return DailyStatus(
            user_id=user_id,
            work_date=work_date or now.date(),
            presence=PresenceState.CLOCKED_IN,
            break_totals=BreakTotals(),
            calculated_logout_time=datetime(2025, 3, 3, 18, 0, tzinfo=TZ),
            classification=UNCLASSIFIED,
            evaluated_at=now,
        )


@dataclass
class InMemorySettings:
    values: dict = field(default_factory=dict)

    def get_all(self):
        return dict(self.values)

    def set_value(self, key, value):
        self.values[key] = value


@dataclass
class FakeContainer:
    daily_status_service: FakeDailyStatus = field(default_factory=FakeDailyStatus)
    settings_repo: InMemorySettings = field(default_factory=InMemorySettings)

    @property
    def settings_service(self):
        return AttendanceSettingsService(self.settings_repo)


def _client(container):
    return create_app(container=container).test_client()


def test_daily_status_endpoint():
    container = FakeContainer()

    res = _client(container).get("/api/attendance/daily-status?user_id=7&date=2025-03-03")

    assert res.status_code == 200
    body = res.get_json()
    assert body["data"]["presence"] == "Clocked In"
    assert body["data"]["calculated_logout_time"] == "2025-03-03T18:00:00+05:30"
    assert container.daily_status_service.calls == [(7, date(2025, 3, 3))]


def test_daily_status_rejects_bad_input():
    client = _client(FakeContainer())

    assert client.get("/api/attendance/daily-status").status_code == 400
    assert client.get("/api/attendance/daily-status?user_id=7&date=03-03-2025").status_code == 400


def test_settings_read_and_grace_update():
    container = FakeContainer()
    client = _client(container)

    assert client.get("/api/settings/attendance").get_json()["data"]["late_grace_minutes"] == 30

    res = client.put("/api/settings/attendance/grace", json={"minutes": 15})
    assert res.status_code == 200
    assert res.get_json()["data"]["late_grace_minutes"] == 15
    assert container.settings_repo.values["lateGraceMinutes"] == "15"


def test_grace_update_validation():
    client = _client(FakeContainer())

    assert client.put("/api/settings/attendance/grace", json={"minutes": -3}).status_code == 400
    assert client.put("/api/settings/attendance/grace", json={}).status_code == 400
