import json
from datetime import date

import pytest

from src.attendance_engine.attendance_engine.backfill import cli
from src.attendance_engine.attendance_engine.backfill.model import BackfillReport
from src.attendance_engine.attendance_engine.core.enums import BackfillMode, SkipReason
from src.attendance_engine.attendance_engine.core.exceptions import BackfillAbortedError, StoreUnavailableError


class FakeConn:
    def __init__(self, error=None):
        self.error = error

    def verify(self):
        if self.error:
            raise self.error


class FakeReconciler:
    def __init__(self, report=None, error=None):
        self.report = report
        self.error = error
        self.calls = []

    def run(self, mode, **kwargs):
        self.calls.append((mode, kwargs))
        if self.error:
            raise self.error
        return self.report or BackfillReport(mode=mode, run_id="RUN")


class FakeContainer:
    def __init__(self, *, conn_error=None, run_error=None, report=None):
        self.conn = FakeConn(conn_error)
        self.reconciler = FakeReconciler(report, run_error)
        self.closed = False

    def close(self):
        self.closed = True


def _factory(container, seen=None):
    def build(settings, run_config):
        if seen is not None:
            seen.append(run_config)
        return container

    return build


def test_dry_run_by_default_prints_summary(capsys):
    container = FakeContainer()

    code = cli.main(["--date", "2025-03-03"], container_factory=_factory(container))

    assert code == 0
    mode, kwargs = container.reconciler.calls[0]
    assert mode == BackfillMode.DRY_RUN
    assert kwargs["work_date"] == date(2025, 3, 3)
    assert "scanned:" in capsys.readouterr().out
    assert container.closed


def test_mode_flags_and_overrides_reach_reconciler():
    container = FakeContainer()
    seen = []

    code = cli.main(
        ["--rollback", "--run-id", "FIX_JAN", "--batch-size", "25"],
        container_factory=_factory(container, seen),
    )

    assert code == 0
    assert container.reconciler.calls[0][0] == BackfillMode.ROLLBACK
    assert seen[0].run_id == "FIX_JAN"
    assert seen[0].batch_size == 25


def test_per_record_errors_still_exit_zero(capsys):
    report = BackfillReport(mode=BackfillMode.EXECUTE, run_id="RUN", scanned=3, errors=1)
    report.error_details.append({"record_id": 42, "error": "ValueError: bad row"})
    report.skip(SkipReason.NO_CLOCK_IN)

    code = cli.main(["--execute", "--json"], container_factory=_factory(FakeContainer(report=report)))

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["errors"] == 1
    assert payload["skipped"] == {"NO_CLOCK_IN": 1}


@pytest.mark.parametrize(
    "container",
    [
        FakeContainer(conn_error=StoreUnavailableError("cannot reach db")),
        FakeContainer(run_error=BackfillAbortedError("batch 3 failed", batch_number=3)),
    ],
)
def test_run_level_failures_exit_one(container, capsys):
    code = cli.main(["--execute"], container_factory=_factory(container))

    assert code == 1
    assert "backfill aborted" in capsys.readouterr().err
    assert container.closed


@pytest.mark.parametrize(
    "argv",
    [
        ["--execute", "--rollback"],
        ["--date", "03/03/2025"],
        ["--date", "2025-03-03", "--start", "2025-03-01"],
        ["--start", "2025-03-05", "--end", "2025-03-01"],
        ["--batch-size", "0"],
    ],
)
def test_bad_arguments_exit_two(argv):
    with pytest.raises(SystemExit) as exc:
        cli.main(argv, container_factory=_factory(FakeContainer()))

    assert exc.value.code == 2
