"""Command line entry point for historical attendance reconciliation.

    attendance-backfill --start 2024-01-01 --end 2024-01-31            # dry run
    attendance-backfill --date 2024-01-15 --execute --run-id FIX_JAN
    attendance-backfill --rollback --run-id FIX_JAN
    attendance-backfill --validate --run-id FIX_JAN

Exit codes: 0 when the run completes (per-record errors are reported, not
fatal), 1 when the run aborts, 2 on bad arguments.
"""

from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from datetime import date
from typing import Callable, Optional, Sequence

import mysql.connector
from dotenv import load_dotenv

from config import get_settings_module

from ..common.datetime_utils import parse_iso_date
from ..container import build_container
from ..core.enums import BackfillMode
from ..core.exceptions import BackfillAbortedError, StoreUnavailableError
from .model import BackfillReport, BackfillRunConfig

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1


def _iso_date(value: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from None


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="attendance-backfill",
        description="Recompute stored attendance classifications (dry run unless --execute).",
    )
    scope = parser.add_argument_group("scope")
    scope.add_argument("--date", type=_iso_date, help="single work date YYYY-MM-DD")
    scope.add_argument("--start", type=_iso_date, help="first work date (inclusive)")
    scope.add_argument("--end", type=_iso_date, help="last work date (inclusive)")

    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--execute", action="store_true", help="write changes")
    mode.add_argument("--rollback", action="store_true", help="revert records written under --run-id")
    mode.add_argument("--validate", action="store_true", help="check audit trail of records written under --run-id")

    parser.add_argument("--run-id", help="tag written records carry; rollback/validate select on it")
    parser.add_argument("--batch-size", type=_positive_int, help="records per batch/transaction")
    parser.add_argument("--json", action="store_true", help="print the summary as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def _mode(args: argparse.Namespace) -> BackfillMode:
    if args.execute:
        return BackfillMode.EXECUTE
    if args.rollback:
        return BackfillMode.ROLLBACK
    if args.validate:
        return BackfillMode.VALIDATE
    return BackfillMode.DRY_RUN


def _run_config(settings, args: argparse.Namespace) -> BackfillRunConfig:
    defaults = BackfillRunConfig()
    return BackfillRunConfig(
        run_id=args.run_id or getattr(settings, "BACKFILL_RUN_ID", defaults.run_id),
        version=getattr(settings, "BACKFILL_VERSION", defaults.version),
        reason=getattr(settings, "BACKFILL_REASON", defaults.reason),
        batch_size=args.batch_size or int(getattr(settings, "BACKFILL_BATCH_SIZE", defaults.batch_size)),
    )


def _default_container_factory(settings, run_config: BackfillRunConfig):
    return build_container(
        db_config=dict(settings.DB_CONFIG),
        timezone=getattr(settings, "TIMEZONE", None),
        backfill=run_config,
    )


def format_summary(report: BackfillReport) -> str:
    lines = [
        f"Backfill {report.mode.value} (run_id={report.run_id})",
        f"  scanned:  {report.scanned}",
        f"  eligible: {report.eligible}",
        f"  updated:  {report.updated}",
    ]
    if report.mode == BackfillMode.ROLLBACK:
        lines.append(f"  rolled back: {report.rolled_back}")
    lines.append(f"  skipped:  {report.skipped_total}")
    for reason, count in sorted(report.skipped.items(), key=lambda kv: kv[0].value):
        lines.append(f"    {reason.value}: {count}")
    lines.append(f"  errors:   {report.errors}")
    for detail in report.error_details:
        lines.append(f"    record {detail['record_id']}: {detail['error']}")
    if report.mode == BackfillMode.VALIDATE:
        lines.append(f"  issues:   {len(report.issues)}")
        for issue in report.issues:
            lines.append(f"    record {issue.record_id}: {issue.problem}")
    if report.mode == BackfillMode.DRY_RUN and report.changes:
        lines.append("  would change:")
        for change in report.changes:
            lines.append(
                f"    record {change.record_id} ({change.work_date.isoformat()}): "
                f"{change.before.attendance_status.value} -> {change.after.attendance_status.value}"
            )
    lines.append(f"  batches:  {report.batches} (last record id {report.last_record_id})")
    return "\n".join(lines)


def main(argv: Optional[Sequence[str]] = None, *, container_factory: Optional[Callable] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.date and (args.start or args.end):
        parser.error("--date cannot be combined with --start/--end")
    if args.start and args.end and args.start > args.end:
        parser.error("--start must not be after --end")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    run_config = _run_config(settings, args)
    factory = container_factory or _default_container_factory

    container = None
    try:
        container = factory(settings, run_config)
        container.conn.verify()
        report = container.reconciler.run(
            _mode(args),
            work_date=args.date,
            start_date=args.start,
            end_date=args.end,
        )
    except (StoreUnavailableError, BackfillAbortedError, mysql.connector.Error) as e:
        logger.error("backfill aborted: %s", e)
        print(f"ERROR: backfill aborted: {e}", file=sys.stderr)
        return EXIT_FATAL
    finally:
        if container is not None:
            container.close()

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, default=str))
    else:
        print(format_summary(report))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
