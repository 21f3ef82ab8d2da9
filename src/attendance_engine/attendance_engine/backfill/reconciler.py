from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Dict

from ..attendance.model import BackfillAudit, DailyAttendanceRecord
from ..attendance.status import AttendanceStatusResolver, DayContext
from ..common.clock import Clock
from ..core.enums import BackfillMode, HalfDaySource, SkipReason
from ..core.exceptions import BackfillAbortedError, StoreUnavailableError
from ..settings.model import AttendanceSettings
from ..settings.service import AttendanceSettingsService
from ..shifts.policy import ShiftPolicy, ShiftPolicyResolver
from ..shifts.repository import ShiftRepository
from ..workdays.calendar import WorkCalendar
from .eligibility import EligibilityGate
from .model import BackfillReport, BackfillRunConfig, DateRange, RecordChange, RecordPage, ValidationIssue
from .repository import BackfillRepository

logger = logging.getLogger(__name__)

_PROTECTED = {SkipReason.ADMIN_OVERRIDE, SkipReason.ADMIN_HALF_DAY, SkipReason.LEAVE_RECORD}


class BackfillReconciler:
    """Re-apply the current classification rules to stored attendance records.

    Records are walked in keyset pages by id. Each EXECUTE page is written in
    one transaction and tagged with the run id, together with a snapshot of
    what it replaced, so ROLLBACK can restore exactly those records.
    """

    def __init__(
        self,
        repo: BackfillRepository,
        shifts: ShiftRepository,
        calendar: WorkCalendar,
        settings: AttendanceSettingsService,
        *,
        clock: Clock,
        config: BackfillRunConfig | None = None,
        policy_resolver: ShiftPolicyResolver | None = None,
        status_resolver: AttendanceStatusResolver | None = None,
        gate: EligibilityGate | None = None,
    ):
        self._repo = repo
        self._shifts = shifts
        self._calendar = calendar
        self._settings = settings
        self._clock = clock
        self._config = config or BackfillRunConfig()
        self._policies = policy_resolver or ShiftPolicyResolver()
        self._status = status_resolver or AttendanceStatusResolver()
        self._gate = gate or EligibilityGate()

    def run(
        self,
        mode: BackfillMode = BackfillMode.DRY_RUN,
        *,
        work_date: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> BackfillReport:
        report = BackfillReport(mode=mode, run_id=self._config.run_id)
        logger.info("backfill started mode=%s run_id=%s batch_size=%s", mode.value, self._config.run_id, self._config.batch_size)

        if mode == BackfillMode.ROLLBACK:
            self._rollback(report)
        elif mode == BackfillMode.VALIDATE:
            self._validate(report)
        else:
            dates = DateRange.build(work_date=work_date, start_date=start_date, end_date=end_date)
            self._reconcile(report, dates, write=mode == BackfillMode.EXECUTE)

        logger.info(
            "backfill finished mode=%s scanned=%s eligible=%s updated=%s rolled_back=%s skipped=%s errors=%s issues=%s",
            mode.value,
            report.scanned,
            report.eligible,
            report.updated,
            report.rolled_back,
            report.skipped_total,
            report.errors,
            len(report.issues),
        )
        return report

    def _reconcile(self, report: BackfillReport, dates: DateRange, *, write: bool) -> None:
        limit = self._config.batch_size
        after_id = 0
        while True:
            # Fresh settings per batch: an admin change mid-run applies from the next batch on.
            settings = self._settings.current()
            page = self._repo.fetch_candidate_batch(after_id=after_id, limit=limit, dates=dates)
            if not page.size:
                break

            report.batches += 1
            self._tally_failures(page, report)
            policies: Dict[int, ShiftPolicy | None] = {}
            changes = []
            for record in page.records:
                report.scanned += 1
                try:
                    change = self._evaluate(record, settings, policies, report)
                except Exception as e:
                    logger.exception("backfill failed to evaluate record_id=%s", record.record_id)
                    report.record_error(record.record_id, e)
                    continue
                if change is not None:
                    report.eligible += 1
                    changes.append(change)
                    report.changes.append(change)

            if write and changes:
                report.updated += self._commit(changes, report.batches)

            after_id = page.last_record_id
            report.last_record_id = after_id
            self._checkpoint(report)
            if page.size < limit:
                break

    def _evaluate(
        self,
        record: DailyAttendanceRecord,
        settings: AttendanceSettings,
        policies: Dict[int, ShiftPolicy | None],
        report: BackfillReport,
    ) -> RecordChange | None:
        if record.user_id not in policies:
            policies[record.user_id] = self._policies.resolve(self._shifts.get_for_user(record.user_id))
        policy = policies[record.user_id]
        signals = self._calendar.describe(record.user_id, record.work_date, saturday_policy=settings.saturday_policy)

        reason = self._gate.check(record, signals, policy)
        if reason is not None:
            if reason in _PROTECTED:
                logger.debug("backfill skipped protected record_id=%s reason=%s", record.record_id, reason.value)
            report.skip(reason)
            return None

        computed = self._status.resolve(
            DayContext(
                work_date=record.work_date,
                record=record,
                policy=policy,
                holiday_name=signals.holiday_name,
                is_weekly_off=signals.is_weekly_off,
                on_leave=signals.on_leave,
                grace_minutes=settings.late_grace_minutes,
                half_day_threshold_minutes=settings.late_half_day_threshold_minutes,
                minimum_working_minutes=settings.minimum_working_minutes,
            )
        )
        computed = replace(computed, half_day_source=HalfDaySource.AUTO)

        reason = self._gate.check_result(record, computed)
        if reason is not None:
            report.skip(reason)
            return None

        return RecordChange(
            record_id=record.record_id,
            user_id=record.user_id,
            work_date=record.work_date,
            before=record.classification,
            after=computed,
            previous_audit=record.audit,
            previous_snapshot=record.backfill_previous,
        )

    def _commit(self, changes, batch_number: int) -> int:
        audit = BackfillAudit(
            backfilled_at=self._clock.now(),
            backfilled_by=self._config.run_id,
            backfill_version=self._config.version,
            backfill_reason=self._config.reason,
        )
        try:
            return self._repo.apply_batch(changes, audit)
        except StoreUnavailableError:
            raise
        except Exception as e:
            raise BackfillAbortedError(
                f"Batch {batch_number} could not be committed ({len(changes)} records): {e}",
                batch_number=batch_number,
            ) from e

    def _rollback(self, report: BackfillReport) -> None:
        limit = self._config.batch_size
        after_id = 0
        while True:
            page = self._repo.fetch_backfilled_batch(
                run_id=self._config.run_id, after_id=after_id, limit=limit, revertible_only=True
            )
            if not page.size:
                break

            report.batches += 1
            self._tally_failures(page, report)
            report.scanned += len(page.records)
            try:
                report.rolled_back += self._repo.revert_batch(page.records)
            except StoreUnavailableError:
                raise
            except Exception as e:
                raise BackfillAbortedError(
                    f"Rollback batch {report.batches} could not be committed: {e}",
                    batch_number=report.batches,
                ) from e

            after_id = page.last_record_id
            report.last_record_id = after_id
            self._checkpoint(report)
            if page.size < limit:
                break

    def _validate(self, report: BackfillReport) -> None:
        limit = self._config.batch_size
        after_id = 0
        while True:
            page = self._repo.fetch_backfilled_batch(run_id=self._config.run_id, after_id=after_id, limit=limit)
            if not page.size:
                break

            report.batches += 1
            self._tally_failures(page, report)
            for record in page.records:
                report.scanned += 1
                for problem in _validation_problems(record):
                    report.issues.append(ValidationIssue(record_id=record.record_id, problem=problem))

            after_id = page.last_record_id
            report.last_record_id = after_id
            self._checkpoint(report)
            if page.size < limit:
                break

    @staticmethod
    def _tally_failures(page: RecordPage, report: BackfillReport) -> None:
        for record_id, error in page.failures:
            report.scanned += 1
            logger.error("backfill could not read record_id=%s: %s", record_id, error)
            report.record_error(record_id, error)

    @staticmethod
    def _checkpoint(report: BackfillReport) -> None:
        logger.info(
            "backfill checkpoint batch=%s last_record_id=%s scanned=%s eligible=%s updated=%s skipped=%s errors=%s",
            report.batches,
            report.last_record_id,
            report.scanned,
            report.eligible,
            report.updated,
            report.skipped_total,
            report.errors,
        )


def _validation_problems(record: DailyAttendanceRecord):
    if record.audit is None or not record.audit.is_complete:
        yield "incomplete audit trail"
    if record.classification.half_day_source != HalfDaySource.AUTO:
        yield "half_day_source is not AUTO"
    if record.overridden_by_admin:
        yield "admin-overridden record was backfilled"
    if record.is_leave_record:
        yield "leave record was backfilled"
