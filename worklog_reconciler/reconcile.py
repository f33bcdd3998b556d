#!/usr/bin/env python3

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Sequence

from worklog_reconciler.config import DEFAULT_CONFIG, ReconcilerConfig
from worklog_reconciler.core import (
    Entry,
    LedgerEntry,
    LogEntry,
    Signature,
    WorkType,
    as_float,
    format_money,
)

CENT = Decimal("0.01")
REPORT_SCHEMA_VERSION = "1.0.0"


@dataclass
class CheckResult:
    name: str
    passed: bool
    success_message: str
    errors: list[str] = field(default_factory=list)
    offenders: list[Entry] = field(default_factory=list)

    @property
    def last_offender(self) -> Entry | None:
        return self.offenders[-1] if self.offenders else None


@dataclass
class Totals:
    translation: Decimal
    check: Decimal
    surcharge: Decimal
    pre_surcharge_total: Decimal
    annualized: Decimal


@dataclass
class ReconciliationReport:
    ledger: list[LedgerEntry]
    log: list[LogEntry]
    scoped_log: list[LogEntry]
    period: tuple[date, date] | None
    checks: list[CheckResult]
    totals: Totals

    @property
    def translation_count(self) -> int:
        return count_by_type(self.ledger, WorkType.TRANSLATION)

    @property
    def check_count(self) -> int:
        return count_by_type(self.ledger, WorkType.CHECK)

    @property
    def passed(self) -> bool:
        return all(check.passed for check in self.checks)


def ledger_period(ledger: Sequence[LedgerEntry]) -> tuple[date, date] | None:
    if not ledger:
        return None
    dates = [entry.date for entry in ledger]
    return min(dates), max(dates)


def scope_log_entries(log: Iterable[LogEntry], ledger: Sequence[LedgerEntry]) -> list[LogEntry]:
    """
    Keep only the log entries that fall inside the ledger's billing period.

    The log covers a whole year while the ledger covers one period, so older,
    already settled work would otherwise show up as never invoiced.
    """
    period = ledger_period(ledger)
    if period is None:
        return []

    start, end = period
    lower = start - timedelta(days=1)
    upper = end + timedelta(days=1)
    return [entry for entry in log if lower < entry.date < upper]


def signature_counts(entries: Iterable[Entry]) -> Counter[Signature]:
    return Counter(entry.signature for entry in entries)


def check_rates(ledger: Sequence[LedgerEntry], config: ReconcilerConfig = DEFAULT_CONFIG) -> CheckResult:
    result = CheckResult(name="rates", passed=True, success_message="Ledger rates are correct")
    for entry in ledger:
        if entry.rate is None:
            continue
        if entry.rate == config.translation_rate:
            expected = WorkType.TRANSLATION
        elif entry.rate == config.check_rate:
            expected = WorkType.CHECK
        else:
            continue

        if entry.type is not expected:
            result.offenders.append(entry)
            result.errors.append(f"Rate is incorrect (Row {entry.describe()})")

    result.passed = not result.offenders
    return result


def check_duplicates(ledger: Sequence[LedgerEntry]) -> CheckResult:
    result = CheckResult(name="duplicates", passed=True, success_message="No duplicate ledger entries")
    counts = signature_counts(ledger)
    for entry in ledger:
        if counts[entry.signature] != 1:
            result.offenders.append(entry)
            result.errors.append(f"Duplicate entry (Row {entry.describe()})")

    result.passed = not result.offenders
    return result


def check_ledger_in_log(ledger: Sequence[LedgerEntry], scoped_log: Sequence[LogEntry]) -> CheckResult:
    result = CheckResult(
        name="ledger_in_log",
        passed=True,
        success_message="All ledger entries are in the work log",
    )
    log_counts = signature_counts(scoped_log)
    for entry in ledger:
        if log_counts[entry.signature] < 1:
            result.offenders.append(entry)
            result.errors.append(f"Ledger entry not in work log: Row {entry.describe()}")

    result.passed = not result.offenders
    return result


def check_log_in_ledger(scoped_log: Sequence[LogEntry], ledger: Sequence[LedgerEntry]) -> CheckResult:
    result = CheckResult(
        name="log_in_ledger",
        passed=True,
        success_message="All work log entries are in the ledger",
    )
    ledger_counts = signature_counts(ledger)
    for entry in scoped_log:
        # Zero and multiple ledger matches are both errors.
        matches = ledger_counts[entry.signature]
        if matches != 1:
            result.offenders.append(entry)
            result.errors.append(f"Work log entry not in ledger ({matches} matches): {entry.describe()}")

    result.passed = not result.offenders
    return result


def run_checks(
    ledger: Sequence[LedgerEntry],
    log: Sequence[LogEntry],
    config: ReconcilerConfig = DEFAULT_CONFIG,
) -> list[CheckResult]:
    return checks_for_scope(ledger, scope_log_entries(log, ledger), config)


def checks_for_scope(
    ledger: Sequence[LedgerEntry],
    scoped_log: Sequence[LogEntry],
    config: ReconcilerConfig = DEFAULT_CONFIG,
) -> list[CheckResult]:
    return [
        check_rates(ledger, config),
        check_duplicates(ledger),
        check_ledger_in_log(ledger, scoped_log),
        check_log_in_ledger(scoped_log, ledger),
    ]


def round_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def count_by_type(entries: Iterable[Entry], work_type: WorkType) -> int:
    return sum(1 for entry in entries if entry.type is work_type)


def sum_by_type(ledger: Iterable[LedgerEntry], work_type: WorkType) -> Decimal:
    total = sum(
        (entry.word_count * entry.rate for entry in ledger if entry.type is work_type and entry.rate is not None),
        Decimal("0"),
    )
    return round_money(total)


def compute_totals(ledger: Sequence[LedgerEntry], config: ReconcilerConfig = DEFAULT_CONFIG) -> Totals:
    translation = sum_by_type(ledger, WorkType.TRANSLATION)
    check = sum_by_type(ledger, WorkType.CHECK)
    pre_surcharge_total = translation + check + config.surcharge
    return Totals(
        translation=translation,
        check=check,
        surcharge=config.surcharge,
        pre_surcharge_total=pre_surcharge_total,
        annualized=pre_surcharge_total * config.periods_per_year,
    )


def build_report(
    ledger: Sequence[LedgerEntry],
    log: Sequence[LogEntry],
    config: ReconcilerConfig = DEFAULT_CONFIG,
) -> ReconciliationReport:
    scoped_log = scope_log_entries(log, ledger)
    return ReconciliationReport(
        ledger=list(ledger),
        log=list(log),
        scoped_log=scoped_log,
        period=ledger_period(ledger),
        checks=checks_for_scope(ledger, scoped_log, config),
        totals=compute_totals(ledger, config),
    )


def check_to_dict(check: CheckResult) -> dict[str, Any]:
    return {
        "name": check.name,
        "passed": check.passed,
        "message": check.success_message if check.passed else f"{len(check.errors)} problem(s) found",
        "errors": list(check.errors),
    }


def report_to_dict(report: ReconciliationReport) -> dict[str, Any]:
    period = None
    if report.period is not None:
        period = {"start": report.period[0].isoformat(), "end": report.period[1].isoformat()}

    totals = report.totals
    return {
        "schema_version": REPORT_SCHEMA_VERSION,
        "period": period,
        "counts": {
            "ledger_entries": len(report.ledger),
            "log_entries": len(report.log),
            "scoped_log_entries": len(report.scoped_log),
            "translations": report.translation_count,
            "checks": report.check_count,
        },
        "checks": [check_to_dict(check) for check in report.checks],
        "passed": report.passed,
        "totals": {
            "translation": as_float(totals.translation),
            "check": as_float(totals.check),
            "surcharge": as_float(totals.surcharge),
            "pre_surcharge_total": as_float(totals.pre_surcharge_total),
            "annualized": as_float(totals.annualized),
        },
    }


def report_to_text(report: ReconciliationReport) -> str:
    lines: list[str] = []

    lines.append(f"Ledger Entries: {len(report.ledger)}")
    lines.append(f"Work Log Entries: {len(report.log)}")
    if report.period is not None:
        start, end = report.period
        lines.append(
            f"Work Log Entries in Period: {len(report.scoped_log)} ({start.isoformat()} to {end.isoformat()})"
        )
    lines.append("")
    lines.append(f"Total Translations: {report.translation_count}")
    lines.append(f"Total Checks: {report.check_count}")
    lines.append("")

    for check in report.checks:
        if check.passed:
            lines.append(f"OKAY... {check.success_message}")
        else:
            lines.extend(f"ERROR: {message}" for message in check.errors)

    totals = report.totals
    lines.append("")
    lines.append(f"Total for translations: {format_money(totals.translation)}")
    lines.append(f"Total for checks: {format_money(totals.check)}")
    lines.append(
        f"Pre-surcharge total: {format_money(totals.pre_surcharge_total)} "
        f"({format_money(totals.annualized)} /YR)"
    )
    return "\n".join(lines)


def list_entries(entries: Sequence[Entry], work_type: WorkType | None = None) -> list[str]:
    """Number every entry by its position and keep those of ``work_type`` (all when None)."""
    return [
        f"{index}: {entry.describe()}"
        for index, entry in enumerate(entries)
        if work_type is None or entry.type is work_type
    ]
