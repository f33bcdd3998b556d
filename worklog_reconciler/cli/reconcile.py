"""
CLI Entry Point: worklog-reconcile

Compares a work log workbook against a billing ledger workbook and reports
missing, duplicated and mis-rated entries plus the period totals.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path

from worklog_reconciler.config import DEFAULT_CONFIG, ReconcilerConfig, load_config
from worklog_reconciler.core import DateResolutionError, WorkType
from worklog_reconciler.reconcile import (
    ReconciliationReport,
    build_report,
    list_entries,
    report_to_dict,
    report_to_text,
)
from worklog_reconciler.utils import console
from worklog_reconciler.utils.contracts import ContractError, validate_output
from worklog_reconciler.workbook import SourceError, load_ledger_entries, load_log_entries

DATE_ERROR_EXIT_CODE = 2

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Verify a work log against a billing ledger.")
    parser.add_argument("log", type=Path, help="Work log workbook (.xlsx); the first sheet is a template.")
    parser.add_argument("ledger", type=Path, help="Ledger workbook (.xlsx); only the last sheet is read.")
    parser.add_argument(
        "--ledger", "--invoices", dest="show_ledger", action="store_true", help="List every ledger entry."
    )
    parser.add_argument(
        "--log", "--shuhos", dest="show_log", action="store_true", help="List every work log entry in the period."
    )
    parser.add_argument("--translations", action="store_true", help="List work log translations in the period.")
    parser.add_argument("--checks", action="store_true", help="List work log checks in the period.")
    parser.add_argument("--json", action="store_true", help="Output machine-readable JSON.")
    parser.add_argument("--config", type=Path, default=None, help="JSON file overriding rates, labels and surcharge.")
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Reference date (YYYY-MM-DD) for guessing the year of M/D dates (default: today).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log skipped rows and sheet scans.")
    return parser


def resolve_config(path: Path | None) -> ReconcilerConfig:
    if path is None:
        return DEFAULT_CONFIG
    if not path.exists():
        sys.exit(f"Error: Config file not found: {path}")
    try:
        return load_config(path)
    except (ContractError, ValueError) as e:
        sys.exit(f"Invalid configuration: {e}")


def print_listings(report: ReconciliationReport, args: argparse.Namespace) -> None:
    if args.show_ledger:
        console.print_step("All Ledger Entries:")
        for line in list_entries(report.ledger):
            console.print_line(line)

    if args.show_log:
        console.print_step("All Work Log Entries:")
        for line in list_entries(report.scoped_log):
            console.print_line(line)

    if args.translations:
        console.print_step("All Translations:")
        for line in list_entries(report.scoped_log, WorkType.TRANSLATION):
            console.print_line(line)

    if args.checks:
        console.print_step("All Checks:")
        for line in list_entries(report.scoped_log, WorkType.CHECK):
            console.print_line(line)


def main() -> None:
    args = build_parser().parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = resolve_config(args.config)
    today = args.today or date.today()

    if not args.json:
        console.print_banner("Verify Work Log and Ledger")

    try:
        ledger = load_ledger_entries(args.ledger, today, config)
        log = load_log_entries(args.log, today, config)
    except SourceError as e:
        console.print_error(str(e))
        return
    except DateResolutionError as e:
        console.print_error(str(e), exit_code=DATE_ERROR_EXIT_CODE)
        return

    if not ledger:
        console.print_error("Empty ledger: no usable entries found.")
        return
    if not log:
        # Still checked: every ledger entry is then reported as missing from the work log.
        logger.warning(f"Work log {args.log} has no usable entries")

    report = build_report(ledger, log, config)

    if args.json:
        payload = report_to_dict(report)
        validate_output(payload, "reconciliation_report", mode="FILING")
        console.print_json(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for line in report_to_text(report).splitlines():
        console.print_report_line(line)

    print_listings(report, args)


if __name__ == "__main__":
    main()
