from worklog_reconciler.config import DEFAULT_CONFIG, ReconcilerConfig, load_config
from worklog_reconciler.core import (
    DateResolutionError,
    Entry,
    LedgerEntry,
    LogEntry,
    ReconcilerError,
    Signature,
    WorkType,
    infer_year,
    normalize_ledger_row,
    normalize_log_row,
    normalize_rows,
    resolve_date,
    signature,
)
from worklog_reconciler.reconcile import (
    CheckResult,
    ReconciliationReport,
    Totals,
    build_report,
    check_duplicates,
    check_ledger_in_log,
    check_log_in_ledger,
    check_rates,
    compute_totals,
    report_to_dict,
    report_to_text,
    run_checks,
    scope_log_entries,
)
from worklog_reconciler.workbook import SourceError, load_ledger_entries, load_log_entries

__all__ = [
    "CheckResult",
    "DEFAULT_CONFIG",
    "DateResolutionError",
    "Entry",
    "LedgerEntry",
    "LogEntry",
    "ReconcilerConfig",
    "ReconcilerError",
    "ReconciliationReport",
    "Signature",
    "SourceError",
    "Totals",
    "WorkType",
    "build_report",
    "check_duplicates",
    "check_ledger_in_log",
    "check_log_in_ledger",
    "check_rates",
    "compute_totals",
    "infer_year",
    "load_config",
    "load_ledger_entries",
    "load_log_entries",
    "normalize_ledger_row",
    "normalize_log_row",
    "normalize_rows",
    "report_to_dict",
    "report_to_text",
    "resolve_date",
    "run_checks",
    "scope_log_entries",
    "signature",
]
