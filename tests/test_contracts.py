import logging

import pytest

from worklog_reconciler.utils.contracts import ContractError, load_schema, validate_output

VALID_REPORT = {
    "schema_version": "1.0.0",
    "period": {"start": "2023-06-01", "end": "2023-06-30"},
    "counts": {"ledger_entries": 2, "log_entries": 40, "scoped_log_entries": 2, "translations": 1, "checks": 1},
    "checks": [
        {"name": "rates", "passed": True, "message": "Ledger rates are correct", "errors": []},
        {"name": "duplicates", "passed": True, "message": "No duplicate ledger entries", "errors": []},
    ],
    "passed": True,
    "totals": {
        "translation": 18000.0,
        "check": 700.0,
        "surcharge": 81.16,
        "pre_surcharge_total": 18781.16,
        "annualized": 225373.92,
    },
}


def test_validate_report_valid():
    """Should pass for valid data."""
    validate_output(VALID_REPORT, "reconciliation_report")


def test_validate_report_invalid_type():
    """Should fail if a count is not an integer."""
    invalid_data = VALID_REPORT.copy()
    invalid_data["counts"] = dict(VALID_REPORT["counts"], ledger_entries="2")
    with pytest.raises(ContractError) as excinfo:
        validate_output(invalid_data, "reconciliation_report", mode="FILING")
    assert "Data Contract Violation" in str(excinfo.value)


def test_validate_report_missing_field():
    """Should fail if required field is missing."""
    invalid_data = VALID_REPORT.copy()
    del invalid_data["schema_version"]
    with pytest.raises(ContractError):
        validate_output(invalid_data, "reconciliation_report", mode="FILING")


def test_validate_report_unknown_check_name():
    invalid_data = VALID_REPORT.copy()
    invalid_data["checks"] = [{"name": "dates", "passed": True, "message": "", "errors": []}]
    with pytest.raises(ContractError):
        validate_output(invalid_data, "reconciliation_report")


def test_validate_review_mode_warning(caplog):
    """Should not raise exception in REVIEW mode, but log a warning."""
    invalid_data = VALID_REPORT.copy()
    del invalid_data["schema_version"]

    with caplog.at_level(logging.WARNING, logger="worklog_reconciler.utils.contracts"):
        validate_output(invalid_data, "reconciliation_report", mode="REVIEW")
    assert "Data Contract Violation" in caplog.text


def test_missing_schema_raises_in_filing_mode():
    with pytest.raises(ContractError):
        validate_output({}, "does_not_exist", mode="FILING")
    with pytest.raises(FileNotFoundError):
        load_schema("does_not_exist")


def test_violation_names_the_offending_field():
    invalid_data = dict(VALID_REPORT, counts=dict(VALID_REPORT["counts"], ledger_entries="2"))
    with pytest.raises(ContractError, match=r"at counts\.ledger_entries"):
        validate_output(invalid_data, "reconciliation_report")
