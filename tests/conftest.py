from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable

import pytest

from tests.builders import CHECK, LEDGER_HEADER, LOG_HEADER, TRANSLATION, write_workbook
from worklog_reconciler.core import LedgerEntry, LogEntry, WorkType, parse_count


@pytest.fixture
def today() -> date:
    """Fixed reference date so partial M/D dates resolve deterministically."""
    return date(2023, 6, 20)


@pytest.fixture
def make_ledger_entry() -> Callable[..., LedgerEntry]:
    def factory(
        case_number: str = "ALP-1001",
        work_type: WorkType = WorkType.TRANSLATION,
        word_count: str = "1000",
        rate: str = "18",
        entry_date: date = date(2023, 6, 1),
        row_id: str = "1",
        type_label: str | None = None,
    ) -> LedgerEntry:
        label = type_label or {WorkType.TRANSLATION: TRANSLATION, WorkType.CHECK: CHECK}.get(work_type, "校正")
        return LedgerEntry(
            row_id=row_id,
            entry_date=entry_date,
            case_number=case_number,
            work_type=work_type,
            type_label=label,
            word_count=Decimal(word_count),
            rate=parse_count(rate),
            rate_text=rate,
        )

    return factory


@pytest.fixture
def make_log_entry() -> Callable[..., LogEntry]:
    def factory(
        case_number: str = "ALP-1001",
        work_type: WorkType = WorkType.TRANSLATION,
        word_count: str = "1000",
        entry_date: date = date(2023, 6, 1),
        author: str = "Tanaka",
        type_label: str | None = None,
    ) -> LogEntry:
        label = type_label or {WorkType.TRANSLATION: TRANSLATION, WorkType.CHECK: CHECK}.get(work_type, "校正")
        count = Decimal(word_count)
        return LogEntry(
            entry_date=entry_date,
            case_number=case_number,
            work_type=work_type,
            type_label=label,
            check_word_count=count if work_type is WorkType.CHECK else None,
            translation_word_count=None if work_type is WorkType.CHECK else count,
            author=author,
        )

    return factory


@pytest.fixture
def ledger_workbook(tmp_path: Path) -> Path:
    return write_workbook(
        tmp_path / "ledger.xlsx",
        {
            "May": [
                LEDGER_HEADER,
                ["1", "ALP-0900", TRANSLATION, "05-02-23", "500", "18"],
            ],
            "June": [
                LEDGER_HEADER,
                ["1", "ALP-1001", TRANSLATION, "06-01-23", "1,000", "18"],
                ["2", "ALP-1002", CHECK, "06-05-23", "2 000", "1.4"],
                ["3", "ALP-", TRANSLATION, "06-06-23", "300", "18"],
                ["4", "", "", "6/30", "", ""],
            ],
        },
    )


@pytest.fixture
def log_workbook(tmp_path: Path) -> Path:
    return write_workbook(
        tmp_path / "log.xlsx",
        {
            "Template": [
                LOG_HEADER,
                ["6/1", "ALP-9999", TRANSLATION, "", "1", "", "Template"],
            ],
            "Q2": [
                LOG_HEADER,
                ["5/2", "ALP-0900", TRANSLATION, "", "500", "1", "Tanaka"],
                ["6/1", "ALP-1001", TRANSLATION, "", "1,000", "2", "Tanaka"],
                ["6/5", "ALP-1002", CHECK, "2000", "", "1", "Suzuki"],
                ["6/6", "ALP-", TRANSLATION, "", "300", "1", "Tanaka"],
            ],
        },
    )
