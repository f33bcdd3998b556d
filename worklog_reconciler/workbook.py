from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterator, cast
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from worklog_reconciler.config import DEFAULT_CONFIG, ReconcilerConfig
from worklog_reconciler.core import (
    LedgerEntry,
    LogEntry,
    ReconcilerError,
    normalize_rows,
)

logger = logging.getLogger(__name__)

TEMPLATE_SHEET_INDEX = 0


class SourceError(ReconcilerError):
    """Raised when a workbook cannot be opened or read."""


def open_workbook(path: Path) -> Workbook:
    try:
        return load_workbook(filename=str(path), read_only=True, data_only=True)
    except (OSError, InvalidFileException, BadZipFile, KeyError) as e:
        raise SourceError(f"Cannot open {path}: {e}") from e


def cell_text(value: Any, number_format: str | None = None) -> str:
    """
    Render a cell value the way it reads in the spreadsheet.

    Date cells keep the shape of their number format: a format with a year
    becomes ``MM-DD-YY`` and a bare month/day becomes ``M/D``.
    """
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        if "y" in (number_format or "").lower():
            return value.strftime("%m-%d-%y")
        return f"{value.month}/{value.day}"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def sheet_rows(worksheet: Worksheet) -> Iterator[list[str]]:
    """Yield every row as text with trailing blank cells dropped."""
    for cells in worksheet.iter_rows():
        row = [cell_text(cell.value, getattr(cell, "number_format", None)) for cell in cells]
        while row and row[-1] == "":
            row.pop()
        yield row


def ledger_sheet_name(workbook: Workbook) -> str:
    # Each billing period is appended as a new sheet; only the newest one counts.
    return cast(str, workbook.sheetnames[-1])


def log_sheet_names(workbook: Workbook) -> list[str]:
    return [name for index, name in enumerate(workbook.sheetnames) if index != TEMPLATE_SHEET_INDEX]


def load_ledger_entries(
    path: Path,
    today: date,
    config: ReconcilerConfig = DEFAULT_CONFIG,
) -> list[LedgerEntry]:
    workbook = open_workbook(path)
    try:
        name = ledger_sheet_name(workbook)
        logger.debug(f"Reading ledger sheet {name!r} from {path}")
        entries = normalize_rows(sheet_rows(workbook[name]), "ledger", today, config)
    finally:
        workbook.close()
    return cast(list[LedgerEntry], entries)


def load_log_entries(
    path: Path,
    today: date,
    config: ReconcilerConfig = DEFAULT_CONFIG,
) -> list[LogEntry]:
    workbook = open_workbook(path)
    entries: list[LogEntry] = []
    try:
        for name in log_sheet_names(workbook):
            logger.debug(f"Reading work log sheet {name!r} from {path}")
            sheet_entries = normalize_rows(sheet_rows(workbook[name]), "log", today, config)
            entries.extend(cast(list[LogEntry], sheet_entries))
    finally:
        workbook.close()
    return entries
