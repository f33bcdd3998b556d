#!/usr/bin/env python3

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Literal, NamedTuple, Sequence

from worklog_reconciler.config import DEFAULT_CONFIG, ReconcilerConfig

logger = logging.getLogger(__name__)

LEDGER_DATE_RE = re.compile(r"\d+-\d+-\d+$")
LOG_DATE_RE = re.compile(r"^\d+/\d+$")
FULL_DATE_RE = re.compile(r"^\d{1,2}-\d{1,2}-\d{2}$")
PARTIAL_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})$")
NUMBER_TEXT_RE = re.compile(r"^\d+(?:\.\d+)?$")
SEPARATOR_RE = re.compile(r"[,\s]")

# Leap year used only to validate month/day pairs, 2/29 included.
LEAP_REFERENCE_YEAR = 2000

LEDGER_MIN_COLUMNS = 6
LOG_MIN_COLUMNS = 7

Role = Literal["ledger", "log"]


class ReconcilerError(Exception):
    """Base class for fatal reconciliation errors."""


class DateResolutionError(ReconcilerError):
    """Raised when a date cell matches neither the full nor the partial format."""

    def __init__(self, text: str, reason: str = "") -> None:
        self.text = text
        message = f"Invalid Date {text!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class WorkType(enum.Enum):
    TRANSLATION = "Translation"
    CHECK = "Check"
    UNKNOWN = "UNKNOWN"


class Signature(NamedTuple):
    """
    Identity of a billable unit; the entry date is not part of it.

    ``type_label`` is only filled for UNKNOWN work, so two different
    unrecognized labels never match each other.
    """

    case_number: str
    work_type: WorkType
    word_count: Decimal
    type_label: str = ""


def build_signature(case_number: str, work_type: WorkType, type_label: str, word_count: Decimal) -> Signature:
    label = type_label if work_type is WorkType.UNKNOWN else ""
    return Signature(case_number, work_type, word_count, label)


@dataclass(frozen=True)
class LedgerEntry:
    row_id: str
    entry_date: date
    case_number: str
    work_type: WorkType
    type_label: str
    word_count: Decimal
    # None when the cell is not a plain number ("18円"); such rows are neither rate-checked nor totalled.
    rate: Decimal | None
    rate_text: str = ""

    @property
    def type(self) -> WorkType:
        return self.work_type

    @property
    def date(self) -> date:
        return self.entry_date

    @property
    def signature(self) -> Signature:
        return build_signature(self.case_number, self.work_type, self.type_label, self.word_count)

    def describe(self) -> str:
        rate = self.rate if self.rate is not None else self.rate_text
        return (
            f"{self.row_id}, {self.case_number}, {self.entry_date.isoformat()}, "
            f"{self.type_label}, {self.word_count}, {rate}"
        )


@dataclass(frozen=True)
class LogEntry:
    entry_date: date
    case_number: str
    work_type: WorkType
    type_label: str
    check_word_count: Decimal | None
    translation_word_count: Decimal | None
    author: str

    @property
    def type(self) -> WorkType:
        return self.work_type

    @property
    def date(self) -> date:
        return self.entry_date

    @property
    def word_count(self) -> Decimal:
        resolved = resolve_log_word_count(self.work_type, self.check_word_count, self.translation_word_count)
        if resolved is None:
            raise ValueError(f"Log entry for case {self.case_number} has no word count")
        return resolved

    @property
    def signature(self) -> Signature:
        return build_signature(self.case_number, self.work_type, self.type_label, self.word_count)

    def describe(self) -> str:
        return (
            f"{self.entry_date.isoformat()}, {self.case_number}, {self.type_label}, "
            f"{self.word_count}, {self.author}"
        )


Entry = LedgerEntry | LogEntry


def signature(entry: Entry) -> Signature:
    return entry.signature


def resolve_log_word_count(
    work_type: WorkType,
    check_word_count: Decimal | None,
    translation_word_count: Decimal | None,
) -> Decimal | None:
    if work_type is WorkType.TRANSLATION:
        return translation_word_count
    if work_type is WorkType.CHECK:
        return check_word_count
    # Unknown labels still need a comparable count; prefer the translation column.
    return translation_word_count if translation_word_count is not None else check_word_count


def clean_number_text(text: str) -> str:
    """Strip thousands separators and any whitespace, e.g. "1, 200" -> "1200"."""
    return SEPARATOR_RE.sub("", text)


def parse_count(text: str) -> Decimal | None:
    clean = clean_number_text(text)
    if not NUMBER_TEXT_RE.match(clean):
        return None
    return Decimal(clean)


def classify_work_type(label: str, config: ReconcilerConfig = DEFAULT_CONFIG) -> WorkType:
    label = label.strip()
    if label == config.translation_label:
        return WorkType.TRANSLATION
    if label == config.check_label:
        return WorkType.CHECK
    return WorkType.UNKNOWN


def is_placeholder_case(case_number: str, config: ReconcilerConfig = DEFAULT_CONFIG) -> bool:
    clean = clean_number_text(case_number)
    return clean == "" or clean.upper() == config.placeholder_case.upper()


def infer_year(month: int, day: int, today: date, lookahead_days: int = 7) -> int:
    """
    Pick the year for a month/day that was written without one.

    The work log only ever holds recent dates, so anything that lands after
    ``today + lookahead_days`` (by day of year) belongs to last year.
    """
    anchor = today + timedelta(days=lookahead_days)
    try:
        date(LEAP_REFERENCE_YEAR, month, day)
    except ValueError as e:
        raise DateResolutionError(f"{month}/{day}", str(e)) from e

    # (month, day) ordering is day-of-year ordering within the anchor's year.
    if (month, day) <= (anchor.month, anchor.day):
        return today.year
    # anchor.year, not today.year: late December pushes the anchor into January.
    return anchor.year - 1


def resolve_date(text: str, today: date, lookahead_days: int = 7) -> date:
    """
    Turn a ``MM-DD-YY`` or ``M/D`` cell into a calendar date.

    Raises:
        DateResolutionError: If the text is neither format or names an impossible day.
    """
    value = text.strip()

    if FULL_DATE_RE.match(value):
        try:
            return datetime.strptime(value, "%m-%d-%y").date()
        except ValueError as e:
            raise DateResolutionError(text, str(e)) from e

    partial = PARTIAL_DATE_RE.match(value)
    if partial:
        month, day = int(partial.group(1)), int(partial.group(2))
        year = infer_year(month, day, today, lookahead_days=lookahead_days)
        try:
            return date(year, month, day)
        except ValueError as e:
            raise DateResolutionError(text, str(e)) from e

    raise DateResolutionError(text)


def _classify_and_log(label: str, case_number: str, date_text: str, config: ReconcilerConfig) -> WorkType:
    work_type = classify_work_type(label, config)
    if work_type is WorkType.UNKNOWN:
        logger.warning(f"Unrecognized work type {label!r} for case {case_number} ({date_text})")
    return work_type


def normalize_ledger_row(
    row: Sequence[str],
    today: date,
    config: ReconcilerConfig = DEFAULT_CONFIG,
) -> LedgerEntry | None:
    """Return a LedgerEntry, or None when the row is not an invoiced line item."""
    if len(row) < LEDGER_MIN_COLUMNS:
        return None

    row_id, case_text, type_label, date_text, count_text, rate_text = (cell.strip() for cell in row[:6])
    if not all((row_id, case_text, type_label, date_text, count_text, rate_text)):
        return None
    if is_placeholder_case(case_text, config):
        return None
    # Blank invoice templates carry partial dates such as "6/20"; only real rows have MM-DD-YY.
    if not LEDGER_DATE_RE.search(date_text):
        return None

    case_number = clean_number_text(case_text)
    word_count = parse_count(count_text)
    if word_count is None:
        logger.warning(f"Skipping ledger row {row_id}: word count {count_text!r} is not a number")
        return None
    rate = parse_count(rate_text)
    if rate is None:
        logger.warning(f"Ledger row {row_id}: rate {rate_text!r} is not a number; not rate-checked or totalled")

    return LedgerEntry(
        row_id=row_id,
        entry_date=resolve_date(date_text, today, lookahead_days=config.lookahead_days),
        case_number=case_number,
        work_type=_classify_and_log(type_label, case_number, date_text, config),
        type_label=type_label,
        word_count=word_count,
        rate=rate,
        rate_text=rate_text,
    )


def normalize_log_row(
    row: Sequence[str],
    today: date,
    config: ReconcilerConfig = DEFAULT_CONFIG,
) -> LogEntry | None:
    """Return a LogEntry, or None when the row is not a recorded day of work."""
    if len(row) < LOG_MIN_COLUMNS:
        return None

    date_text = row[0].strip()
    case_text = row[1].strip()
    type_label = row[2].strip()
    check_text = row[3].strip()
    translation_text = row[4].strip()
    author = row[6].strip()

    if not LOG_DATE_RE.match(date_text):
        return None
    if is_placeholder_case(case_text, config):
        return None
    if not type_label or not author:
        return None
    if not check_text and not translation_text:
        return None

    case_number = clean_number_text(case_text)
    check_count = parse_count(check_text) if check_text else None
    translation_count = parse_count(translation_text) if translation_text else None
    if (check_text and check_count is None) or (translation_text and translation_count is None):
        logger.warning(f"Skipping log row {date_text} {case_number}: word count is not a number")
        return None

    work_type = _classify_and_log(type_label, case_number, date_text, config)
    if resolve_log_word_count(work_type, check_count, translation_count) is None:
        logger.warning(f"Skipping log row {date_text} {case_number}: no word count for {type_label}")
        return None

    return LogEntry(
        entry_date=resolve_date(date_text, today, lookahead_days=config.lookahead_days),
        case_number=case_number,
        work_type=work_type,
        type_label=type_label,
        check_word_count=check_count,
        translation_word_count=translation_count,
        author=author,
    )


def normalize_row(
    row: Sequence[str],
    role: Role,
    today: date,
    config: ReconcilerConfig = DEFAULT_CONFIG,
) -> Entry | None:
    if role == "ledger":
        return normalize_ledger_row(row, today, config)
    if role == "log":
        return normalize_log_row(row, today, config)
    raise ValueError(f"Unknown role: {role}")


def normalize_rows(
    rows: Iterable[Sequence[str]],
    role: Role,
    today: date,
    config: ReconcilerConfig = DEFAULT_CONFIG,
) -> list[Entry]:
    entries: list[Entry] = []
    for index, row in enumerate(rows):
        entry = normalize_row(row, role, today, config)
        if entry is None:
            logger.debug(f"Skipped {role} row {index}: {list(row)}")
            continue
        entries.append(entry)
    return entries


def as_float(value: Decimal | None) -> float | None:
    if value is None:
        return None
    return float(value.quantize(Decimal("0.01")))


def format_money(value: Decimal | None) -> str:
    if value is None:
        return "n/a"
    return f"{value.quantize(Decimal('0.01')):,.2f}"
