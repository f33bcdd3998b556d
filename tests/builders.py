from pathlib import Path
from typing import Any

from openpyxl import Workbook

TRANSLATION = "翻訳"
CHECK = "英文チェック"

LOG_HEADER = ["Date", "Case", "Type", "Check Words", "Translation Words", "Hours", "Author"]
LEDGER_HEADER = ["No.", "Case", "Type", "Date", "Words", "Rate"]


def write_workbook(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
    """Write one sheet per key, in insertion order, with the given rows."""
    workbook = Workbook()
    default = workbook.active
    for name, rows in sheets.items():
        sheet = workbook.create_sheet(title=name)
        for row in rows:
            sheet.append(row)
    workbook.remove(default)
    workbook.save(path)
    return path
