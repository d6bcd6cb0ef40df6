"""
Row readers for tabular inputs.

Both the data and the template are tables. These helpers turn CSV text or an
Excel workbook into a list of rows, each row a list of trimmed strings:

    read_rows(text)                 CSV text (stdlib csv, quoting per RFC 4180)
    read_workbook_rows(path)        first worksheet of an .xlsx/.xlsm file
    read_rows_from_path(path)       dispatch on the file suffix

Row indexes line up with the 1-based line numbers used in error messages
(row 0 is line 1), as long as quoted fields do not span lines.
"""

from __future__ import annotations

import csv
import io
import logging
from pathlib import Path

import openpyxl

from utils.strings import normalize_newlines

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIXES = frozenset({".xlsx", ".xlsm"})

Row = list[str]


class TabularFormatError(ValueError):
    """The input could not be tokenized into rows."""

    def __init__(self, message: str, line_num: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_num = line_num


def read_rows(text: str) -> list[Row]:
    """Parse CSV text into rows of trimmed fields.

    Blank lines produce empty rows, so row positions match input lines.
    """
    reader = csv.reader(io.StringIO(normalize_newlines(text)), strict=True)
    rows: list[Row] = []
    try:
        for row in reader:
            rows.append([field.strip() for field in row])
    except csv.Error as e:
        raise TabularFormatError(f"invalid CSV: {e}", reader.line_num) from e
    return rows


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def read_workbook_rows(path: Path) -> list[Row]:
    """Read the first worksheet of an Excel workbook as rows of strings."""
    try:
        wb = openpyxl.load_workbook(str(path), read_only=True, data_only=True)
    except Exception as e:
        raise TabularFormatError(f"invalid workbook: {e}") from e
    try:
        ws = wb.worksheets[0]
        rows = [[_cell_text(v) for v in row]
                for row in ws.iter_rows(values_only=True)]
        logger.debug("Read %d rows from sheet %r of %s", len(rows), ws.title, path)
    finally:
        wb.close()
    return rows


def read_rows_from_path(path: Path, encoding: str = "utf-8-sig") -> list[Row]:
    """Read rows from a CSV or Excel file, chosen by suffix."""
    path = Path(path)
    if path.suffix.lower() in WORKBOOK_SUFFIXES:
        return read_workbook_rows(path)
    return read_rows(path.read_text(encoding=encoding))
