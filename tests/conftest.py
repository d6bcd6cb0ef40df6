"""
Pytest fixtures for csv2html tests.

Provides sample data and template text (a small book catalogue), the same
content written to temporary CSV files, and an Excel copy of the data built
with openpyxl.
"""

import sys
from pathlib import Path

import openpyxl
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from csvreport.tabular import read_rows  # noqa: E402


BOOKS_CSV = """\
title,subtitle,author_givenname,author_familyname,publisher_name,format,isbn,dimensions,internal_price
Moby Dick,,Herman,Melville,Harper,hc,978-0-14,20x13,10
Emma,A Novel,Jane,Austen,,pb,978-0-19,,8
,,,,,,,,
Dracula,,,,Constable,ebook,,,
"""

BOOKS_TEMPLATE = """\
Label,Property,Enumeration,Notes
# An example template
_TITLE,My Books
_SUBTITLE,An example

_SORT,title
_SORT,subtitle
_IDENTIFIER,title

Book title,title
Subtitle,subtitle

Author,,,Start of a group
Given name,author_givenname
Family name,author_familyname

Publisher,publisher_name
Format,format,hc=Hard cover;pb=Paperback
_OTHER,isbn,,International Standard Book Number
_OTHER,dimensions
_HIDE,internal_price
"""


# ── Helpers ───────────────────────────────────────────────────────────────────

def _create_workbook(path: Path, text: str) -> Path:
    """Write CSV text into the first sheet of a new .xlsx workbook."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Books"
    for row in read_rows(text):
        ws.append([value if value else None for value in row])
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(path))
    return path


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def books_csv():
    return BOOKS_CSV


@pytest.fixture
def books_template():
    return BOOKS_TEMPLATE


@pytest.fixture
def books_csv_path(tmp_path):
    path = tmp_path / "books.csv"
    path.write_text(BOOKS_CSV, encoding="utf-8")
    return path


@pytest.fixture
def books_template_path(tmp_path):
    path = tmp_path / "template.csv"
    path.write_text(BOOKS_TEMPLATE, encoding="utf-8")
    return path


@pytest.fixture
def books_xlsx_path(tmp_path):
    return _create_workbook(tmp_path / "books.xlsx", BOOKS_CSV)
