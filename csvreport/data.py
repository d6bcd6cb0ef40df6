"""
Tabular data model: property names from the header row, records from the rest.

Rules enforced by ``CsvData.load``:
  - every header field is a non-blank, unique property name (trailing blank
    header fields, as left by spreadsheet exports, are dropped)
  - a record row may be shorter than the header (missing values are "")
  - a record row may be longer only if the extra fields are blank
  - rows with no non-blank values are ignored
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from csvreport.errors import DataError, HeaderError, RowFieldCountError
from csvreport.tabular import TabularFormatError, read_rows, read_rows_from_path
from utils.strings import is_blank_row

logger = logging.getLogger(__name__)


class Record:
    """One row of the data: property name → value.

    ``identifier`` is derived from the row's line number, so it is stable and
    unique within one data set but says nothing about the content.
    """

    __slots__ = ("_line_num", "_fields")

    def __init__(self, line_num: int, fields: dict[str, str] | None = None):
        self._line_num = line_num
        self._fields: dict[str, str] = dict(fields or {})

    def __getitem__(self, name: str) -> str:
        return self._fields.get(name, "")

    def get(self, name: str, default: str = "") -> str:
        return self._fields.get(name, default)

    @property
    def line_num(self) -> int:
        return self._line_num

    @property
    def identifier(self) -> str:
        return f"r{self._line_num}"

    def to_dict(self) -> dict[str, str]:
        return dict(self._fields)

    def __repr__(self) -> str:
        return f"Record(line={self._line_num}, fields={self._fields!r})"


def _property_names(header: Sequence[str]) -> list[str]:
    names: list[str] = []
    for column, name in enumerate(header, start=1):
        if name:
            names.append(name)
            continue
        if is_blank_row(header[column:]):
            break  # trailing blank columns
        raise HeaderError(f"column {column}: blank property name", column)

    if not names:
        raise HeaderError("no property names in header row")

    seen: set[str] = set()
    for column, name in enumerate(names, start=1):
        if name in seen:
            raise HeaderError(f"duplicate property name: {name}", column)
        seen.add(name)
    return names


class CsvData:
    """Property names and records loaded from a table.

    Use ``CsvData.load(rows)`` for already-tokenized rows, or the
    ``from_text`` / ``from_path`` helpers to read CSV text or files.
    """

    def __init__(self, property_names: list[str], records: list[Record]):
        self._property_names = list(property_names)
        self._records = list(records)

    # ── construction ──────────────────────────────────────────────────────

    @classmethod
    def load(cls, rows: Iterable[Sequence[str]]) -> "CsvData":
        """Build from rows of trimmed string fields; the first row is the header."""
        it = iter(rows)
        header = next(it, None)
        if header is None:
            raise HeaderError("empty data: no header row")

        names = _property_names([f.strip() for f in header])

        records: list[Record] = []
        for line_num, row in enumerate(it, start=2):
            fields = [f.strip() for f in row]

            for index in range(len(names), len(fields)):
                if fields[index]:
                    raise RowFieldCountError(
                        f"column {index + 1}: more fields than properties",
                        line_num)

            values = dict(zip(names, fields))
            if is_blank_row(values.values()):
                continue
            for name in names[len(values):]:
                values[name] = ""
            records.append(Record(line_num, values))

        logger.debug("Loaded %d properties and %d records",
                     len(names), len(records))
        return cls(names, records)

    @classmethod
    def from_text(cls, text: str) -> "CsvData":
        """Parse CSV text."""
        try:
            rows = read_rows(text)
        except TabularFormatError as e:
            raise DataError(e.message, e.line_num) from e
        return cls.load(rows)

    @classmethod
    def from_path(cls, path: Path, encoding: str = "utf-8-sig") -> "CsvData":
        """Read a CSV or Excel file."""
        try:
            rows = read_rows_from_path(path, encoding=encoding)
        except TabularFormatError as e:
            raise DataError(e.message, e.line_num) from e
        return cls.load(rows)

    # ── access ────────────────────────────────────────────────────────────

    @property
    def property_names(self) -> list[str]:
        return list(self._property_names)

    @property
    def records(self) -> list[Record]:
        return list(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def has_property(self, name: str) -> bool:
        return name in self._property_names

    # ── ordering ──────────────────────────────────────────────────────────

    def sort(self, sort_properties: Sequence[str]) -> None:
        """Stable in-place sort of the records by the given properties.

        For each property, records with a value come before records without
        one; values are compared as plain strings (code point order). Records
        equal on every property keep their relative order.
        """
        if not sort_properties:
            return

        keys = list(sort_properties)

        def sort_key(record: Record) -> tuple:
            return tuple((0, record[k]) if record[k] else (1, "") for k in keys)

        self._records.sort(key=sort_key)
        logger.debug("Sorted %d records by %s", len(self._records), keys)
