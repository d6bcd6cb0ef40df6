"""String processing utilities for csv2html."""

from typing import Iterable, List


def normalize_newlines(text: str) -> str:
    """Convert CR-LF and lone CR line endings to LF.

    Spreadsheet exports mix line endings; the CSV reader is given LF only.
    """
    return text.replace("\r\n", "\n").replace("\r", "\n")


def is_blank_row(fields: Iterable[str]) -> bool:
    """True if every field is empty after trimming (including no fields)."""
    return all(not f.strip() for f in fields)


def split_list(value: str, separator: str = ";") -> List[str]:
    """Split a separated list, trimming items and dropping empty ones.

    Example:
        split_list(" records ; index ;") -> ["records", "index"]
    """
    return [item.strip() for item in value.split(separator) if item.strip()]
