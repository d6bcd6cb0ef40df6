"""Parser for enumeration strings such as ``hc=Hard cover;pb=Paperback``."""

from __future__ import annotations

from csvreport.errors import DuplicateEnumerationKeyError, MalformedEnumerationError
from utils.config import TemplateSyntax
from utils.strings import split_list

Enumeration = dict[str, str]


def parse_enumeration(text: str, line_num: int | None = None) -> Enumeration | None:
    """Parse ``key=label`` pairs separated by semicolons.

    Keys and labels are trimmed and empty pairs are skipped. Returns None
    (not an empty dict) when there are no pairs at all.

    Raises:
        MalformedEnumerationError: a pair has no "=" or an empty key
        DuplicateEnumerationKeyError: a key appears more than once
    """
    result: Enumeration = {}

    for pair in split_list(text or "", TemplateSyntax.ENUM_SEPARATOR):
        key, sep, label = pair.partition(TemplateSyntax.ENUM_ASSIGN)
        key = key.strip()
        if not sep or not key:
            raise MalformedEnumerationError(
                f"bad enumeration, missing key=value: {pair}", line_num)
        if key in result:
            raise DuplicateEnumerationKeyError(
                f"duplicate key in enumeration: {key}", line_num)
        result[key] = label.strip()

    return result or None
