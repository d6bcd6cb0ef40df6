"""Output formatting utilities for csv2html.

Provides reusable functions for:
- Escaping text for HTML element content and attribute values
- Formatting timestamps for the report header and footer
"""

from datetime import datetime, timezone
from typing import Optional

from markupsafe import escape


def h_text(value: str) -> str:
    """Escape text for use as HTML element content.

    Newlines and the Unicode line separator (U+2028) become ``<br>`` breaks,
    so multi-line CSV fields keep their shape.

    Examples:
        h_text("a < b") -> "a &lt; b"
        h_text("one\\ntwo") -> "one<br>\\ntwo"
    """
    escaped = str(escape(value))
    return escaped.replace("\n", "<br>\n").replace("\u2028", "<br>\n")


def h_attr(value: str) -> str:
    """Escape text for use inside a double-quoted HTML attribute.

    Examples:
        h_attr('say "hi"') -> "say &#34;hi&#34;"
    """
    return str(escape(value))


def format_utc(value: datetime) -> str:
    """Format a datetime as an ISO 8601 UTC string to the second.

    Naive datetimes are taken to be local time.

    Examples:
        format_utc(datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc))
        -> "2024-05-01T12:30:00Z"
    """
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_date(value: Optional[datetime]) -> str:
    """Format the date part of a timestamp, or "-" when there is none."""
    if value is None:
        return "-"
    return value.strftime("%Y-%m-%d")
