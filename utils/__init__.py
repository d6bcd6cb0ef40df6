"""Shared utilities for csv2html: configuration, formatting and strings."""

# Configuration
from utils.config import (
    Config,
    ReportConfig,
    TemplateSyntax,
    PropertyCategory,
)

# Output formatting
from utils.formatting import h_text, h_attr, format_utc, format_date

# String utilities
from utils.strings import normalize_newlines, is_blank_row, split_list

__all__ = [
    # Config
    "Config",
    "ReportConfig",
    "TemplateSyntax",
    "PropertyCategory",
    # Formatting
    "h_text",
    "h_attr",
    "format_utc",
    "format_date",
    # Strings
    "normalize_newlines",
    "is_blank_row",
    "split_list",
]
