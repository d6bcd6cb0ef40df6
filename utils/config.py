"""Configuration management utilities for csv2html.

Provides:
- The ``Config`` base class (settings from a dict or JSON file, checked
  against the defaults)
- ``ReportConfig``: render and CLI options, from defaults, JSON or environment
- The constants table for the template language and the report's CSS labels
"""

from pathlib import Path
from typing import Dict, Any
import json
import os as _os


# ── Template language constants ──────────────────────────────────────────────
# Keywords are matched case-sensitively against the trimmed first field.


class TemplateSyntax:
    """Markers, command keywords and _SHOW tokens of the template language."""

    COMMENT_MARKER = "#"
    COMMAND_MARKER = "_"

    # Columns: display text, property name, enumeration, notes
    MAX_FIELDS = 4

    TITLE = "_TITLE"
    SUBTITLE = "_SUBTITLE"
    SORT = "_SORT"
    IDENTIFIER = "_IDENTIFIER"
    OTHER = "_OTHER"
    HIDE = "_HIDE"
    SHOW = "_SHOW"

    COMMANDS = frozenset({TITLE, SUBTITLE, SORT, IDENTIFIER, OTHER, HIDE, SHOW})

    # Comment rows that look like the retired "#COMMAND" syntax
    LEGACY_COMMANDS = frozenset({
        "#TITLE", "#SUBTITLE", "#SORT", "#IDENTIFIER", "#UNUSED",
    })

    SHOW_RECORDS = "records"
    SHOW_CONTENTS = "contents"
    SHOW_PROPERTIES = "properties"
    SHOW_INDEX = "index"
    SHOW_ALL = "all"

    SHOW_VALUES = frozenset({
        SHOW_RECORDS, SHOW_CONTENTS, SHOW_PROPERTIES, SHOW_INDEX, SHOW_ALL,
    })

    ENUM_SEPARATOR = ";"
    ENUM_ASSIGN = "="


class PropertyCategory:
    """CSS classes used to tag property summaries and index entries."""

    NORMAL = "normal-property"
    OTHER = "other-property"
    HIDDEN = "hidden-property"
    UNEXPECTED = "unexpected-property"


UNTITLED_RECORD = "(Untitled)"
MISSING_IDENTIFIER = "&mdash;"


# ── Config classes ───────────────────────────────────────────────────────────


class Config:
    """Settings held as plain attributes, with defaults set in ``__init__``.

    Subclasses define every setting in ``__init__``; ``from_dict`` and
    ``load_json`` only override those, so a misspelt key is an error rather
    than a new attribute nobody reads.
    """

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    @classmethod
    def from_dict(cls, data: Any) -> "Config":
        """Build a config from the defaults plus the settings in ``data``.

        Raises:
            ValueError: ``data`` is not a mapping, names an unknown setting,
                or gives a value of the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"config must be a JSON object, not {type(data).__name__}")

        config = cls()
        defaults = config.to_dict()
        for key, value in data.items():
            if key not in defaults:
                raise ValueError(f"unknown config setting: {key}")
            expected = type(defaults[key])
            if not isinstance(value, expected):
                raise ValueError(
                    f"config setting {key} must be {expected.__name__}, "
                    f"not {type(value).__name__}")
            setattr(config, key, value)
        return config

    @classmethod
    def load_json(cls, path: Path) -> "Config":
        """Read settings from a JSON object file (see ``from_dict``).

        Raises:
            OSError: the file cannot be read
            ValueError: invalid JSON, or settings rejected by ``from_dict``
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)


def _env_flag(name: str, default: bool) -> bool:
    raw = _os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class ReportConfig(Config):
    """Options controlling how a report is produced.

    Environment variables (each overrides the current value when set):
        CSV2HTML_EXCLUDE_OTHER: treat _OTHER properties like _HIDE (default: false)
        CSV2HTML_INCLUDE_HIDDEN: treat _HIDE properties like _OTHER (default: false)
        CSV2HTML_QUIET: do not print warnings (default: false)
        CSV2HTML_ENCODING: encoding of the CSV inputs (default: utf-8-sig)
    """

    def __init__(self) -> None:
        self.exclude_other = False
        self.include_hidden = False
        self.quiet = False
        self.encoding = "utf-8-sig"
        self.output_encoding = "utf-8"

    def apply_env(self) -> "ReportConfig":
        """Overlay any CSV2HTML_* environment variables onto this config."""
        self.exclude_other = _env_flag("CSV2HTML_EXCLUDE_OTHER", self.exclude_other)
        self.include_hidden = _env_flag("CSV2HTML_INCLUDE_HIDDEN", self.include_hidden)
        self.quiet = _env_flag("CSV2HTML_QUIET", self.quiet)
        self.encoding = _os.getenv("CSV2HTML_ENCODING", self.encoding)
        return self

    @classmethod
    def from_env(cls) -> "ReportConfig":
        """Create a ReportConfig from defaults plus environment variables."""
        return cls().apply_env()
