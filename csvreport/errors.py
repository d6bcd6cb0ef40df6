"""
Errors and warnings raised while loading data, parsing templates and rendering.

Fatal errors derive from ``Csv2HtmlError``:

    DataError                 problems in the CSV data (header, field counts)
    TemplateError             problems in the template (commands, enumerations)
    PropertyNotInDataError    template refers to a property the data lacks

Non-fatal problems are ``RenderWarning`` values returned by the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Csv2HtmlError(Exception):
    """Base class for all csv2html errors.

    ``line_num`` is the 1-based row in the input that caused the problem
    (the header row is line 1), or None when it cannot be identified.
    """

    def __init__(self, message: str, line_num: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line_num = line_num

    def __str__(self) -> str:
        if self.line_num is not None:
            return f"line {self.line_num}: {self.message}"
        return self.message


# ── Data errors ──────────────────────────────────────────────────────────────


class DataError(Csv2HtmlError):
    """The CSV data is not valid."""


class HeaderError(DataError):
    """Blank, missing or duplicate property name in the header row."""

    def __init__(self, message: str, column: int | None = None) -> None:
        super().__init__(message, 1)
        self.column = column


class RowFieldCountError(DataError):
    """A record row has non-blank fields beyond the named properties."""


# ── Template errors ──────────────────────────────────────────────────────────


class TemplateError(Csv2HtmlError):
    """The template is not valid."""


class TooManyFieldsError(TemplateError):
    pass


class UnknownCommandError(TemplateError):
    pass


class UnknownShowValueError(TemplateError):
    pass


class DuplicateSortKeyError(TemplateError):
    pass


class NoIdentifierError(TemplateError):
    pass


class EnumerationWithoutPropertyError(TemplateError):
    pass


class EnumerationError(TemplateError):
    """An enumeration string could not be parsed."""


class MalformedEnumerationError(EnumerationError):
    pass


class DuplicateEnumerationKeyError(EnumerationError):
    pass


# ── Render errors ────────────────────────────────────────────────────────────


class PropertyNotInDataError(Csv2HtmlError):
    """The template refers to a property that is not in the data."""

    def __init__(self, property_name: str) -> None:
        super().__init__(
            f"property from template is not in the data: {property_name}")
        self.property_name = property_name


# ── Warnings ─────────────────────────────────────────────────────────────────


class WarningKind(str, Enum):
    UNREFERENCED_PROPERTY = "unreferenced_property"
    NO_ENUMERATION = "no_enumeration"


@dataclass(frozen=True)
class RenderWarning:
    """A non-fatal problem found while rendering."""

    kind: WarningKind
    property_name: str
    value: str = ""

    def __str__(self) -> str:
        if self.kind is WarningKind.UNREFERENCED_PROPERTY:
            return f"property in the data is not in the template: {self.property_name}"
        return (f'property "{self.property_name}": '
                f'no enumeration for value: "{self.value}"')
