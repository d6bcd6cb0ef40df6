"""csvreport: format CSV records as an HTML report driven by a CSV template.

    data = CsvData.from_path(Path("books.csv"))
    template = Template.from_path(Path("template.csv"))   # or Template.default(data)
    result = render(data, template, default_title="books.csv")
"""

__version__ = "2.0.0"

from csvreport.data import CsvData, Record
from csvreport.enumeration import parse_enumeration
from csvreport.errors import (
    Csv2HtmlError,
    DataError,
    HeaderError,
    RowFieldCountError,
    TemplateError,
    TooManyFieldsError,
    UnknownCommandError,
    UnknownShowValueError,
    DuplicateSortKeyError,
    NoIdentifierError,
    EnumerationWithoutPropertyError,
    EnumerationError,
    MalformedEnumerationError,
    DuplicateEnumerationKeyError,
    PropertyNotInDataError,
    RenderWarning,
    WarningKind,
)
from csvreport.template import DisplayItem, ItemKind, Template
from csvreport.render import Renderer, RenderResult, render

__all__ = [
    "__version__",
    # Data
    "CsvData",
    "Record",
    # Template
    "DisplayItem",
    "ItemKind",
    "Template",
    "parse_enumeration",
    # Rendering
    "Renderer",
    "RenderResult",
    "render",
    # Errors and warnings
    "Csv2HtmlError",
    "DataError",
    "HeaderError",
    "RowFieldCountError",
    "TemplateError",
    "TooManyFieldsError",
    "UnknownCommandError",
    "UnknownShowValueError",
    "DuplicateSortKeyError",
    "NoIdentifierError",
    "EnumerationWithoutPropertyError",
    "EnumerationError",
    "MalformedEnumerationError",
    "DuplicateEnumerationKeyError",
    "PropertyNotInDataError",
    "RenderWarning",
    "WarningKind",
]
