"""
Report templates: which properties to show, how, and in what order.

A template is itself a table with four columns::

    display text, property name, enumeration, notes

The first row is a header and is ignored. Every other row is one of:

    #...                  comment (ignored)
    _COMMAND, param       command (see below)
    text, property        a property shown in each record
    text                  start of a group; following rows are its members
    (blank row)           end of the current group

Commands::

    _TITLE, text          report title
    _SUBTITLE, text       report subtitle
    _SORT, property       sort key (repeatable, applied in order)
    _IDENTIFIER, property identifier key (repeatable)
    _OTHER, property      shown in the properties section only
    _HIDE, property       not shown (unless hidden properties are included)
    _SHOW, a;b;...        sections to show: records, contents, properties,
                          index, all

Usage::

    template = Template.from_path(Path("template.csv"))
    template = Template.default(data)     # when there is no template file
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Union

from csvreport.data import CsvData
from csvreport.enumeration import Enumeration, parse_enumeration
from csvreport.errors import (
    DuplicateSortKeyError,
    EnumerationWithoutPropertyError,
    NoIdentifierError,
    TemplateError,
    TooManyFieldsError,
    UnknownCommandError,
    UnknownShowValueError,
)
from csvreport.tabular import TabularFormatError, read_rows, read_rows_from_path
from utils.config import TemplateSyntax
from utils.strings import split_list

logger = logging.getLogger(__name__)


# ── Display items ────────────────────────────────────────────────────────────


class ItemKind(str, Enum):
    SCALAR = "scalar"
    GROUP = "group"
    OTHER = "other"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class DisplayItem:
    """One entry in a template's item list.

    ``kind`` decides which fields are meaningful:

    - SCALAR: property_name, display_text, enumeration, notes
    - GROUP: display_text, members (SCALAR items)
    - OTHER / HIDDEN: property_name, enumeration, notes
    """

    kind: ItemKind
    property_name: str = ""
    display_text: str = ""
    enumeration: Enumeration | None = field(default=None, hash=False)
    notes: str = ""
    members: tuple[DisplayItem, ...] = ()

    @classmethod
    def scalar(cls, property_name: str, display_text: str,
               enumeration: Enumeration | None = None, notes: str = "") -> DisplayItem:
        return cls(ItemKind.SCALAR, property_name, display_text, enumeration, notes)

    @classmethod
    def group(cls, display_text: str, members: Iterable[DisplayItem]) -> DisplayItem:
        return cls(ItemKind.GROUP, display_text=display_text, members=tuple(members))

    @classmethod
    def other(cls, property_name: str, enumeration: Enumeration | None = None,
              notes: str = "") -> DisplayItem:
        return cls(ItemKind.OTHER, property_name, enumeration=enumeration, notes=notes)

    @classmethod
    def hidden(cls, property_name: str, enumeration: Enumeration | None = None,
               notes: str = "") -> DisplayItem:
        return cls(ItemKind.HIDDEN, property_name, enumeration=enumeration, notes=notes)

    def property_names(self) -> list[str]:
        """Names of the properties this item refers to."""
        if self.kind is ItemKind.GROUP:
            return [m.property_name for m in self.members]
        return [self.property_name]


# ── Parser state ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Idle:
    """No group is open."""


@dataclass(frozen=True)
class InGroup:
    """A group has been started and is collecting members."""

    label: str
    members: tuple[DisplayItem, ...] = ()

    def add(self, item: DisplayItem) -> InGroup:
        return InGroup(self.label, self.members + (item,))

    def close(self) -> DisplayItem:
        return DisplayItem.group(self.label, self.members)


ParserState = Union[Idle, InGroup]

IDLE = Idle()


class TemplateRow(NamedTuple):
    line_num: int
    display_text: str
    property_name: str
    enumeration: str
    notes: str

    @classmethod
    def from_fields(cls, line_num: int, fields: Sequence[str]) -> TemplateRow:
        if len(fields) > TemplateSyntax.MAX_FIELDS:
            raise TooManyFieldsError("too many fields in row", line_num)
        values = [f.strip() for f in fields]
        values += [""] * (TemplateSyntax.MAX_FIELDS - len(values))
        return cls(line_num, *values)

    @property
    def is_comment(self) -> bool:
        return self.display_text.startswith(TemplateSyntax.COMMENT_MARKER)

    @property
    def is_command(self) -> bool:
        return self.display_text.startswith(TemplateSyntax.COMMAND_MARKER)

    @property
    def is_blank(self) -> bool:
        # Notes alone do not make a row significant
        return not (self.display_text or self.property_name or self.enumeration)


# ── Template ─────────────────────────────────────────────────────────────────


class Template:
    """Display specification produced from a template table.

    Attributes:
        title, subtitle: report headings ("" when not set)
        sort_properties: properties used to order the records
        identifier_properties: properties used to label a record (never empty)
        items: ordered DisplayItem list
        show_records, show_records_contents, show_properties,
        show_properties_index: which sections the report contains
    """

    def __init__(self) -> None:
        self.title = ""
        self.subtitle = ""
        self.sort_properties: list[str] = []
        self.identifier_properties: list[str] = []
        self.items: list[DisplayItem] = []

        self.show_records = True
        self.show_records_contents = True
        self.show_properties = True
        self.show_properties_index = True

    # ── construction ──────────────────────────────────────────────────────

    @classmethod
    def default(cls, data: CsvData) -> Template:
        """Template used when none is supplied.

        Every property is shown, in data order, labelled with its own name;
        the first property identifies the record and there is no sorting.
        """
        template = cls()
        for name in data.property_names:
            template.items.append(DisplayItem.scalar(name, name))
        template.identifier_properties = data.property_names[:1]
        if not template.identifier_properties:
            raise NoIdentifierError("no identifier property: data has no properties")
        return template

    @classmethod
    def load(cls, rows: Iterable[Sequence[str]]) -> Template:
        """Parse template rows (the first row is a header and is skipped)."""
        parser = TemplateParser()
        state: ParserState = IDLE
        line_num = 1

        for line_num, fields in enumerate(rows, start=1):
            if line_num == 1:
                continue
            state = parser.step(state, TemplateRow.from_fields(line_num, fields))

        return parser.finish(state, line_num)

    @classmethod
    def from_text(cls, text: str) -> Template:
        try:
            rows = read_rows(text)
        except TabularFormatError as e:
            raise TemplateError(e.message, e.line_num) from e
        return cls.load(rows)

    @classmethod
    def from_path(cls, path: Path, encoding: str = "utf-8-sig") -> Template:
        try:
            rows = read_rows_from_path(path, encoding=encoding)
        except TabularFormatError as e:
            raise TemplateError(e.message, e.line_num) from e
        return cls.load(rows)

    # ── queries ───────────────────────────────────────────────────────────

    def item_properties(self) -> list[str]:
        """Property names referenced by the items, in template order."""
        names: list[str] = []
        for item in self.items:
            names.extend(item.property_names())
        return names

    def referenced_properties(self) -> list[str]:
        """Every property name the template mentions, without repeats."""
        names = self.item_properties() + self.sort_properties + self.identifier_properties
        return list(dict.fromkeys(names))

    def unused_properties(self, data: CsvData) -> list[str]:
        """Properties in the data that no template item refers to (data order)."""
        used = set(self.item_properties())
        return [name for name in data.property_names if name not in used]


# ── Parser ───────────────────────────────────────────────────────────────────


class TemplateParser:
    """Row-at-a-time template parser.

    ``step`` consumes one row and returns the next group state; completed
    items and command effects accumulate on ``self.template``. ``finish``
    closes any open group and fills in the default identifier.
    """

    def __init__(self) -> None:
        self.template = Template()

    def step(self, state: ParserState, row: TemplateRow) -> ParserState:
        if row.is_comment:
            if row.display_text in TemplateSyntax.LEGACY_COMMANDS:
                logger.warning("line %d: %s is a comment; commands now start with "
                               "'_' (e.g. _%s)", row.line_num, row.display_text,
                               row.display_text[1:])
            return state

        if row.is_command:
            state = self._close_group(state)
            self._command(row)
            return state

        if row.is_blank:
            return self._close_group(state)

        if not row.property_name:
            if not row.display_text:
                raise EnumerationWithoutPropertyError(
                    "enumeration without property", row.line_num)
            # Start of a group (closing any group already open)
            self._close_group(state)
            return InGroup(row.display_text)

        item = DisplayItem.scalar(row.property_name, row.display_text,
                                  parse_enumeration(row.enumeration, row.line_num),
                                  row.notes)
        if isinstance(state, InGroup):
            return state.add(item)
        self.template.items.append(item)
        return state

    def finish(self, state: ParserState, line_num: int) -> Template:
        self._close_group(state)

        template = self.template
        if not template.identifier_properties:
            name = _first_identifier_candidate(template.items)
            if name is None:
                raise NoIdentifierError("no identifier property", line_num)
            template.identifier_properties.append(name)

        logger.debug("Parsed template: %d items, sort=%s, identifier=%s",
                     len(template.items), template.sort_properties,
                     template.identifier_properties)
        return template

    # ── helpers ───────────────────────────────────────────────────────────

    def _close_group(self, state: ParserState) -> ParserState:
        if isinstance(state, InGroup):
            self.template.items.append(state.close())
        return IDLE

    def _command(self, row: TemplateRow) -> None:
        template = self.template
        command = row.display_text
        param = row.property_name

        if command not in TemplateSyntax.COMMANDS:
            raise UnknownCommandError(f"unknown command: {command}", row.line_num)

        if command == TemplateSyntax.TITLE:
            template.title = param
        elif command == TemplateSyntax.SUBTITLE:
            template.subtitle = param
        elif command == TemplateSyntax.SHOW:
            self._show(param, row.line_num)
        else:
            if not param:
                raise TemplateError(f"{command}: missing property name", row.line_num)

            if command == TemplateSyntax.SORT:
                if param in template.sort_properties:
                    raise DuplicateSortKeyError(
                        f"duplicate sort property: {param}", row.line_num)
                template.sort_properties.append(param)
            elif command == TemplateSyntax.IDENTIFIER:
                template.identifier_properties.append(param)
            elif command == TemplateSyntax.OTHER:
                template.items.append(DisplayItem.other(
                    param, parse_enumeration(row.enumeration, row.line_num), row.notes))
            elif command == TemplateSyntax.HIDE:
                template.items.append(DisplayItem.hidden(
                    param, parse_enumeration(row.enumeration, row.line_num), row.notes))

    def _show(self, param: str, line_num: int) -> None:
        values = split_list(param, TemplateSyntax.ENUM_SEPARATOR)
        if not values:
            raise UnknownShowValueError(f"{TemplateSyntax.SHOW}: no sections given",
                                        line_num)
        for value in values:
            if value not in TemplateSyntax.SHOW_VALUES:
                raise UnknownShowValueError(
                    f"unknown value in {TemplateSyntax.SHOW}: {value}", line_num)

        flags = {
            TemplateSyntax.SHOW_RECORDS: False,
            TemplateSyntax.SHOW_CONTENTS: False,
            TemplateSyntax.SHOW_PROPERTIES: False,
            TemplateSyntax.SHOW_INDEX: False,
        }
        for value in values:
            if value == TemplateSyntax.SHOW_ALL:
                flags = dict.fromkeys(flags, True)
            else:
                flags[value] = True

        template = self.template
        template.show_records = flags[TemplateSyntax.SHOW_RECORDS]
        template.show_records_contents = flags[TemplateSyntax.SHOW_CONTENTS]
        template.show_properties = flags[TemplateSyntax.SHOW_PROPERTIES]
        template.show_properties_index = flags[TemplateSyntax.SHOW_INDEX]


def _first_identifier_candidate(items: Iterable[DisplayItem]) -> str | None:
    for item in items:
        if item.kind in (ItemKind.SCALAR, ItemKind.HIDDEN):
            return item.property_name
        if item.kind is ItemKind.GROUP and item.members:
            return item.members[0].property_name
    return None
