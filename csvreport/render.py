"""
HTML report renderer.

Combines a ``Template`` with ``CsvData``:

  1. check every property the template mentions exists in the data
  2. sort the records by the template's sort properties
  3. write the records section (contents table + one block per record)
  4. write the properties section (one summary per property) and its index

Usage::

    renderer = Renderer(template, exclude_other=False, include_hidden=False)
    result = renderer.render(data, default_title="books.csv")
    out.write(result.report)
    for w in result.warnings:
        print(f"Warning: {w}", file=sys.stderr)

Fatal problems raise before any output is produced. Warnings (unreferenced
properties, values missing from an enumeration) are collected and returned
with the finished report, each distinct warning once, in the order found.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from csvreport import __version__
from csvreport.data import CsvData, Record
from csvreport.enumeration import Enumeration
from csvreport.errors import PropertyNotInDataError, RenderWarning, WarningKind
from csvreport.template import DisplayItem, ItemKind, Template
from utils.config import MISSING_IDENTIFIER, UNTITLED_RECORD, PropertyCategory
from utils.formatting import format_date, format_utc, h_attr, h_text

logger = logging.getLogger(__name__)

GENERATOR = "csv2html"

_STYLESHEET = f"""\
body {{ font-family: Calibri, Helvetica, sans-serif; }}
p.subtitle {{ margin: 0; font-size: larger; font-weight: bold; }}
a {{ text-decoration: none; color: inherit; }}
a:hover {{ text-decoration: underline; color: blue; }}

div.toc {{ margin: 4ex 0; }}
.toc table, .properties table {{ border-collapse: collapse; }}
.toc tr:hover, .properties tr:hover {{ background: #eee; }}

div.record {{ margin: 2ex 0 4ex 0; }}
span.context {{ font-size: smaller; }}
span.groupProp {{ color: #666; }}
span.groupProp::after {{ content: ": "; }}

th {{
  white-space: nowrap;
  vertical-align: top;
  text-align: right;
  padding-right: 0.5em;
  font-weight: normal;
  color: #666;
}}

div.{PropertyCategory.OTHER} > h3::after {{ content: " (not used in records)"; color: green; }}
div.{PropertyCategory.HIDDEN} > h3::after {{ content: " (hidden)"; color: orange; }}
div.{PropertyCategory.UNEXPECTED} > h3::after {{ content: " (not in template)"; color: red; }}
p.notes {{ font-style: italic; }}

li.{PropertyCategory.OTHER} {{ color: gray; }}
li.{PropertyCategory.HIDDEN} {{ color: orange; }}
li.{PropertyCategory.UNEXPECTED} {{ color: red; }}

p.timestamp {{ margin: 4ex 0; text-align: center; font-size: smaller; color: #666; }}

@media print {{
  div.toc {{ page-break-after: always; }}
  div.record {{ page-break-after: always; }}
}}
"""


@dataclass
class RenderResult:
    """A finished report and the warnings found while producing it."""

    report: str
    warnings: list[RenderWarning] = field(default_factory=list)


@dataclass(frozen=True)
class PropertySummary:
    """A property that gets a block in the properties section."""

    property_name: str
    category: str
    enumeration: Enumeration | None = None
    notes: str = ""


def lookup_value(property_name: str, value: str,
                 enumeration: Enumeration | None) -> tuple[str, RenderWarning | None]:
    """Map a raw value through an enumeration.

    Returns the text to display and, when the enumeration has no entry for a
    non-empty value, a warning (the raw value is displayed instead).
    """
    if enumeration is None or not value:
        return value, None
    if value in enumeration:
        return enumeration[value], None
    return value, RenderWarning(WarningKind.NO_ENUMERATION, property_name, value)


def plan_property_summaries(template: Template, data: CsvData,
                            exclude_other: bool = False,
                            include_hidden: bool = False) -> dict[str, PropertySummary | None]:
    """Decide the properties section contents.

    Returns property name → summary, in template order followed by the
    unexpected properties in data order. Properties the template mentions
    but leaves out of the section (excluded _OTHER, hidden) map to None.
    Only the first mention of a property counts.
    """
    plan: dict[str, PropertySummary | None] = {}

    def add(item: DisplayItem, category: str, include: bool) -> None:
        if item.property_name in plan:
            return
        plan[item.property_name] = (
            PropertySummary(item.property_name, category, item.enumeration, item.notes)
            if include else None)

    for item in template.items:
        if item.kind is ItemKind.SCALAR:
            add(item, PropertyCategory.NORMAL, True)
        elif item.kind is ItemKind.GROUP:
            for member in item.members:
                add(member, PropertyCategory.NORMAL, True)
        elif item.kind is ItemKind.OTHER:
            add(item, PropertyCategory.OTHER, not exclude_other)
        elif item.kind is ItemKind.HIDDEN:
            add(item, PropertyCategory.HIDDEN, include_hidden)

    for name in data.property_names:
        if name not in plan:
            plan[name] = PropertySummary(name, PropertyCategory.UNEXPECTED)

    return plan


class Renderer:
    """Formats CSV data as HTML according to a template.

    ``exclude_other`` leaves _OTHER properties out of the properties section
    (they behave like _HIDE); ``include_hidden`` puts _HIDE properties into
    it (they behave like _OTHER).
    """

    def __init__(self, template: Template, exclude_other: bool = False,
                 include_hidden: bool = False) -> None:
        self.template = template
        self.exclude_other = exclude_other
        self.include_hidden = include_hidden

    def property_ids(self, data: CsvData) -> dict[str, str]:
        """Assign fragment IDs to the data's properties and check the template.

        Raises:
            PropertyNotInDataError: for the first property the template
                mentions that the data does not have
        """
        ids = {name: f"p{n}" for n, name in enumerate(data.property_names, start=1)}

        for name in self.template.referenced_properties():
            if name not in ids:
                raise PropertyNotInDataError(name)
        return ids

    def render(self, data: CsvData, default_title: str,
               timestamp: datetime | None = None,
               generated_at: datetime | None = None) -> RenderResult:
        """Produce the HTML report.

        ``default_title`` is used when the template has no _TITLE.
        ``timestamp`` (usually the data file's modification time) is shown
        in the footer when given. The records of ``data`` are sorted in
        place by the template's sort properties.
        """
        ids = self.property_ids(data)
        data.sort(self.template.sort_properties)

        writer = _ReportWriter(self, data, ids)
        for name in self.template.unused_properties(data):
            writer.warn(RenderWarning(WarningKind.UNREFERENCED_PROPERTY, name))

        writer.write_report(default_title, timestamp,
                            generated_at or datetime.now(timezone.utc))

        logger.debug("Rendered %d records with %d warnings",
                     len(data), len(writer.warnings))
        return RenderResult(writer.getvalue(), writer.warnings)


class _ReportWriter:
    """Writes one report; owned by a single ``Renderer.render`` call."""

    def __init__(self, renderer: Renderer, data: CsvData, ids: dict[str, str]):
        self.template = renderer.template
        self.exclude_other = renderer.exclude_other
        self.include_hidden = renderer.include_hidden
        self.data = data
        self.ids = ids
        self.warnings: list[RenderWarning] = []
        self._seen: set[RenderWarning] = set()
        self._parts: list[str] = []

    # ── output ────────────────────────────────────────────────────────────

    def write(self, text: str) -> None:
        self._parts.append(text)

    def getvalue(self) -> str:
        return "".join(self._parts)

    def warn(self, warning: RenderWarning | None) -> None:
        if warning is not None and warning not in self._seen:
            self._seen.add(warning)
            self.warnings.append(warning)

    # ── document ──────────────────────────────────────────────────────────

    def write_report(self, default_title: str, timestamp: datetime | None,
                     generated_at: datetime) -> None:
        t = self.template

        self._head(t.title or default_title, timestamp, generated_at)

        if t.show_records:
            if t.show_records_contents:
                self._contents()
            self._records()

        if t.show_properties:
            plan = plan_property_summaries(t, self.data, self.exclude_other,
                                           self.include_hidden)
            self._properties(plan)
            if t.show_properties_index:
                self._index(plan)

        self._footer(timestamp)

    def _head(self, title: str, timestamp: datetime | None,
              generated_at: datetime) -> None:
        self.write("<!DOCTYPE html>\n\n<!--\n")
        self.write(f"generator: {GENERATOR} {__version__}\n")
        self.write(f"generated: {format_utc(generated_at)}\n")
        if timestamp is not None:
            self.write(f"timestamp: {format_utc(timestamp)}\n")
        self.write("-->\n\n<html>\n<head>\n<meta charset=\"utf-8\">\n")
        self.write(f"<title>{h_text(title)}</title>\n")
        self.write(f"<style>\n{_STYLESHEET}</style>\n</head>\n\n<body>\n\n")
        self.write(f"<header>\n<h1>{h_text(title)}</h1>\n")
        if self.template.subtitle:
            self.write(f"<p class=\"subtitle\">{h_text(self.template.subtitle)}</p>\n")
        self.write("</header>\n\n")

    def _footer(self, timestamp: datetime | None) -> None:
        self.write("<footer>\n")
        if timestamp is not None:
            self.write(f"<p class=\"timestamp\">{h_text(format_date(timestamp))}</p>\n")
        self.write("</footer>\n</body>\n</html>\n")

    # ── records section ───────────────────────────────────────────────────

    def _identity_cells(self, record: Record) -> str:
        cells = []
        for name in self.template.identifier_properties:
            value = record[name]
            text = h_text(value) if value else MISSING_IDENTIFIER
            if self.template.show_records:
                text = f"<a href=\"#{record.identifier}\">{text}</a>"
            cells.append(f"<th>{text}</th>")
        return "".join(cells)

    def _contents(self) -> None:
        self.write("<div class=\"toc\">\n<h2>Contents</h2>\n<table>\n")
        for record in self.data:
            self.write(f"<tr>{self._identity_cells(record)}</tr>\n")
        self.write("</table>\n</div>\n\n")

    def _records(self) -> None:
        self.write("<div class=\"records\">\n<h2>Records</h2>\n\n")
        for record in self.data:
            self._record(record)
        self.write("</div>\n\n")

    def _record(self, record: Record) -> None:
        self.write(f"<div class=\"record\" id=\"{record.identifier}\">\n")
        self._record_heading(record)

        self.write("<table>\n")
        for item in self.template.items:
            if item.kind is ItemKind.SCALAR:
                self._record_scalar(item, record)
            elif item.kind is ItemKind.GROUP:
                self._record_group(item, record)
            elif item.kind in (ItemKind.OTHER, ItemKind.HIDDEN):
                pass  # properties section only
        self.write("</table>\n</div>\n\n")

    def _record_heading(self, record: Record) -> None:
        *context, main = self.template.identifier_properties
        parts = []
        for name in context:
            if record[name]:
                parts.append(f"<span class=\"context\">{h_text(record[name])}</span><br>\n")
        if record[main]:
            parts.append(h_text(record[main]))
        self.write(f"<h3>{''.join(parts) or UNTITLED_RECORD}</h3>\n")

    def _label(self, item: DisplayItem) -> str:
        text = h_text(item.display_text)
        if self.template.show_properties:
            return f"<a href=\"#{self.ids[item.property_name]}\">{text}</a>"
        return text

    def _value_cell(self, tag: str, property_name: str, value: str,
                    enumeration: Enumeration | None) -> str:
        shown, warning = lookup_value(property_name, value, enumeration)
        self.warn(warning)
        attrs = ""
        if enumeration is not None and value:
            attrs = f" title=\"{h_attr(value)}\""
        return f"<{tag}{attrs}>{h_text(shown)}</{tag}>"

    def _record_scalar(self, item: DisplayItem, record: Record) -> None:
        value = record[item.property_name]
        if not value:
            return
        cell = self._value_cell("td", item.property_name, value, item.enumeration)
        self.write(f"<tr><th>{self._label(item)}</th>{cell}</tr>\n")

    def _record_group(self, item: DisplayItem, record: Record) -> None:
        members = [m for m in item.members if record[m.property_name]]
        if not members:
            return

        self.write(f"<tr><th>{h_text(item.display_text)}</th>\n<td class=\"group\">\n")
        for member in members:
            if member.display_text:
                self.write(f"<span class=\"groupProp\">{self._label(member)}</span>")
            cell = self._value_cell("span", member.property_name,
                                    record[member.property_name], member.enumeration)
            self.write(f"{cell}<br>\n")
        self.write("</td>\n</tr>\n")

    # ── properties section ────────────────────────────────────────────────

    def _properties(self, plan: dict[str, PropertySummary | None]) -> None:
        self.write("<div class=\"properties\">\n<h2>Properties</h2>\n\n")
        for summary in plan.values():
            if summary is not None:
                self._property_summary(summary)
        self.write("</div>\n\n")

    def _property_summary(self, summary: PropertySummary) -> None:
        name = summary.property_name
        self.write(f"<div class=\"property {summary.category}\">\n"
                   f"<h3 id=\"{h_attr(self.ids[name])}\">{h_text(name)}</h3>\n")
        if summary.notes:
            self.write(f"<p class=\"notes\">{h_text(summary.notes)}</p>\n")

        self.write("<table>\n")
        for record in self.data:
            cell = self._value_cell("td", name, record[name], summary.enumeration)
            self.write(f"<tr>{self._identity_cells(record)}{cell}</tr>\n")
        self.write("</table>\n</div>\n\n")

    def _index(self, plan: dict[str, PropertySummary | None]) -> None:
        self.write("<div class=\"index\">\n<h2>Index</h2>\n<ol>\n")
        for name in sorted(n for n, s in plan.items() if s is not None):
            summary = plan[name]
            self.write(f"<li class=\"{summary.category}\">"
                       f"<a href=\"#{h_attr(self.ids[name])}\">{h_text(name)}</a></li>\n")
        self.write("</ol>\n</div>\n\n")


def render(data: CsvData, template: Template, default_title: str,
           timestamp: datetime | None = None, exclude_other: bool = False,
           include_hidden: bool = False) -> RenderResult:
    """Render ``data`` with ``template``; see ``Renderer.render``."""
    renderer = Renderer(template, exclude_other=exclude_other,
                        include_hidden=include_hidden)
    return renderer.render(data, default_title, timestamp=timestamp)
