#!/usr/bin/env python3
"""
csv2html — format CSV records as an HTML report.

Usage:
    python csv2html.py data.csv                          # default template, to stdout
    python csv2html.py -t template.csv -o out.html data.csv
    python csv2html.py -t template.csv --include-hidden data.csv
    python csv2html.py -t template.csv --exclude-other data.xlsx
    python csv2html.py --config report.json data.csv     # options from JSON

Warnings (properties missing from the template, values missing from an
enumeration) go to stderr unless --quiet. Exit status is 0 on success, 1 if
the data or template is invalid, 2 for usage errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from csvreport import (
    Csv2HtmlError,
    CsvData,
    DataError,
    Renderer,
    Template,
    __version__,
)
from utils.config import ReportConfig

logger = logging.getLogger("csv2html")

PROG = "csv2html"


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Pretty print CSV data as HTML, using an optional CSV template.",
    )
    parser.add_argument("data", type=Path, help="CSV (or .xlsx) data file")
    parser.add_argument("-t", "--template", type=Path, metavar="FILE",
                        help="template file (default: show every property)")
    parser.add_argument("-o", "--output", type=Path, metavar="FILE",
                        help="output file (default: stdout)")
    parser.add_argument("-e", "--exclude-other", action="store_true",
                        help="exclude other properties (_OTHER) from the properties section")
    parser.add_argument("-i", "--include-hidden", action="store_true",
                        help="include hidden properties (_HIDE) in the properties section")
    parser.add_argument("--title", metavar="TEXT",
                        help="title when the template has none (default: data file name)")
    parser.add_argument("--config", type=Path, metavar="FILE",
                        help="JSON file with report options")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="do not show warnings")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="show debug logging")
    parser.add_argument("--version", action="version",
                        version=f"{PROG} {__version__}")
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> ReportConfig:
    """Defaults, then --config JSON, then CSV2HTML_* env vars, then flags."""
    config = ReportConfig.load_json(args.config) if args.config else ReportConfig()
    config.apply_env()
    config.exclude_other = config.exclude_other or args.exclude_other
    config.include_hidden = config.include_hidden or args.include_hidden
    config.quiet = config.quiet or args.quiet
    return config


def _error(source: Path | None, message: object) -> int:
    prefix = f"{source}: " if source is not None else ""
    print(f"Error: {prefix}{message}", file=sys.stderr)
    return 1


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        force=True,
    )

    try:
        config = _load_config(args)
    except (OSError, ValueError) as e:
        return _error(args.config, e)

    # ── Load ─────────────────────────────────────────────────────────────
    try:
        data = CsvData.from_path(args.data, encoding=config.encoding)
        timestamp = datetime.fromtimestamp(args.data.stat().st_mtime).astimezone()
    except (DataError, OSError, UnicodeDecodeError) as e:
        return _error(args.data, e)

    try:
        if args.template is not None:
            template = Template.from_path(args.template, encoding=config.encoding)
        else:
            template = Template.default(data)
    except (Csv2HtmlError, OSError, UnicodeDecodeError) as e:
        return _error(args.template, e)

    # ── Render ───────────────────────────────────────────────────────────
    renderer = Renderer(template, exclude_other=config.exclude_other,
                        include_hidden=config.include_hidden)
    try:
        result = renderer.render(data, args.title or args.data.name,
                                 timestamp=timestamp)
    except Csv2HtmlError as e:
        return _error(args.template or args.data, e)

    # ── Output ───────────────────────────────────────────────────────────
    try:
        if args.output is not None:
            args.output.write_text(result.report, encoding=config.output_encoding)
            logger.info("Wrote %s", args.output)
        else:
            sys.stdout.write(result.report)
    except OSError as e:
        return _error(args.output, e)

    if not config.quiet:
        for warning in result.warnings:
            print(f"Warning: {warning}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
