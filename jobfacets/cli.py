"""
Command line interface for jobfacets.

Two subcommands are provided.  ``facets`` loads a records file, applies
any selections and keywords given on the command line and prints the
facet table with match counts.  ``filter`` does the same, then sorts,
limits and prints the filtered records or writes them to a CSV or HTML
report.  All the work is delegated to `FilterEngine` and the writers
in the `report` package.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from datetime import date
from pathlib import Path
from typing import List, Tuple

from .config import Settings, configure_logging, load_settings
from .errors import JobFacetsError
from .filter.engine import FilterEngine
from .normalize.load_json import load_records
from .report.write_csv import write_records_csv
from .report.write_html import write_records_html

logger = logging.getLogger("jobfacets.cli")


def _split_pair(text: str) -> Tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {text!r}")
    return name, value


def _build_engine(args: argparse.Namespace, settings: Settings) -> FilterEngine:
    records = load_records(args.records)
    engine = FilterEngine(records, settings.display_names)
    for field_name, option_id in args.select or []:
        engine.select_option(field_name, option_id)
    for field_name, value in args.select_value or []:
        facet = engine.facet_info(field_name)
        option = facet.find_option_by_value(value) if facet else None
        if option is None:
            logger.warning("No option %r for field %s; ignoring", value, field_name)
            continue
        engine.select_option(field_name, option.id)
    flags = re.IGNORECASE if args.ignore_case else 0
    for pattern in args.keyword or []:
        engine.add_keyword(pattern, args.in_title, args.in_body, flags)
    return engine


def cmd_facets(args: argparse.Namespace, settings: Settings) -> None:
    """Print every facet with its options and counts."""
    engine = _build_engine(args, settings)
    for facet in engine.facets.values():
        print(f"{facet.display_name} ({facet.field_name})")
        for option in facet.options.values():
            mark = "*" if engine.is_option_selected(facet.field_name, option.id) else " "
            print(f"  {mark}[{option.id}] {option.value} ({option.count})")


def cmd_filter(args: argparse.Namespace, settings: Settings) -> None:
    """Print or write the filtered, sorted and limited records."""
    engine = _build_engine(args, settings)
    if args.sort == "title":
        engine.sort_by_title(ascending=args.ascending if args.ascending is not None else True)
    elif args.sort == "date":
        engine.sort_by_date(
            ascending=bool(args.ascending),
            date_field=settings.date_field,
        )
    elif args.sort == "relevance":
        engine.sort_by_relevance(ascending=bool(args.ascending))
    limit = args.limit if args.limit is not None else settings.limit
    if limit is not None:
        engine.set_limit(limit)
    records = engine.filtered_view()
    if not args.out:
        for i, record in enumerate(records):
            print(f"{i + 1:02d}. {record.title}")
            print(f"   {record.page_url(settings.site_url)}")
        return
    out = Path(args.out)
    if out.suffix.lower() in (".html", ".htm"):
        write_records_html(
            records,
            str(out),
            site_url=settings.site_url,
            split_date=args.since,
            date_field=settings.date_field,
        )
    else:
        write_records_csv(records, str(out), site_url=settings.site_url)
    logger.info("Wrote %d of %d records to %s", len(records), len(engine.all_records()), out)


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--records", required=True, help="JSON file of job postings")
    parser.add_argument(
        "--select",
        action="append",
        type=_split_pair,
        metavar="FIELD=ID",
        help="Select a facet option by id (repeatable)",
    )
    parser.add_argument(
        "--select-value",
        action="append",
        type=_split_pair,
        dest="select_value",
        metavar="FIELD=VALUE",
        help="Select a facet option by value (repeatable)",
    )
    parser.add_argument("--keyword", action="append", metavar="PATTERN", help="Regex keyword (repeatable)")
    parser.add_argument("--in-title", action="store_true", dest="in_title", help="Keywords must match the title")
    parser.add_argument("--in-body", action="store_true", dest="in_body", help="Keywords must match the description")
    parser.add_argument("--ignore-case", action="store_true", dest="ignore_case", help="Case-insensitive keywords")


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="jobfacets", description="Facet and filter job postings")
    parser.add_argument("--config", help="YAML config file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    facets_cmd = subparsers.add_parser("facets", help="Show facets and counts")
    _add_common(facets_cmd)
    facets_cmd.set_defaults(func=cmd_facets)

    filter_cmd = subparsers.add_parser("filter", help="Show or write the filtered records")
    _add_common(filter_cmd)
    filter_cmd.add_argument("--sort", choices=["title", "date", "relevance"], help="Sort order")
    order = filter_cmd.add_mutually_exclusive_group()
    order.add_argument("--ascending", dest="ascending", action="store_true", default=None)
    order.add_argument("--descending", dest="ascending", action="store_false")
    filter_cmd.add_argument("--limit", type=int, help="Maximum number of records")
    filter_cmd.add_argument("--out", help="Output file (.csv or .html)")
    filter_cmd.add_argument(
        "--since",
        type=date.fromisoformat,
        metavar="YYYY-MM-DD",
        help="Split an HTML report into postings on or after this date and older ones",
    )
    filter_cmd.set_defaults(func=cmd_filter)

    args = parser.parse_args(argv)
    try:
        settings = load_settings(args.config)
    except (FileNotFoundError, JobFacetsError) as exc:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
        logger.error("%s", exc)
        return 2
    configure_logging(settings.log_level)
    try:
        args.func(args, settings)
    except (JobFacetsError, ValueError, OSError) as exc:
        logger.error("%s", exc)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
