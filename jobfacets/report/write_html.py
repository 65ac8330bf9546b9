"""
HTML writer for records.

Produces a standalone page with a table of linked job titles followed
by selected data fields.  When a split date is given, records are
divided into a table of postings dated on or after that day and one
of older postings, each with the most recent first.
"""

from __future__ import annotations

import html
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from ..filter.engine import DEFAULT_DATE_FIELD, parse_date
from ..normalize.schema import Record
from .write_csv import DEFAULT_COLUMNS

logger = logging.getLogger(__name__)


def _cell(value: object) -> str:
    return html.escape("" if value is None else str(value))


def render_table(records: Sequence[Record], caption: str, columns: Sequence[str], site_url: str = "") -> str:
    lines = ["<table>", f"<caption>{html.escape(caption)}</caption>"]
    header = "".join(f"<th>{html.escape(c)}</th>" for c in columns)
    lines.append(f"  <tr><th>Job Title</th>{header}</tr>")
    for record in records:
        url = html.escape(record.page_url(site_url), quote=True)
        cells = "".join(f"<td>{_cell(record.field_value(c))}</td>" for c in columns)
        lines.append(f'  <tr><td><a href="{url}">{_cell(record.title)}</a></td>{cells}</tr>')
    lines.append("</table>")
    return "\n".join(lines)


def split_by_date(
    records: Iterable[Record],
    since: date,
    date_field: str = DEFAULT_DATE_FIELD,
) -> Tuple[List[Record], List[Record]]:
    """Split records into (new, old) around ``since``, most recent first.

    Records without a usable date count as old.
    """
    cutoff = datetime(since.year, since.month, since.day)
    new: List[Tuple[datetime, Record]] = []
    old: List[Tuple[datetime, Record]] = []
    for record in records:
        posted = parse_date(record.field_value(date_field))
        if posted is not None and posted >= cutoff:
            new.append((posted, record))
        else:
            old.append((posted or datetime.min, record))
    new.sort(key=lambda pair: pair[0], reverse=True)
    old.sort(key=lambda pair: pair[0], reverse=True)
    return [r for _, r in new], [r for _, r in old]


def write_records_html(
    records: Iterable[Record],
    path: str,
    title: str = "Job listings",
    site_url: str = "",
    columns: Sequence[str] = DEFAULT_COLUMNS,
    split_date: Optional[date] = None,
    date_field: str = DEFAULT_DATE_FIELD,
) -> int:
    """Write records to an HTML file.

    Returns:
        The number of records written.
    """
    records = list(records)
    if split_date is None:
        tables = [render_table(records, title, columns, site_url)]
    else:
        new, old = split_by_date(records, split_date, date_field)
        stamp = split_date.isoformat()
        tables = [
            render_table(new, f"New {title} --- {stamp}", columns, site_url),
            render_table(old, f"Older {title} --- {stamp}", columns, site_url),
        ]
    document = "\n".join(
        [
            "<!DOCTYPE html>",
            '<html lang="en">',
            f"<head><meta charset=\"utf-8\"><title>{html.escape(title)}</title></head>",
            "<body>",
            "\n\n".join(tables),
            "</body>",
            "</html>",
        ]
    )
    with open(path, "w", encoding="utf-8") as f:
        f.write(document + "\n")
    logger.info("Wrote %d records to %s", len(records), path)
    return len(records)
