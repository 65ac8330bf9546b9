"""
CSV writer for records.

Writes one row per record: title, page URL, the description as plain
text and a chosen set of data fields.  If the file already exists, it
will be overwritten.  Unicode is written in UTF‑8 encoding.
"""

from __future__ import annotations

import csv
import logging
from typing import Iterable, Sequence

from bs4 import BeautifulSoup

from ..normalize.schema import Record

logger = logging.getLogger(__name__)

DEFAULT_COLUMNS = ("postedOn", "locationsText", "timeType")


def html_to_text(html: str | None) -> str:
    """Strip markup from an HTML description."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    return soup.get_text(" ", strip=True)


def write_records_csv(
    records: Iterable[Record],
    path: str,
    columns: Sequence[str] = DEFAULT_COLUMNS,
    site_url: str = "",
) -> int:
    """Write records to a CSV file.

    Args:
        records: Records in the order they should appear.
        path: Destination path for the CSV.
        columns: Data field names to include after the fixed columns.
        site_url: Base URL prepended to each record's external path.

    Returns:
        The number of rows written.
    """
    fieldnames = ["title", "url", "description", *columns]
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
        writer.writeheader()
        for record in records:
            row = {
                "title": record.title or "",
                "url": record.page_url(site_url),
                "description": html_to_text(record.body),
            }
            for column in columns:
                value = record.field_value(column)
                row[column] = "" if value is None else value
            writer.writerow(row)
            count += 1
    logger.info("Wrote %d records to %s", count, path)
    return count
