"""
JSON record loader.

Reads job payloads saved from a careers site search and turns them
into `Record` objects.  Two shapes are accepted: a bare list of
postings, or the search response object with the postings under a
``jobPostings`` key.  Anything else raises `RecordFormatError`.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Union

from ..errors import RecordFormatError
from .schema import RELATED_KEY, Record, records_from_mappings

logger = logging.getLogger(__name__)

POSTINGS_KEY = "jobPostings"


def _check_posting(item: Any, where: str) -> None:
    if not isinstance(item, dict):
        raise RecordFormatError(f"{where} is not an object")
    related = item.get(RELATED_KEY)
    if related is None:
        return
    if not isinstance(related, list):
        raise RecordFormatError(f"{where}: {RELATED_KEY} is not a list")
    for index, nested in enumerate(related):
        _check_posting(nested, f"{where} {RELATED_KEY}[{index}]")


def parse_records(payload: Any) -> List[Record]:
    """Build records from an already decoded JSON payload."""
    if isinstance(payload, dict):
        if POSTINGS_KEY not in payload:
            raise RecordFormatError(f"Expected a '{POSTINGS_KEY}' key in records object")
        payload = payload[POSTINGS_KEY]
    if not isinstance(payload, list):
        raise RecordFormatError(
            f"Expected a list of job postings, got {type(payload).__name__}"
        )
    for index, item in enumerate(payload):
        _check_posting(item, f"Posting {index}")
    return records_from_mappings(payload)


def load_records(path: Union[str, Path]) -> List[Record]:
    """Load records from a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Records in file order.
    """
    with open(path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as exc:
            raise RecordFormatError(f"{path} is not valid JSON: {exc}") from exc
    records = parse_records(payload)
    logger.info("Loaded %d records from %s", len(records), path)
    return records
