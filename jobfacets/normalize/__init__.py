"""
Normalization subsystem for jobfacets.

This package converts raw job payloads into `Record` instances.  A
record keeps its title, HTML description, external path and related
postings apart from the open-ended set of data fields, which are the
only values offered for faceting.
"""

from .schema import Record, STRUCTURAL_FIELDS  # noqa: F401
from .load_json import load_records, parse_records  # noqa: F401
