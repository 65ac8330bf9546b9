"""
Jobfacets package.

This package narrows a collection of scraped job postings down to the
ones a reader cares about.  Postings from different boards carry
different data fields, so the set of filters is discovered from the
records themselves rather than fixed up front.

The high‑level flow is:

1. **normalize** – Turn raw job payloads (JSON as returned by a
   careers site) into `Record` objects.  Structural keys such as the
   title, description and external path are split out; every other
   key becomes a filterable data field.
2. **filter** – Build facets (distinct values per field with match
   counts), score records against regex keywords and hold the user's
   selections.  `FilterEngine` is the entry point.
3. **report** – Render an ordered list of records to CSV or HTML.
4. **cli** – Command line entry point wiring together the above
   components.
"""

from .filter.engine import FilterEngine  # noqa: F401
from .normalize.schema import Record  # noqa: F401
