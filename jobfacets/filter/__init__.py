"""
Filtering subsystem for jobfacets.

The `filter` package narrows and orders records.  It is made up of:

* `keyword` – Regex keywords with title/description constraints and
  the match-count scoring used for both filtering and relevance.
* `facets` – Discovers filterable fields and counts, per value, how
  many records would pass if that value were selected.
* `engine` – `FilterEngine`, which holds selections, keywords, sort
  order and limit, and produces the filtered view.
"""

from .keyword import Keyword, compile_keyword, relevance  # noqa: F401
from .facets import Facet, FacetOption, compute_facets  # noqa: F401
from .engine import FilterEngine  # noqa: F401
