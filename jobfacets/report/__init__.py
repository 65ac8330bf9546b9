"""
Report subsystem for jobfacets.

Writers that render an ordered list of `Record` objects to a file.
They take whatever list they are given, typically
`FilterEngine.filtered_view()`, and know nothing about filtering.
"""

from .write_csv import write_records_csv  # noqa: F401
from .write_html import write_records_html  # noqa: F401
