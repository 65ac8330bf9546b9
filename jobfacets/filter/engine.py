"""
Filter and sort engine.

`FilterEngine` owns the ordered list of records together with the
user's facet selections, keywords and view limit.  Every operation
that changes any of these rebuilds the facet index before returning,
so `facets` always describes the current state.  A rebuild walks every
field of every record; callers making many changes at once should
expect that cost per call.

The engine keeps its own list of records.  Sorting reorders that list
only, never the sequence passed in, while the record objects
themselves are shared with whoever supplied them and may be enriched
between calls.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Pattern, Set, Tuple, Union

from ..normalize.schema import Record
from .facets import Facet, FacetOption, compute_facets, passes_filters, resolve_selections
from .keyword import Keyword, compile_keyword, relevance

logger = logging.getLogger(__name__)

DEFAULT_DATE_FIELD = "startDate"


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a date-like field value, returning None if it is not one."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = datetime.fromisoformat(text[:10])
        except ValueError:
            return None
    # Compare everything as naive so mixed inputs stay orderable.
    return parsed.replace(tzinfo=None)


class FilterEngine:
    """Facets, filters, sorts and limits a collection of job records.

    Args:
        records: Records to manage, in their initial order.
        display_names: Optional mapping of field name to a friendlier
            facet name.
    """

    def __init__(
        self,
        records: Iterable[Record],
        display_names: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._records: List[Record] = list(records)
        self._applied_facets: Dict[str, Set[str]] = {}
        self._applied_keywords: List[Keyword] = []
        self._limit: Optional[int] = None
        self._display_names: Optional[Dict[str, str]] = None
        self._facets: Dict[str, Facet] = {}
        self.refresh_facets(display_names)

    # ------------------------------------------------------------------
    # Facets
    # ------------------------------------------------------------------

    def refresh_facets(self, display_names: Optional[Mapping[str, str]] = None) -> Dict[str, Facet]:
        """Recompute facet counts from the current records and selections.

        The first non-empty ``display_names`` is remembered; later ones
        can only add names for fields that have none yet.
        """
        if display_names:
            if not self._display_names:
                self._display_names = dict(display_names)
            else:
                for name, display in display_names.items():
                    self._display_names.setdefault(name, display)
        self._facets = compute_facets(
            self._records,
            self._applied_facets,
            self._applied_keywords,
            self._display_names,
            previous=self._facets,
        )
        return self._facets

    @property
    def facets(self) -> Dict[str, Facet]:
        return self._facets

    @property
    def display_names(self) -> Dict[str, str]:
        return dict(self._display_names or {})

    def facet_names(self) -> List[str]:
        return list(self._facets)

    def facet_info(self, facet_name: str) -> Optional[Facet]:
        return self._facets.get(facet_name)

    # ------------------------------------------------------------------
    # Facet selections
    # ------------------------------------------------------------------

    def applied_options(self, facet_name: str) -> Set[str]:
        """Return a copy of the option ids selected for a field."""
        return set(self._applied_facets.setdefault(facet_name, set()))

    def select_option(self, facet_name: str, option_id: str) -> Dict[str, Facet]:
        self._applied_facets.setdefault(facet_name, set()).add(option_id)
        logger.debug("Selected option %s of %s", option_id, facet_name)
        return self.refresh_facets()

    def deselect_option(self, facet_name: str, option_id: str) -> Optional[FacetOption]:
        """Deselect an option, returning it or None if it was not selected."""
        removed: Optional[FacetOption] = None
        selected = self._applied_facets.setdefault(facet_name, set())
        if option_id in selected:
            selected.discard(option_id)
            facet = self._facets.get(facet_name)
            removed = facet.find_option_by_id(option_id) if facet else None
            logger.debug("Deselected option %s of %s", option_id, facet_name)
        self.refresh_facets()
        return removed

    def is_option_selected(self, facet_name: str, option_id: str) -> bool:
        return option_id in self._applied_facets.get(facet_name, ())

    def clear_options(self, facet_name: str) -> Dict[str, Facet]:
        self._applied_facets[facet_name] = set()
        return self.refresh_facets()

    # ------------------------------------------------------------------
    # Keywords
    # ------------------------------------------------------------------

    @property
    def applied_keywords(self) -> Tuple[Keyword, ...]:
        return tuple(self._applied_keywords)

    def add_keyword(
        self,
        pattern: Union[str, Pattern[str]],
        must_be_in_title: bool = False,
        must_be_in_body: bool = False,
        flags: int = 0,
    ) -> Keyword:
        """Compile and apply a keyword.

        Raises:
            InvalidPatternError: If the pattern does not compile.  The
                engine is left unchanged.
        """
        keyword = compile_keyword(pattern, must_be_in_title, must_be_in_body, flags)
        self._applied_keywords.append(keyword)
        logger.debug("Added keyword %s", keyword)
        self.refresh_facets()
        return keyword

    def remove_keyword(self, index: int) -> Optional[Keyword]:
        """Remove the keyword at ``index``; None if there is none."""
        removed: Optional[Keyword] = None
        if 0 <= index < len(self._applied_keywords):
            removed = self._applied_keywords.pop(index)
            logger.debug("Removed keyword %s", removed)
        self.refresh_facets()
        return removed

    def clear_keywords(self) -> Dict[str, Facet]:
        self._applied_keywords = []
        return self.refresh_facets()

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def sort_by_title(self, ascending: bool = True) -> Dict[str, Facet]:
        self._records = sorted(
            self._records,
            key=lambda record: (record.title or "").casefold(),
            reverse=not ascending,
        )
        return self.refresh_facets()

    def sort_by_date(self, ascending: bool = False, date_field: str = DEFAULT_DATE_FIELD) -> Dict[str, Facet]:
        """Sort by a date field, most recent first unless ``ascending``.

        Records whose field is missing or unparseable follow the dated
        ones, in their current order.
        """
        dated: List[Tuple[datetime, Record]] = []
        undated: List[Record] = []
        for record in self._records:
            parsed = parse_date(record.field_value(date_field))
            if parsed is None:
                undated.append(record)
            else:
                dated.append((parsed, record))
        dated.sort(key=lambda pair: pair[0], reverse=not ascending)
        if undated:
            logger.debug("%d records have no usable %s", len(undated), date_field)
        self._records = [record for _, record in dated] + undated
        return self.refresh_facets()

    def sort_by_relevance(self, ascending: bool = False) -> Dict[str, Facet]:
        keywords = self.applied_keywords
        self._records = sorted(
            self._records,
            key=lambda record: relevance(record, keywords),
            reverse=not ascending,
        )
        return self.refresh_facets()

    # ------------------------------------------------------------------
    # Limit
    # ------------------------------------------------------------------

    @property
    def limit(self) -> Optional[int]:
        return self._limit

    def set_limit(self, amount: int) -> Dict[str, Facet]:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
            raise ValueError(f"Limit must be a non-negative integer, got {amount!r}")
        self._limit = amount
        return self.refresh_facets()

    def clear_limit(self) -> Dict[str, Facet]:
        self._limit = None
        return self.refresh_facets()

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def all_records(self) -> List[Record]:
        return list(self._records)

    def filtered_view(self) -> List[Record]:
        """Records passing every selection and keyword, in current order."""
        selected_values = resolve_selections(self._facets, self._applied_facets)
        keywords = self.applied_keywords
        result = [
            record
            for record in self._records
            if passes_filters(record, selected_values, keywords)
        ]
        if self._limit is not None:
            result = result[: self._limit]
        logger.debug("Filtered view has %d of %d records", len(result), len(self._records))
        return result
