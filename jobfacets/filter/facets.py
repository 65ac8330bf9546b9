"""
Facet index.

A facet is the set of distinct values seen for one data field across
all records, each value carried by a `FacetOption` with a match count.
The count of an option is the number of records holding that value
that would remain in the filtered view if the option were selected:
every other field's selection and the keywords are applied, but the
facet's own selection is ignored.

`compute_facets` rebuilds the whole index from scratch on each call
and returns a new mapping.  Passing the previous result keeps option
ids stable, which matters because selections are stored by id and
ids are handed out in discovery order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..normalize.schema import Record
from .keyword import Keyword, passes_keywords

logger = logging.getLogger(__name__)


@dataclass
class FacetOption:
    """One selectable value of a facet."""

    id: str
    value: Any
    count: int = 0


@dataclass
class Facet:
    """Distinct values of one data field.

    Invariant: option ids are unique, and each value appears in exactly
    one option.
    """

    field_name: str
    display_name: str
    options: Dict[str, FacetOption] = field(default_factory=dict)

    def add_option(self, option_id: str, value: Any, count: int = 0) -> FacetOption:
        """Add or replace the option with the given id."""
        option = FacetOption(option_id, value, count)
        self.options[option_id] = option
        return option

    def remove_option(self, option_id: str) -> Optional[FacetOption]:
        return self.options.pop(option_id, None)

    def find_option_by_id(self, option_id: str) -> Optional[FacetOption]:
        return self.options.get(option_id)

    def find_option_by_value(self, value: Any) -> Optional[FacetOption]:
        # Values are not guaranteed hashable (lists occur in raw payloads).
        for option in self.options.values():
            if option.value == value:
                return option
        return None

    def next_option_id(self) -> str:
        index = len(self.options)
        while str(index) in self.options:
            index += 1
        return str(index)

    @property
    def total_count(self) -> int:
        return sum(option.count for option in self.options.values())


def resolve_selections(
    facets: Mapping[str, Facet],
    applied_facets: Mapping[str, Iterable[str]],
) -> Dict[str, List[Any]]:
    """Translate selected option ids into the values they stand for.

    Only fields with at least one selected id appear in the result.
    Ids that do not name an existing option contribute no value, so a
    field whose selections all fail to resolve matches nothing.
    """
    resolved: Dict[str, List[Any]] = {}
    for field_name, option_ids in applied_facets.items():
        option_ids = list(option_ids)
        if not option_ids:
            continue
        facet = facets.get(field_name)
        values: List[Any] = []
        for option_id in option_ids:
            option = facet.find_option_by_id(option_id) if facet else None
            if option is None:
                logger.debug("Selected option %s of %s does not exist", option_id, field_name)
                continue
            values.append(option.value)
        resolved[field_name] = values
    return resolved


def passes_filters(
    record: Record,
    selected_values: Mapping[str, Sequence[Any]],
    keywords: Sequence[Keyword],
    ignore_field: Optional[str] = None,
) -> bool:
    """Check a record against resolved selections and keywords.

    Fields are ANDed together, the values selected within one field are
    ORed, and keywords are ORed.  ``ignore_field`` leaves one field's
    selection out of the test, which is how facet counts are computed.
    A record that lacks a field never passes a selection on that field,
    even one whose value is None.
    """
    for field_name, values in selected_values.items():
        if field_name == ignore_field:
            continue
        if field_name not in record.fields or record.field_value(field_name) not in values:
            return False
    return passes_keywords(record, keywords)


def _seed(
    previous: Optional[Mapping[str, Facet]],
    display_names: Mapping[str, str],
) -> Dict[str, Facet]:
    seeded: Dict[str, Facet] = {}
    for name, facet in (previous or {}).items():
        copy = Facet(facet.field_name, display_names.get(name, facet.display_name))
        for option in facet.options.values():
            copy.add_option(option.id, option.value, 0)
        seeded[name] = copy
    return seeded


def compute_facets(
    records: Sequence[Record],
    applied_facets: Mapping[str, Iterable[str]],
    applied_keywords: Sequence[Keyword],
    display_names: Optional[Mapping[str, str]] = None,
    previous: Optional[Mapping[str, Facet]] = None,
) -> Dict[str, Facet]:
    """Build the facet index for the given records and constraints.

    Args:
        records: Records to index, read afresh on every call.
        applied_facets: Selected option ids per field name.
        applied_keywords: Keywords currently applied.
        display_names: Optional field name to display name mapping.
        previous: Result of an earlier call.  Its facets and option ids
            are carried over with counts reset to zero; it is not
            modified.

    Returns:
        A new mapping of field name to `Facet`.
    """
    display_names = display_names or {}
    facets = _seed(previous, display_names)

    # Discover every field and value first so selections made against
    # options first seen on later records still resolve.
    for record in records:
        for field_name in record.field_names():
            facet = facets.get(field_name)
            if facet is None:
                facet = Facet(field_name, display_names.get(field_name, field_name))
                facets[field_name] = facet
            value = record.field_value(field_name)
            if facet.find_option_by_value(value) is None:
                facet.add_option(facet.next_option_id(), value)

    selected_values = resolve_selections(facets, applied_facets)
    for record in records:
        for field_name in record.field_names():
            if not passes_filters(record, selected_values, applied_keywords, ignore_field=field_name):
                continue
            option = facets[field_name].find_option_by_value(record.field_value(field_name))
            option.count += 1

    logger.debug(
        "Computed %d facets over %d records (%d fields selected, %d keywords)",
        len(facets),
        len(records),
        len(selected_values),
        len(applied_keywords),
    )
    return facets
