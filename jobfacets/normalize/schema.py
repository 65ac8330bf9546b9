# normalize/schema.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

TITLE_KEY = "title"
BODY_KEY = "jobDescription"
EXTERNAL_PATH_KEY = "externalPath"
RELATED_KEY = "similarJobs"
# Detail payloads nest most of their data under this key.
POSTING_INFO_KEY = "jobPostingInfo"

# Raw payload keys that are never offered as facets.
STRUCTURAL_FIELDS = frozenset({TITLE_KEY, BODY_KEY, EXTERNAL_PATH_KEY, RELATED_KEY})


@dataclass(eq=False)
class Record:
    """A single job posting.

    ``fields`` holds every data field that is not structural, in the
    order it was first seen.  Records compare by identity so that the
    same posting can be tracked across re-sorts.
    """

    title: Optional[str] = None
    body: Optional[str] = None           # HTML job description
    fields: Dict[str, Any] = field(default_factory=dict)
    external_path: Optional[str] = None
    related: List["Record"] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Record":
        record = cls()
        record.update_fields(data)
        return record

    def update_fields(self, data: Mapping[str, Any]) -> None:
        """Merge a raw payload into this record.

        Used both when the record is first built and when a source
        enriches it with the detail page.  Later values replace earlier
        ones.
        """
        nested = data.get(POSTING_INFO_KEY)
        if isinstance(nested, Mapping):
            self.update_fields(nested)
        for key, value in data.items():
            if key == POSTING_INFO_KEY:
                continue
            if key == TITLE_KEY:
                self.title = value
            elif key == BODY_KEY:
                self.body = value
            elif key == EXTERNAL_PATH_KEY:
                self.external_path = value
            elif key == RELATED_KEY:
                self.related = [Record.from_mapping(item) for item in value or []]
            else:
                self.fields[key] = value

    def to_mapping(self) -> Dict[str, Any]:
        """Return a payload that ``from_mapping`` turns back into this record."""
        result: Dict[str, Any] = {
            EXTERNAL_PATH_KEY: self.external_path,
            TITLE_KEY: self.title,
            BODY_KEY: self.body,
            RELATED_KEY: [r.to_mapping() for r in self.related],
        }
        result.update(self.fields)
        return result

    def field_names(self) -> List[str]:
        return [name for name in self.fields if name not in STRUCTURAL_FIELDS]

    def field_value(self, name: str) -> Any:
        return self.fields.get(name)

    def page_url(self, site_url: str = "") -> str:
        return f"{site_url}{self.external_path or ''}"

    @property
    def is_enriched(self) -> bool:
        return self.body is not None


def records_from_mappings(items: Iterable[Mapping[str, Any]]) -> List[Record]:
    return [Record.from_mapping(item) for item in items]
