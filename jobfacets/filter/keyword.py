"""
Keyword matching.

A keyword is a regular expression plus a pair of flags saying where it
has to appear.  Scoring counts non-overlapping occurrences in the title
and the description and combines the two counts:

* neither flag set – title and description counts are added
* title only – the title count
* description only – the description count
* both – the smaller of the two counts, so a keyword that is missing
  from either place scores zero

A record matches a keyword when its score is positive.  With several
keywords applied a record is kept if it matches any of them, and its
relevance is the sum of the individual scores.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern, Union

from ..errors import InvalidPatternError
from ..normalize.schema import Record

logger = logging.getLogger(__name__)


def _count(pattern: Pattern[str], text: Optional[str]) -> int:
    if not text:
        return 0
    return sum(1 for _ in pattern.finditer(text))


@dataclass(frozen=True)
class Keyword:
    """A compiled search pattern with location constraints."""

    pattern: Pattern[str]
    must_be_in_title: bool = False
    must_be_in_body: bool = False

    def score(self, record: Record) -> int:
        title_matches = _count(self.pattern, record.title)
        body_matches = _count(self.pattern, record.body)
        if self.must_be_in_title and self.must_be_in_body:
            return min(title_matches, body_matches)
        if self.must_be_in_title:
            return title_matches
        if self.must_be_in_body:
            return body_matches
        return title_matches + body_matches

    def matches(self, record: Record) -> bool:
        return self.score(record) > 0

    def __str__(self) -> str:
        where = {
            (False, False): "anywhere",
            (True, False): "in title",
            (False, True): "in body",
            (True, True): "in title and body",
        }[(self.must_be_in_title, self.must_be_in_body)]
        return f"/{self.pattern.pattern}/ ({where})"


def compile_keyword(
    pattern: Union[str, Pattern[str]],
    must_be_in_title: bool = False,
    must_be_in_body: bool = False,
    flags: int = 0,
) -> Keyword:
    """Compile a pattern into a `Keyword`.

    Args:
        pattern: Regular expression source, or an already compiled
            pattern (``flags`` are then ignored).
        must_be_in_title: Only count matches in the title.
        must_be_in_body: Only count matches in the description.
        flags: `re` flags such as ``re.IGNORECASE``.

    Raises:
        InvalidPatternError: If the pattern is not a valid regex.
    """
    if isinstance(pattern, re.Pattern):
        compiled = pattern
    else:
        try:
            compiled = re.compile(pattern, flags)
        except re.error as exc:
            raise InvalidPatternError(pattern, str(exc)) from exc
    return Keyword(compiled, bool(must_be_in_title), bool(must_be_in_body))


def relevance(record: Record, keywords: Iterable[Keyword]) -> int:
    """Total score of a record across all keywords (0 with none)."""
    return sum(keyword.score(record) for keyword in keywords)


def passes_keywords(record: Record, keywords: Iterable[Keyword]) -> bool:
    """True if no keywords are applied or the record matches at least one."""
    keywords = tuple(keywords)
    if not keywords:
        return True
    return any(keyword.matches(record) for keyword in keywords)
