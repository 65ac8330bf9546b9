"""Tests for keyword compilation and scoring."""

from __future__ import annotations

import re

import pytest  # type: ignore

from jobfacets.errors import InvalidPatternError
from jobfacets.filter.keyword import compile_keyword, passes_keywords, relevance
from jobfacets.normalize.schema import Record


def _record(title: str | None, body: str | None = None) -> Record:
    return Record(title=title, body=body)


def test_title_only_keyword_matches_title() -> None:
    keyword = compile_keyword("engineer", must_be_in_title=True, flags=re.IGNORECASE)
    assert keyword.score(_record("Senior Engineer")) == 1
    assert keyword.matches(_record("Senior Engineer"))
    assert keyword.score(_record("Analyst")) == 0
    assert not keyword.matches(_record("Analyst"))


def test_title_only_ignores_body() -> None:
    keyword = compile_keyword("python", must_be_in_title=True)
    assert keyword.score(_record("Analyst", "<p>python python</p>")) == 0


def test_unconstrained_keyword_adds_title_and_body() -> None:
    keyword = compile_keyword("python", flags=re.IGNORECASE)
    record = _record("Python Developer", "<p>python and more python</p>")
    assert keyword.score(record) == 3


def test_body_only_replaces_title_count() -> None:
    keyword = compile_keyword("data", must_be_in_body=True)
    record = _record("data data", "<p>data</p>")
    assert keyword.score(record) == 1


def test_both_locations_uses_minimum() -> None:
    keyword = compile_keyword("data", must_be_in_title=True, must_be_in_body=True)
    assert keyword.score(_record("data data", "no match here")) == 0
    assert keyword.score(_record("data data", "data data data")) == 2


def test_missing_text_scores_zero() -> None:
    keyword = compile_keyword("x")
    assert keyword.score(_record(None, None)) == 0


def test_invalid_pattern_raises() -> None:
    with pytest.raises(InvalidPatternError) as excinfo:
        compile_keyword("(unclosed")
    assert excinfo.value.pattern == "(unclosed"
    assert isinstance(excinfo.value, ValueError)


def test_precompiled_pattern_is_used_as_is() -> None:
    pattern = re.compile("nurse", re.IGNORECASE)
    keyword = compile_keyword(pattern, must_be_in_title=True)
    assert keyword.pattern is pattern
    assert keyword.score(_record("Registered NURSE")) == 1


def test_relevance_sums_scores_and_passes_uses_any() -> None:
    record = _record("Research Engineer", "engineer in research")
    engineer = compile_keyword("engineer", flags=re.IGNORECASE)
    chef = compile_keyword("chef")
    assert relevance(record, [engineer, chef]) == 2
    assert relevance(record, []) == 0
    assert passes_keywords(record, [])
    assert passes_keywords(record, [chef, engineer])
    assert not passes_keywords(record, [chef])
