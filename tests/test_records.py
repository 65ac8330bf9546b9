"""Tests for record construction and JSON loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest  # type: ignore

from jobfacets.errors import RecordFormatError
from jobfacets.normalize.load_json import load_records, parse_records
from jobfacets.normalize.schema import STRUCTURAL_FIELDS, Record


def _posting(title: str, path: str, **fields: str) -> dict:
    data = {"title": title, "externalPath": path}
    data.update(fields)
    return data


def test_from_mapping_separates_structural_fields() -> None:
    record = Record.from_mapping(
        {
            "title": "Research Assistant",
            "externalPath": "/job/Columbus/Research-Assistant_R1",
            "jobDescription": "<p>Help with research</p>",
            "similarJobs": [_posting("Lab Tech", "/job/R2")],
            "locationsText": "Columbus",
            "postedOn": "Posted Today",
        }
    )
    assert record.title == "Research Assistant"
    assert record.body == "<p>Help with research</p>"
    assert record.external_path == "/job/Columbus/Research-Assistant_R1"
    assert [r.title for r in record.related] == ["Lab Tech"]
    assert record.field_names() == ["locationsText", "postedOn"]
    assert not STRUCTURAL_FIELDS.intersection(record.fields)


def test_update_fields_flattens_posting_info() -> None:
    record = Record.from_mapping(_posting("Nurse", "/job/R3", locationsText="Remote"))
    assert not record.is_enriched
    record.update_fields(
        {
            "jobPostingInfo": {"jobDescription": "<p>Care</p>", "timeType": "Full time"},
            "hiringOrganization": {"name": "OSU"},
        }
    )
    assert record.is_enriched
    assert record.body == "<p>Care</p>"
    assert record.field_value("timeType") == "Full time"
    assert "jobPostingInfo" not in record.fields
    assert record.field_value("hiringOrganization") == {"name": "OSU"}


def test_to_mapping_round_trips() -> None:
    source = _posting("Cook", "/job/R4", timeType="Part time")
    record = Record.from_mapping(source)
    again = Record.from_mapping(record.to_mapping())
    assert again.title == "Cook"
    assert again.external_path == "/job/R4"
    assert again.fields == {"timeType": "Part time"}


def test_page_url_joins_site_url() -> None:
    record = Record.from_mapping(_posting("Cook", "/job/R4"))
    assert record.page_url("https://example.org/careers") == "https://example.org/careers/job/R4"


def test_records_compare_by_identity() -> None:
    assert Record(title="x") != Record(title="x")


def test_load_records_from_list(tmp_path: Path) -> None:
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps([_posting("A", "/a"), _posting("B", "/b")]), encoding="utf-8")
    records = load_records(path)
    assert [r.title for r in records] == ["A", "B"]


def test_load_records_from_search_response(tmp_path: Path) -> None:
    path = tmp_path / "jobs.json"
    payload = {"total": 1, "jobPostings": [_posting("A", "/a", locationsText="Columbus")]}
    path.write_text(json.dumps(payload), encoding="utf-8")
    records = load_records(str(path))
    assert records[0].field_value("locationsText") == "Columbus"


def test_load_records_rejects_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "jobs.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(RecordFormatError):
        load_records(path)


@pytest.mark.parametrize("payload", [{"items": []}, "text", [1, 2]])
def test_parse_records_rejects_unknown_shapes(payload: object) -> None:
    with pytest.raises(RecordFormatError):
        parse_records(payload)


def test_parse_records_rejects_bad_related_postings() -> None:
    with pytest.raises(RecordFormatError):
        parse_records([{"title": "A", "similarJobs": ["not an object"]}])
    with pytest.raises(RecordFormatError):
        parse_records([{"title": "A", "similarJobs": "nope"}])


def test_parse_records_accepts_nested_related_postings() -> None:
    records = parse_records([{"title": "A", "similarJobs": [{"title": "B", "similarJobs": []}]}])
    assert records[0].related[0].title == "B"


def test_load_records_bad_related_posting_raises_format_error(tmp_path: Path) -> None:
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps([{"title": "A", "similarJobs": [3]}]), encoding="utf-8")
    with pytest.raises(RecordFormatError):
        load_records(path)
