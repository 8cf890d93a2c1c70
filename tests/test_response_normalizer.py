from datetime import datetime
from types import SimpleNamespace

import pytest

from models.search_result import SUMMARY_SENTINEL, SearchResult, Source
from orchestrator.response_normalizer import (
    ResponseNormalizer,
    extract_sources,
    format_timestamp,
    normalize,
)

FIXED_TIME = datetime(2026, 3, 14, 15, 9, 26)


def _payload(chunks, text="Summary"):
    return {"text": text, "candidates": [{"groundingMetadata": {"groundingChunks": chunks}}]}


def test_scenario_a_single_web_source():
    raw = {
        "text": "Jane Doe is a researcher...",
        "candidates": [
            {
                "groundingMetadata": {
                    "groundingChunks": [{"web": {"uri": "https://example.com", "title": "Example"}}]
                }
            }
        ],
    }
    result = normalize(raw, FIXED_TIME)
    assert result.summary == "Jane Doe is a researcher..."
    assert result.sources == (Source(uri="https://example.com", title="Example"),)
    assert result.timestamp


def test_scenario_d_null_text_and_no_candidates():
    result = normalize({"text": None, "candidates": []}, FIXED_TIME)
    assert result.summary == SUMMARY_SENTINEL
    assert result.sources == ()


@pytest.mark.parametrize("raw", [{}, {"text": ""}, {"text": 42}, None, "not a payload"])
def test_missing_or_malformed_text_uses_sentinel(raw):
    assert normalize(raw, FIXED_TIME).summary == SUMMARY_SENTINEL


def test_chunks_without_web_are_excluded():
    raw = _payload(
        [
            {"web": {"uri": "https://a.example", "title": "A"}},
            {"retrievedContext": {"uri": "gs://bucket/doc"}},
            {"web": None},
            {"web": {"uri": "https://b.example", "title": "B"}},
        ]
    )
    assert [s.uri for s in extract_sources(raw)] == ["https://a.example", "https://b.example"]


def test_web_with_missing_fields_is_kept_with_empty_strings():
    raw = _payload(
        [
            {"web": {"title": "No uri"}},
            {"web": {"uri": "https://no-title.example"}},
            {"web": {}},
            {"web": {"uri": 7, "title": None}},
        ]
    )
    assert extract_sources(raw) == (
        Source(uri="", title="No uri"),
        Source(uri="https://no-title.example", title=""),
        Source(uri="", title=""),
        Source(uri="", title=""),
    )


def test_source_order_follows_citation_order():
    chunks = [{"web": {"uri": f"https://{i}.example", "title": str(i)}} for i in range(6)]
    titles = [s.title for s in normalize(_payload(chunks), FIXED_TIME).sources]
    assert titles == ["0", "1", "2", "3", "4", "5"]


@pytest.mark.parametrize(
    "raw",
    [
        {"text": "x"},
        {"text": "x", "candidates": None},
        {"text": "x", "candidates": "oops"},
        {"text": "x", "candidates": [{}]},
        {"text": "x", "candidates": [{"groundingMetadata": None}]},
        {"text": "x", "candidates": [{"groundingMetadata": {"groundingChunks": None}}]},
        {"text": "x", "candidates": [{"groundingMetadata": {"groundingChunks": {"web": {}}}}]},
    ],
)
def test_absent_chunk_list_gives_empty_sources(raw):
    assert normalize(raw, FIXED_TIME).sources == ()


def test_only_first_candidate_is_read():
    raw = {
        "text": "x",
        "candidates": [
            {"groundingMetadata": {"groundingChunks": [{"web": {"uri": "u1", "title": "t1"}}]}},
            {"groundingMetadata": {"groundingChunks": [{"web": {"uri": "u2", "title": "t2"}}]}},
        ],
    }
    assert normalize(raw, FIXED_TIME).sources == (Source(uri="u1", title="t1"),)


def test_snake_case_sdk_shaped_objects():
    web = SimpleNamespace(uri="https://example.com", title="Example")
    chunk = SimpleNamespace(web=web, retrieved_context=None)
    candidate = SimpleNamespace(grounding_metadata=SimpleNamespace(grounding_chunks=[chunk]))
    raw = SimpleNamespace(text="Profile", candidates=[candidate])

    result = normalize(raw, FIXED_TIME)
    assert result.summary == "Profile"
    assert result.sources == (Source(uri="https://example.com", title="Example"),)


def test_sdk_text_property_raising_is_absorbed():
    class Response:
        candidates = None

        @property
        def text(self):
            raise ValueError("multiple candidates")

    assert normalize(Response(), FIXED_TIME).summary == SUMMARY_SENTINEL


def test_normalize_is_pure():
    raw = _payload([{"web": {"uri": "https://a.example", "title": "A"}}, {"web": {}}])
    first = normalize(raw, FIXED_TIME)
    second = ResponseNormalizer().normalize(raw, FIXED_TIME)
    assert first == second
    assert raw["candidates"][0]["groundingMetadata"]["groundingChunks"][1] == {"web": {}}


def test_timestamp_is_completion_clock_time():
    assert format_timestamp(FIXED_TIME) == "15:09:26"
    assert normalize({}, FIXED_TIME).timestamp == "15:09:26"


def test_search_result_is_immutable():
    result = SearchResult(summary="x", sources=[Source("u", "t")], timestamp="t")
    assert isinstance(result.sources, tuple)
    with pytest.raises(AttributeError):
        result.summary = "changed"
