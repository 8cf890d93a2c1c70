"""
Maps a raw grounded-generation response onto a SearchResult.

The provider payload may be the SDK's GenerateContentResponse or a plain
mapping with the same shape (snake_case or camelCase keys). Every field
access goes through FIELD_DEFAULTS, so a partial payload never fails an
otherwise successful investigation.
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from models.search_result import SUMMARY_SENTINEL, SearchResult, Source

TIMESTAMP_FORMAT = "%H:%M:%S"

# Value used when a field is absent, None or of the wrong type.
FIELD_DEFAULTS: dict[str, Any] = {
    "text": SUMMARY_SENTINEL,
    "candidates": (),
    "grounding_metadata": None,
    "grounding_chunks": (),
    "web": None,  # chunk is excluded from sources
    "uri": "",
    "title": "",
}

_ALIASES = {
    "grounding_metadata": ("grounding_metadata", "groundingMetadata"),
    "grounding_chunks": ("grounding_chunks", "groundingChunks"),
}

_MISSING = object()


def _get(obj: Any, name: str) -> Any:
    """Read ``name`` from a mapping or an object, trying known key aliases."""
    if obj is None:
        return None
    for key in _ALIASES.get(name, (name,)):
        if isinstance(obj, Mapping):
            value = obj.get(key, _MISSING)
        else:
            # SDK convenience properties such as .text compute their value
            try:
                value = getattr(obj, key, _MISSING)
            except ValueError:
                value = _MISSING
        if value is not _MISSING and value is not None:
            return value
    return None


def _sequence(value: Any) -> Sequence:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    return ()


def _string(obj: Any, name: str) -> str:
    value = _get(obj, name)
    if isinstance(value, str) and value:
        return value
    return FIELD_DEFAULTS[name]


def extract_summary(raw: Any) -> str:
    return _string(raw, "text")


def extract_sources(raw: Any) -> tuple[Source, ...]:
    candidates = _sequence(_get(raw, "candidates"))
    if not candidates:
        return ()

    metadata = _get(candidates[0], "grounding_metadata")
    chunks = _sequence(_get(metadata, "grounding_chunks"))

    sources = []
    for chunk in chunks:
        web = _get(chunk, "web")
        if web is None:
            continue
        sources.append(Source(uri=_string(web, "uri"), title=_string(web, "title")))
    return tuple(sources)


def format_timestamp(completed_at: datetime) -> str:
    return completed_at.strftime(TIMESTAMP_FORMAT)


def normalize(raw: Any, completed_at: datetime) -> SearchResult:
    """
    Build a SearchResult from a provider payload. Never raises.

    Args:
        raw: Provider response (SDK object or mapping), possibly partial
        completed_at: When the provider call returned

    Returns:
        SearchResult with a non-empty summary, sources in citation order,
        and the formatted completion time
    """
    return SearchResult(
        summary=extract_summary(raw),
        sources=extract_sources(raw),
        timestamp=format_timestamp(completed_at),
    )


class ResponseNormalizer:
    """Object wrapper around normalize() for injection into the pipeline."""

    def normalize(self, raw: Any, completed_at: datetime) -> SearchResult:
        return normalize(raw, completed_at)
