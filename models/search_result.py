from dataclasses import dataclass
from typing import Any

from models.errors import ValidationError

SUMMARY_SENTINEL = "No information found."
GENERIC_ERROR_MESSAGE = "An error occurred during the investigation."

ErrorCode = str
VALID_ERROR_CODES = {
    "timeout",
    "auth",
    "rate_limit",
    "bad_request",
    "provider_error",
    "config",
    "cancelled",
    "unknown",
}


@dataclass(frozen=True)
class SearchQuery:
    subject_name: str

    def __post_init__(self):
        if not isinstance(self.subject_name, str) or not self.subject_name.strip():
            raise ValidationError("Subject name must not be empty")
        object.__setattr__(self, "subject_name", self.subject_name.strip())

    @classmethod
    def parse(cls, raw: str | None) -> "SearchQuery":
        return cls(subject_name=raw or "")


@dataclass(frozen=True)
class GenerationRequest:
    model: str
    prompt: str
    grounding: bool = True


@dataclass(frozen=True)
class Source:
    uri: str = ""
    title: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"uri": self.uri, "title": self.title}


@dataclass(frozen=True)
class SearchResult:
    summary: str
    sources: tuple[Source, ...] = ()
    timestamp: str = ""

    def __post_init__(self):
        if not self.summary:
            object.__setattr__(self, "summary", SUMMARY_SENTINEL)
        # callers may hand in a list; keep the stored value immutable
        object.__setattr__(self, "sources", tuple(self.sources))

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "sources": [source.to_dict() for source in self.sources],
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class ErrorInfo:
    message: str
    code: ErrorCode = "unknown"

    def __post_init__(self):
        if not self.message:
            object.__setattr__(self, "message", GENERIC_ERROR_MESSAGE)
        if self.code not in VALID_ERROR_CODES:
            object.__setattr__(self, "code", "unknown")

    def to_dict(self) -> dict[str, str]:
        return {"code": self.code, "message": self.message}
