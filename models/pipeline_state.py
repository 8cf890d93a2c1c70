"""
PipelineState - the single observable state of an investigation pipeline.

A discriminated union keyed on ``status``:

- idle: nothing has run yet
- running: a provider call is in flight for ``subject``
- succeeded: ``result`` holds the normalized SearchResult
- failed: ``error`` holds the user-displayable ErrorInfo
"""

from dataclasses import dataclass
from typing import Any, Literal

from models.search_result import ErrorInfo, SearchResult

PipelineStatus = Literal["idle", "running", "succeeded", "failed"]


@dataclass(frozen=True)
class PipelineState:
    status: PipelineStatus = "idle"
    subject: str | None = None
    result: SearchResult | None = None
    error: ErrorInfo | None = None

    def __post_init__(self):
        if self.status not in ("idle", "running", "succeeded", "failed"):
            raise ValueError(f"Unknown pipeline status: {self.status}")
        if (self.status == "succeeded") != (self.result is not None):
            raise ValueError("result is set exactly when status is 'succeeded'")
        if (self.status == "failed") != (self.error is not None):
            raise ValueError("error is set exactly when status is 'failed'")

    @classmethod
    def idle(cls) -> "PipelineState":
        return cls()

    @classmethod
    def running(cls, subject: str) -> "PipelineState":
        return cls(status="running", subject=subject)

    @classmethod
    def succeeded(cls, subject: str, result: SearchResult) -> "PipelineState":
        return cls(status="succeeded", subject=subject, result=result)

    @classmethod
    def failed(cls, subject: str | None, error: ErrorInfo) -> "PipelineState":
        return cls(status="failed", subject=subject, error=error)

    @property
    def is_idle(self) -> bool:
        return self.status == "idle"

    @property
    def is_running(self) -> bool:
        return self.status == "running"

    @property
    def is_succeeded(self) -> bool:
        return self.status == "succeeded"

    @property
    def is_failed(self) -> bool:
        return self.status == "failed"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "subject": self.subject,
            "result": self.result.to_dict() if self.result else None,
            "error": self.error.to_dict() if self.error else None,
        }
