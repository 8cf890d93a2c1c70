"""Pydantic response models (DTOs) for FastAPI endpoints."""

from pydantic import BaseModel, Field

from models.pipeline_state import PipelineState


class SourceDTO(BaseModel):
    uri: str
    title: str


class SearchResultDTO(BaseModel):
    summary: str
    sources: list[SourceDTO] = Field(default_factory=list)
    timestamp: str


class ErrorDTO(BaseModel):
    code: str
    message: str


class InvestigationStateDTO(BaseModel):
    session_id: str
    status: str
    subject: str | None = None
    result: SearchResultDTO | None = None
    error: ErrorDTO | None = None
    superseded: bool = False

    @classmethod
    def from_state(cls, session_id: str, state: PipelineState, superseded: bool = False):
        """Convert PipelineState to DTO."""
        return cls(
            session_id=session_id,
            superseded=superseded,
            status=state.status,
            subject=state.subject,
            result=(
                SearchResultDTO(
                    summary=state.result.summary,
                    sources=[SourceDTO(uri=s.uri, title=s.title) for s in state.result.sources],
                    timestamp=state.result.timestamp,
                )
                if state.result
                else None
            ),
            error=(
                ErrorDTO(code=state.error.code, message=state.error.message)
                if state.error
                else None
            ),
        )


class HealthResponseDTO(BaseModel):
    status: str
    timestamp: str
    version: str = "1.0.0"
