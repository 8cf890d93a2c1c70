"""Pydantic request models for FastAPI endpoints."""

from pydantic import BaseModel, Field


class InvestigationRequest(BaseModel):
    # Blank names are accepted here and ignored by the pipeline;
    # the length bound comes from MAX_SUBJECT_LENGTH and is checked in the route
    subject_name: str
    session_id: str | None = Field(None, min_length=1, max_length=128)
