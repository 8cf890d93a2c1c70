"""
Models package for investigation value objects and pipeline state.
"""

from .errors import InvestigatorError, ProviderError, ValidationError
from .pipeline_state import PipelineState, PipelineStatus
from .search_result import (
    GENERIC_ERROR_MESSAGE,
    SUMMARY_SENTINEL,
    ErrorInfo,
    GenerationRequest,
    SearchQuery,
    SearchResult,
    Source,
)

__all__ = [
    "GENERIC_ERROR_MESSAGE",
    "SUMMARY_SENTINEL",
    "ErrorInfo",
    "GenerationRequest",
    "InvestigatorError",
    "PipelineState",
    "PipelineStatus",
    "ProviderError",
    "SearchQuery",
    "SearchResult",
    "Source",
    "ValidationError",
]
