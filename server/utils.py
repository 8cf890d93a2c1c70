"""Shared utilities for FastAPI routes."""

import uuid
from collections.abc import Mapping

SENSITIVE_HEADERS = {"x-api-key", "authorization"}


def new_session_id() -> str:
    return uuid.uuid4().hex


def redact_sensitive_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """
    Redact auth-bearing headers before logging.
    """
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS and value:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted
