"""FastAPI dependencies for authentication and pipeline access."""

import os

from fastapi import Header, HTTPException, Request, status

from server.utils import redact_sensitive_headers
from utils.logger import get_logger

logger = get_logger(__name__)


async def get_api_key(request: Request, x_api_key: str | None = Header(None)):
    """Validate API key from X-API-Key header."""
    valid_keys_str = os.getenv("API_KEYS", "")
    request_id = getattr(request.state, "request_id", "unknown")
    redacted_headers = redact_sensitive_headers(dict(request.headers))

    if not valid_keys_str:
        logger.error(
            "API authentication not configured",
            extra={"extra_fields": {"request_id": request_id, "headers": redacted_headers}},
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="API authentication not configured",
        )

    valid_keys = [k.strip() for k in valid_keys_str.split(",") if k.strip()]

    if not x_api_key or x_api_key not in valid_keys:
        logger.warning(
            "API authentication failed",
            extra={"extra_fields": {"request_id": request_id, "headers": redacted_headers}},
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API key"
        )

    return x_api_key


def get_session_store():
    """Dependency to get the session pipeline store (singleton pattern)."""
    from orchestrator.core import InvestigationPipeline
    from server.sessions import SessionPipelineStore

    if not hasattr(get_session_store, "_instance"):
        config = get_config()
        get_session_store._instance = SessionPipelineStore(
            factory=lambda: InvestigationPipeline.from_config(config)
        )
    return get_session_store._instance


def get_config():
    """Dependency to get the process configuration (singleton pattern)."""
    from config.config import Config

    if not hasattr(get_config, "_instance"):
        get_config._instance = Config()
    return get_config._instance
