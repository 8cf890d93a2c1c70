import asyncio
import re
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from models.errors import ProviderError
from models.search_result import GENERIC_ERROR_MESSAGE, GenerationRequest
from utils.logger import get_logger

logger = get_logger(__name__)

_STATUS_CODES = {
    401: ("auth", False),
    403: ("auth", False),
    400: ("bad_request", False),
    404: ("bad_request", False),
    408: ("timeout", True),
    429: ("rate_limit", True),
}

# Checked in order against the lowered message when no numeric code matched.
# Word boundaries keep "4000 tokens" from reading as a 400.
_MESSAGE_PATTERNS = (
    (re.compile(r"timed out|\btimeout\b"), "timeout", True),
    (re.compile(r"\b(401|403)\b|unauthorized|permission|api key"), "auth", False),
    (re.compile(r"\b429\b|too many requests|\bquota\b|resource_exhausted"), "rate_limit", True),
    (re.compile(r"\b400\b|bad request|invalid_argument"), "bad_request", False),
    (re.compile(r"\b(500|502|503|504)\b|\bunavailable\b|\binternal\b"), "provider_error", True),
)


class BaseAIClient(ABC):
    """
    Abstract base class for grounded-generation provider clients.
    All provider-specific clients should inherit from this class and implement execute().
    """

    @abstractmethod
    def __init__(self, api_key: str | None, **kwargs):
        """
        Initialize the provider client.

        Args:
            api_key: API key for the provider, possibly None when not configured
            **kwargs: Additional provider-specific parameters
        """
        self.api_key = api_key
        self.model_name = kwargs.get('model_name')

    @abstractmethod
    async def execute(self, request: GenerationRequest) -> Any:
        """
        Send one generation request to the provider.

        Args:
            request: The request produced by RequestBuilder

        Returns:
            The provider's raw response payload, unmodified

        Raises:
            ProviderError: For every transport, auth or provider-side failure
        """

    @staticmethod
    def _measure_latency(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    @staticmethod
    def _provider_message(exc: BaseException) -> str:
        message = getattr(exc, "message", None)
        if not isinstance(message, str) or not message.strip():
            message = str(exc)
        return message.strip() or GENERIC_ERROR_MESSAGE

    def _normalize_error(self, exc: BaseException, provider: str) -> ProviderError:
        """
        Map any exception raised during a provider call to a ProviderError.

        Args:
            exc: The raised exception
            provider: Provider name, logged alongside the chosen code

        Returns:
            ProviderError with a normalized code and retryable flag
        """
        if isinstance(exc, ProviderError):
            return exc

        message = self._provider_message(exc)
        code, retryable = self._classify(exc, message)
        logger.debug(
            f"Classified {provider} error as {code}",
            extra={"extra_fields": {"provider": provider, "exception": type(exc).__name__}},
        )
        return ProviderError(message, code=code, retryable=retryable)

    @staticmethod
    def _classify(exc: BaseException, message: str) -> tuple[str, bool]:
        if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
            return "timeout", True

        status = getattr(exc, "code", None)
        if isinstance(status, int):
            if status in _STATUS_CODES:
                return _STATUS_CODES[status]
            if status >= 500:
                return "provider_error", True

        lowered = message.lower()
        for pattern, code, retryable in _MESSAGE_PATTERNS:
            if pattern.search(lowered):
                return code, retryable
        if isinstance(exc, (ConnectionError, OSError, httpx.TransportError)):
            return "provider_error", True

        return "unknown", False
