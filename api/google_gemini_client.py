import asyncio
import os
import time
from typing import Any

from google import genai
from google.genai import types

from config.config import DEFAULT_GEMINI_MODEL, DEFAULT_PROVIDER_TIMEOUT_SECONDS
from models.errors import ProviderError
from models.search_result import GenerationRequest
from utils.logger import get_logger

from .base_client import BaseAIClient

logger = get_logger(__name__)


class GeminiClient(BaseAIClient):
    """
    Grounded-generation client for the Google Gemini API (google.genai package).

    Sends one request per execute() call through the async client, with the
    Google Search tool attached when the request asks for grounding. The raw
    GenerateContentResponse is returned untouched; every failure is raised as
    a ProviderError.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str = DEFAULT_GEMINI_MODEL,
        timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
        **kwargs,
    ):
        """
        Initialize the Gemini client.

        Args:
            api_key: The Gemini API key. Falls back to GEMINI_API_KEY, then
                GOOGLE_GEMINI_API_KEY. A missing key is reported by execute().
            model_name: Default model when a request does not name one
            timeout_seconds: Upper bound on a single provider call
            **kwargs: Additional keyword arguments
        """
        api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_GEMINI_API_KEY")
        super().__init__(api_key, model_name=model_name, **kwargs)

        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.client = genai.Client(api_key=api_key) if api_key else None

        if self.client is None:
            logger.warning("Gemini API key not configured; investigations will fail")

    @staticmethod
    def _build_config(request: GenerationRequest) -> types.GenerateContentConfig:
        tools = [types.Tool(google_search=types.GoogleSearch())] if request.grounding else None
        return types.GenerateContentConfig(tools=tools)

    async def execute(self, request: GenerationRequest) -> Any:
        """
        Run one grounded generation call.

        Args:
            request: Model, prompt and grounding flag

        Returns:
            The provider's GenerateContentResponse

        Raises:
            ProviderError: On missing credentials, timeout, or any provider failure.
                asyncio.CancelledError is propagated unchanged.
        """
        model = request.model or self.model_name

        if self.client is None:
            raise ProviderError(
                "GEMINI_API_KEY is not set. Configure it in the environment or .env file.",
                code="config",
            )

        start_time = time.time()
        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=model,
                    contents=request.prompt,
                    config=self._build_config(request),
                ),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            error = ProviderError(
                f"The provider did not respond within {self.timeout_seconds:g} seconds.",
                code="timeout",
                retryable=True,
            )
            self._log_failure(error, model, start_time)
            raise error from e
        except Exception as e:
            error = self._normalize_error(e, provider="gemini")
            self._log_failure(error, model, start_time)
            raise error from e

        logger.info(
            "Gemini grounded completion successful",
            extra={
                "extra_fields": {
                    "model": model,
                    "latency_ms": self._measure_latency(start_time),
                    "grounding": request.grounding,
                }
            },
        )
        return response

    def _log_failure(self, error: ProviderError, model: str, start_time: float) -> None:
        logger.error(
            f"Gemini completion failed: {error.code}",
            extra={
                "extra_fields": {
                    "model": model,
                    "latency_ms": self._measure_latency(start_time),
                    "error_code": error.code,
                    "error_message": error.message,
                    "retryable": error.retryable,
                }
            },
        )
