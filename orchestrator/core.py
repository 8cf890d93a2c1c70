"""
InvestigationPipeline - per-session controller for public-record investigations.

Key guarantees:
- investigate() never raises for provider failures; they become the failed state
- blank subject names are ignored without touching state
- only the newest invocation writes state; superseded results are dropped
- consumers read state through current_state / subscribe(), never write it
"""

import asyncio
from collections.abc import Callable
from datetime import datetime

from api.base_client import BaseAIClient
from config.config import ConcurrencyPolicy, Config
from models.errors import ProviderError, ValidationError
from models.pipeline_state import PipelineState
from models.search_result import GENERIC_ERROR_MESSAGE, ErrorInfo, SearchQuery
from orchestrator.request_builder import RequestBuilder
from orchestrator.response_normalizer import ResponseNormalizer
from utils.logger import get_logger

logger = get_logger(__name__)

CANCELLED_MESSAGE = "The investigation was cancelled."

StateListener = Callable[[PipelineState], None]


class InvestigationPipeline:
    def __init__(
        self,
        client: BaseAIClient,
        builder: RequestBuilder | None = None,
        normalizer: ResponseNormalizer | None = None,
        policy: ConcurrencyPolicy = ConcurrencyPolicy.RESTART,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._client = client
        self._builder = builder or RequestBuilder()
        self._normalizer = normalizer or ResponseNormalizer()
        self._policy = policy
        self._clock = clock

        self._state = PipelineState.idle()
        self._listeners: list[StateListener] = []
        self._generation = 0
        self._inflight: asyncio.Task | None = None

    @classmethod
    def from_config(cls, config: Config | None = None) -> "InvestigationPipeline":
        """Wire a pipeline against Gemini using environment configuration."""
        from api.google_gemini_client import GeminiClient

        config = config or Config()
        client = GeminiClient(
            api_key=config.GEMINI_API_KEY,
            model_name=config.DEFAULT_MODEL,
            timeout_seconds=config.PROVIDER_TIMEOUT_SECONDS,
        )
        return cls(
            client=client,
            builder=RequestBuilder(model_name=config.DEFAULT_MODEL),
            policy=config.CONCURRENCY_POLICY,
        )

    # ---------- observation ----------

    @property
    def current_state(self) -> PipelineState:
        return self._state

    @property
    def policy(self) -> ConcurrencyPolicy:
        return self._policy

    @property
    def generation(self) -> int:
        """Number of investigations started so far; bumps on every accepted call."""
        return self._generation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Register ``listener`` to be called with every new state.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, state: PipelineState) -> None:
        previous = self._state
        self._state = state
        logger.info(
            f"Investigation state {previous.status} -> {state.status}",
            extra={
                "extra_fields": {
                    "generation": self._generation,
                    "subject": state.subject,
                    "error_code": state.error.code if state.error else None,
                    "source_count": len(state.result.sources) if state.result else None,
                }
            },
        )
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener raised; continuing")

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    # ---------- entry point ----------

    async def investigate(self, raw_input: str) -> None:
        """
        Run one investigation for ``raw_input``.

        Blank input is a no-op. Valid input moves the pipeline to running
        (clearing any previous result or error) and then to succeeded or
        failed. With the RESTART policy a call made while another is in
        flight cancels it; with REJECT the new call is ignored.

        Raises:
            asyncio.CancelledError: Only when the caller itself is cancelled.
                If this call still owns the pipeline, the state becomes failed
                with code "cancelled"; a call that was already superseded
                re-raises without touching the newer run's state.
        """
        try:
            query = SearchQuery.parse(raw_input)
        except ValidationError:
            logger.debug("Ignoring blank subject name")
            return

        if self._inflight is not None and not self._inflight.done():
            if self._policy is ConcurrencyPolicy.REJECT:
                logger.warning(
                    "Investigation already running; rejecting new request",
                    extra={
                        "extra_fields": {
                            "running_subject": self._state.subject,
                            "rejected_subject": query.subject_name,
                        }
                    },
                )
                return
            logger.info(
                "Superseding in-flight investigation",
                extra={"extra_fields": {"previous_subject": self._state.subject}},
            )
            self._inflight.cancel()

        self._generation += 1
        generation = self._generation
        self._set_state(PipelineState.running(query.subject_name))

        task = asyncio.create_task(self._run(query, generation))
        self._inflight = task
        try:
            await task
        except asyncio.CancelledError:
            if not self._is_current(generation):
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    # the caller itself was cancelled, not just replaced
                    raise
                logger.info(
                    "Superseded investigation cancelled",
                    extra={"extra_fields": {"subject": query.subject_name}},
                )
                return
            if self._state.is_running:
                self._set_state(
                    PipelineState.failed(
                        query.subject_name, ErrorInfo(CANCELLED_MESSAGE, code="cancelled")
                    )
                )
            raise
        finally:
            if self._inflight is task and task.done():
                self._inflight = None

    async def _run(self, query: SearchQuery, generation: int) -> None:
        request = self._builder.build(query.subject_name)

        try:
            raw = await self._client.execute(request)
        except ProviderError as e:
            error = ErrorInfo(message=e.message or GENERIC_ERROR_MESSAGE, code=e.code)
        except Exception as e:
            logger.exception("Unexpected provider client failure")
            error = ErrorInfo(message=str(e) or GENERIC_ERROR_MESSAGE, code="unknown")
        else:
            result = self._normalizer.normalize(raw, self._clock())
            if self._is_current(generation):
                self._set_state(PipelineState.succeeded(query.subject_name, result))
            else:
                logger.info("Dropping late result from superseded investigation")
            return

        if self._is_current(generation):
            self._set_state(PipelineState.failed(query.subject_name, error))
        else:
            logger.info("Dropping late failure from superseded investigation")
