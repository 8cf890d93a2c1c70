"""Per-session pipeline store for the HTTP surface."""

import threading
from collections import OrderedDict
from collections.abc import Callable

from orchestrator.core import InvestigationPipeline

MAX_SESSIONS = 256


class SessionPipelineStore:
    """
    Thread-safe map of session_id -> InvestigationPipeline.

    Each session owns one pipeline and therefore one PipelineState. The
    least recently used session is dropped once MAX_SESSIONS is exceeded.
    """

    def __init__(
        self,
        factory: Callable[[], InvestigationPipeline],
        max_sessions: int = MAX_SESSIONS,
    ):
        self._factory = factory
        self._max_sessions = max_sessions
        self._lock = threading.Lock()
        self._sessions: OrderedDict[str, InvestigationPipeline] = OrderedDict()

    def get(self, session_id: str) -> InvestigationPipeline | None:
        with self._lock:
            pipeline = self._sessions.get(session_id)
            if pipeline is not None:
                self._sessions.move_to_end(session_id)
            return pipeline

    def get_or_create(self, session_id: str) -> InvestigationPipeline:
        with self._lock:
            pipeline = self._sessions.get(session_id)
            if pipeline is None:
                pipeline = self._factory()
                self._sessions[session_id] = pipeline
                while len(self._sessions) > self._max_sessions:
                    self._sessions.popitem(last=False)
            else:
                self._sessions.move_to_end(session_id)
            return pipeline

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
