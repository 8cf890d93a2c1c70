import asyncio
from datetime import datetime

import pytest

from api.base_client import BaseAIClient
from config.config import ConcurrencyPolicy
from orchestrator.core import InvestigationPipeline

FIXED_TIME = datetime(2026, 3, 14, 15, 9, 26)


class FakeProviderClient(BaseAIClient):
    """
    Offline provider double.

    ``responses`` maps a subject name (found in the prompt) to either a raw
    payload or an exception instance to raise. ``gates`` maps a subject name
    to an asyncio.Event the call waits on before answering.
    """

    def __init__(self, responses=None, default=None, gates=None):
        super().__init__(api_key="test-key", model_name="fake-model")
        self.responses = responses or {}
        self.default = default if default is not None else {"text": "ok"}
        self.gates = gates or {}
        self.requests = []
        self.started = asyncio.Event()

    def _match(self, prompt: str):
        for subject, value in self.responses.items():
            if f'"{subject}"' in prompt:
                return subject, value
        return None, self.default

    async def execute(self, request):
        self.requests.append(request)
        subject, value = self._match(request.prompt)
        self.started.set()
        if subject in self.gates:
            await self.gates[subject].wait()
        if isinstance(value, BaseException):
            raise value
        return value


@pytest.fixture
def fake_client():
    return FakeProviderClient()


@pytest.fixture
def provider_factory():
    return FakeProviderClient


@pytest.fixture
def make_pipeline():
    def _make(client, policy=ConcurrencyPolicy.RESTART):
        return InvestigationPipeline(client=client, policy=policy, clock=lambda: FIXED_TIME)

    return _make


@pytest.fixture
def mock_env(monkeypatch):
    """Fixture to mock environment variables for testing."""
    env_vars = {
        "GEMINI_API_KEY": "test-api-key",
        "DEFAULT_GEMINI_MODEL": "gemini-test",
        "API_KEYS": "dev-key-1,dev-key-2",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars
