"""
Test Suite: FastAPI Contract & Guardrail Validation

Validates the HTTP surface in front of the investigation pipeline without
calling Gemini. A fake provider client is injected through FastAPI
dependency overrides so every response is deterministic and offline.

Covers:
- health endpoint availability
- X-API-Key authentication on investigation endpoints
- input guardrails (subject length, blank subjects)
- provider failures mapped to a "failed" state with HTTP 200, never 5xx
- per-session state retrieval
- a POST replaced by a newer one on the same session is marked superseded
"""

import asyncio
from datetime import datetime
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from models.errors import ProviderError
from orchestrator.core import InvestigationPipeline
from server.app import create_app
from server.routes.investigations import create_investigation
from server.schemas.requests import InvestigationRequest
from server.sessions import SessionPipelineStore

pytestmark = pytest.mark.integration

HEADERS = {"X-API-Key": "dev-key-1"}

PAYLOAD = {
    "text": "Jane Doe is a researcher...",
    "candidates": [
        {
            "groundingMetadata": {
                "groundingChunks": [
                    {"web": {"uri": "https://example.com", "title": "Example"}},
                    {"web": {"uri": "https://other.example"}},
                ]
            }
        }
    ],
}


class FakeConfig:
    MAX_SUBJECT_LENGTH = 20


@pytest.fixture()
def app(mock_env, provider_factory):
    app = create_app()

    from server import dependencies as deps

    # Clear singleton caches to avoid cross-test leakage
    for dep in (deps.get_session_store, deps.get_config):
        if hasattr(dep, "_instance"):
            delattr(dep, "_instance")

    client = provider_factory(
        responses={"Jane Doe": PAYLOAD, "Offline": ProviderError("Network is unreachable")}
    )
    store = SessionPipelineStore(
        factory=lambda: InvestigationPipeline(
            client=client, clock=lambda: datetime(2026, 1, 2, 9, 30, 0)
        )
    )
    app.dependency_overrides[deps.get_session_store] = lambda: store
    app.dependency_overrides[deps.get_config] = lambda: FakeConfig()
    app.state.fake_provider = client
    return app


@pytest.fixture()
def client(app):
    return TestClient(app)


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"
    assert "X-Request-ID" in r.headers


def test_investigation_requires_api_key(client):
    r = client.post("/v1/investigations", json={"subject_name": "Jane Doe"})
    assert r.status_code in (401, 403)


def test_state_requires_api_key(client):
    r = client.get("/v1/investigations/abc")
    assert r.status_code in (401, 403)


def test_successful_investigation(client):
    r = client.post(
        "/v1/investigations",
        json={"subject_name": "Jane Doe", "session_id": "s1"},
        headers=HEADERS,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["session_id"] == "s1"
    assert body["status"] == "succeeded"
    assert body["error"] is None
    assert body["superseded"] is False
    assert body["result"]["summary"] == "Jane Doe is a researcher..."
    assert body["result"]["timestamp"] == "09:30:00"
    assert body["result"]["sources"] == [
        {"uri": "https://example.com", "title": "Example"},
        {"uri": "https://other.example", "title": ""},
    ]

    r = client.get("/v1/investigations/s1", headers=HEADERS)
    assert r.status_code == 200
    assert r.json()["status"] == "succeeded"


def test_session_id_is_generated(client):
    r = client.post("/v1/investigations", json={"subject_name": "Jane Doe"}, headers=HEADERS)
    assert r.status_code == 200
    assert r.json()["session_id"]


def test_provider_failure_is_not_a_server_error(client):
    r = client.post(
        "/v1/investigations",
        json={"subject_name": "Offline", "session_id": "s2"},
        headers=HEADERS,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "failed"
    assert body["result"] is None
    assert body["error"]["message"] == "Network is unreachable"


def test_blank_subject_leaves_state_unchanged(client, app):
    client.post(
        "/v1/investigations", json={"subject_name": "Jane Doe", "session_id": "s3"}, headers=HEADERS
    )
    calls = len(app.state.fake_provider.requests)

    r = client.post(
        "/v1/investigations", json={"subject_name": "   ", "session_id": "s3"}, headers=HEADERS
    )
    assert r.status_code == 200
    assert r.json()["status"] == "succeeded"
    assert r.json()["subject"] == "Jane Doe"
    assert len(app.state.fake_provider.requests) == calls


def test_blank_subject_on_new_session_is_idle(client):
    r = client.post(
        "/v1/investigations", json={"subject_name": "", "session_id": "s4"}, headers=HEADERS
    )
    assert r.status_code == 200
    assert r.json()["status"] == "idle"


def test_overlong_subject_rejected(client, app):
    r = client.post(
        "/v1/investigations",
        json={"subject_name": "x" * 21, "session_id": "s5"},
        headers=HEADERS,
    )
    assert r.status_code == 400
    assert app.state.fake_provider.requests == []


def test_missing_subject_rejected(client):
    r = client.post("/v1/investigations", json={}, headers=HEADERS)
    assert r.status_code == 422


def test_unknown_session_is_404(client):
    r = client.get("/v1/investigations/nope", headers=HEADERS)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_replaced_post_is_marked_superseded(provider_factory):
    gate = asyncio.Event()
    provider = provider_factory(
        responses={"Alpha": {"text": "alpha"}, "Beta": {"text": "beta"}},
        gates={"Alpha": gate},
    )
    store = SessionPipelineStore(factory=lambda: InvestigationPipeline(client=provider))

    def post(subject, request_id):
        return create_investigation(
            body=InvestigationRequest(subject_name=subject, session_id="s6"),
            request=SimpleNamespace(state=SimpleNamespace(request_id=request_id)),
            api_key="dev-key-1",
            store=store,
            config=FakeConfig(),
        )

    first = asyncio.create_task(post("Alpha", "r1"))
    await provider.started.wait()
    second = await post("Beta", "r2")
    replaced = await first

    assert second.superseded is False
    assert second.status == "succeeded"
    assert second.subject == "Beta"

    assert replaced.superseded is True
    assert replaced.subject == "Beta"
