"""
Shared fixtures.

Only the network is faked: tests talk to the real LLMClient through an
``httpx.MockTransport`` that records requests and replays scripted responses.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from translator_critic import config
from translator_critic.llm.client import LLMClient
from tests.utils.transport import RecordingTransport


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Ignore any MENTORPIECE_API_KEY from the developer's environment."""
    monkeypatch.setattr(config, "_SETTINGS", config.Settings())


@pytest.fixture
def make_client():
    """Build an LLMClient over a RecordingTransport scripted with the given responses."""
    def _make(*responses):
        recorder = RecordingTransport(*responses)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        return LLMClient(http_client=http_client), recorder
    return _make


@pytest.fixture
def api(make_client):
    """FastAPI test client whose LLM calls go to a scripted transport.

    Returns a callable: ``api(*responses) -> (TestClient, RecordingTransport)``.
    """
    from translator_critic.deps import get_llm_client
    from translator_critic.main import app

    def _api(*responses):
        client, recorder = make_client(*responses)
        app.dependency_overrides[get_llm_client] = lambda: client
        return TestClient(app), recorder

    yield _api

    app.dependency_overrides.clear()
