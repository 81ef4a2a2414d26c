"""HTTP surface: listing endpoints, the blocking run and the SSE run."""

import asyncio
import logging

import httpx
import pytest

from translator_critic.llm.models import MODELS
from translator_critic.routes.translation import translate_critique_stream
from translator_critic.schemas import TranslateCritiqueIn
from tests.utils.sse import event_types, parse_frames
from tests.utils.transport import ok

AUTH = {"Authorization": "Bearer test-key"}


def test_health(api):
    client, _ = api()
    assert client.get("/health").json() == {"status": "ok"}


def test_list_languages(api):
    client, _ = api()
    languages = client.get("/api/languages").json()["languages"]

    values = [lang["value"] for lang in languages]
    assert "English" in values and "Russian" in values
    assert all(set(lang) == {"value", "label"} for lang in languages)


def test_list_models(api):
    client, _ = api()
    assert client.get("/api/models").json() == {
        "translate": MODELS.TRANSLATE,
        "critique": MODELS.CRITIQUE,
    }


class TestTranslateCritique:

    def test_success(self, api):
        client, recorder = api(ok("Bonjour le monde"), ok("9/10 - Excellent"))

        resp = client.post(
            "/api/translate-critique",
            json={"text": "Hello world", "target_language": "French"},
            headers=AUTH,
        )

        assert resp.status_code == 200
        assert resp.json() == {
            "status": "ok",
            "translation": "Bonjour le monde",
            "critique": "9/10 - Excellent",
        }
        assert recorder.call_count == 2
        assert recorder.requests[0].headers["authorization"] == "Bearer test-key"

    def test_empty_text_is_400(self, api):
        client, recorder = api()

        resp = client.post("/api/translate-critique", json={"text": "  "}, headers=AUTH)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Please enter some text to translate."
        assert resp.json()["details"]["error_code"] == "VALIDATION_ERROR"
        assert recorder.call_count == 0

    def test_missing_credential_is_401(self, api):
        client, recorder = api()

        resp = client.post("/api/translate-critique", json={"text": "Hello"})

        assert resp.status_code == 401
        assert "API Key is missing" in resp.json()["message"]
        assert recorder.call_count == 0

    def test_critique_failure_returns_partial_translation(self, api):
        client, _ = api(ok("X"), httpx.Response(503, json={"message": "Service Unavailable"}))

        resp = client.post("/api/translate-critique", json={"text": "Hello"}, headers=AUTH)

        assert resp.status_code == 502
        body = resp.json()
        assert body["status"] == "error"
        assert body["message"] == "Service Unavailable"
        assert body["details"] == {"error_code": "API_ERROR", "translation": "X"}

    def test_transport_failure_is_503(self, api):
        client, _ = api(httpx.ConnectError("Network Error"))

        resp = client.post("/api/translate-critique", json={"text": "Hello"}, headers=AUTH)

        assert resp.status_code == 503
        assert resp.json()["message"] == "Network Error"
        assert resp.json()["details"]["translation"] is None

    def test_bad_json_from_service_is_502(self, api):
        client, _ = api(httpx.Response(200, text="not json"))

        resp = client.post("/api/translate-critique", json={"text": "Hello"}, headers=AUTH)

        assert resp.status_code == 502
        assert resp.json()["details"]["error_code"] == "DECODE_ERROR"

    def test_configured_key_is_used_without_header(self, api, monkeypatch):
        from translator_critic import config
        monkeypatch.setattr(config, "_SETTINGS", config.Settings(api_key="env-key"))
        client, recorder = api(ok("T"), ok("C"))

        resp = client.post("/api/translate-critique", json={"text": "Hello"})

        assert resp.status_code == 200
        assert recorder.requests[0].headers["authorization"] == "Bearer env-key"


class TestTranslateCritiqueStream:

    def test_streams_translation_before_critique(self, api):
        client, _ = api(ok("Bonjour le monde"), ok("9/10 - Excellent"))

        resp = client.post(
            "/api/translate-critique/stream",
            json={"text": "Hello world", "target_language": "French"},
            headers=AUTH,
        )

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/event-stream")
        assert event_types(resp.text) == [
            "state:idle",
            "state:validating",
            "state:translating",
            "translation",
            "state:critiquing",
            "critique",
            "state:done",
            "done",
        ]
        frames = dict(parse_frames(resp.text))
        assert frames["translation"]["translation"] == "Bonjour le monde"
        assert frames["critique"]["critique"] == "9/10 - Excellent"
        assert frames["done"]["status"] == "done"

    def test_streams_error_and_keeps_translation(self, api):
        client, _ = api(ok("X"), httpx.Response(503, json={"message": "Service Unavailable"}))

        resp = client.post("/api/translate-critique/stream", json={"text": "Hello"}, headers=AUTH)

        frames = dict(parse_frames(resp.text))
        assert frames["error"]["message"] == "Service Unavailable"
        assert frames["error"]["stage"] == "critiquing"
        assert frames["done"]["status"] == "failed"
        assert frames["done"]["translation"] == "X"
        assert frames["done"]["critique"] is None

    @pytest.mark.parametrize("text", ["", "   "])
    def test_streams_validation_error(self, api, text):
        client, recorder = api()

        resp = client.post("/api/translate-critique/stream", json={"text": text}, headers=AUTH)

        frames = dict(parse_frames(resp.text))
        assert frames["error"]["message"] == "Please enter some text to translate."
        assert "translation" not in frames
        assert recorder.call_count == 0


class HangingClient:
    """Blocks on every call until cancelled."""
    def __init__(self):
        self.started = asyncio.Event()
        self.cancelled = asyncio.Event()

    async def invoke(self, model, prompt, credential):
        self.started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled.set()
            raise


class CrashingClient:
    async def invoke(self, model, prompt, credential):
        raise RuntimeError("boom")


class TestStreamLifecycle:

    @pytest.mark.asyncio
    async def test_disconnect_cancels_in_flight_call(self):
        client = HangingClient()
        resp = await translate_critique_stream(TranslateCritiqueIn(text="Hello"), credential="key", client=client)

        first = await resp.body_iterator.__anext__()
        await asyncio.wait_for(client.started.wait(), timeout=1)
        await resp.body_iterator.aclose()

        assert event_types(first) == ["state:idle"]
        assert client.cancelled.is_set()

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_logged_and_stream_finishes(self, caplog):
        resp = await translate_critique_stream(
            TranslateCritiqueIn(text="Hello"), credential="key", client=CrashingClient()
        )

        with caplog.at_level(logging.ERROR, logger="translator_critic.routes.translation"):
            body = "".join([frame async for frame in resp.body_iterator])

        assert event_types(body)[-1] == "done"
        assert dict(parse_frames(body))["done"]["status"] == "failed"
        assert any("Streamed run crashed" in r.getMessage() and "boom" in r.getMessage() for r in caplog.records)
