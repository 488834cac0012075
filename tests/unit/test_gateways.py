"""Tests for the httpx-backed gateways using fake clients."""
from __future__ import annotations

from typing import Any, Dict, List

import pytest

from avatar_gateway import AvatarGatewayError, speak
from config import AVATAR_ROUTE, TRANSCRIBE_ROUTE, TURN_ROUTE, default_config, route_for
from llm_gateway import LlmGatewayError, TranscriptionError, generate, transcribe


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeClient:
    def __init__(self, responses: List[FakeResponse]):
        self.responses = list(responses)
        self.requests: List[Dict[str, Any]] = []

    def post(self, url: str, *, headers: Dict[str, str], timeout: float, **kwargs: Any) -> FakeResponse:
        self.requests.append({"url": url, "headers": headers, "timeout": timeout, **kwargs})
        return self.responses.pop(0)


def _chat(text: str) -> FakeResponse:
    return FakeResponse(200, {"choices": [{"message": {"content": text}}]})


@pytest.fixture
def cfg():
    return default_config()


def test_generate_posts_chat_payload(cfg, monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    client = FakeClient([_chat("  Thanks. Q2?  ")])
    route = route_for(cfg, TURN_ROUTE)
    assert generate("sys", "user", cfg=route, client=client) == "Thanks. Q2?"
    request = client.requests[0]
    assert request["url"] == "https://api.openai.com/v1/chat/completions"
    assert request["headers"]["Authorization"] == "Bearer sk-test"
    assert request["json"]["model"] == "gpt-4.1-mini"
    assert request["json"]["temperature"] == 0.4
    assert [m["role"] for m in request["json"]["messages"]] == ["system", "user"]


def test_empty_text_is_retried_then_fails(cfg):
    route = route_for(cfg, TURN_ROUTE)
    client = FakeClient([_chat(""), _chat("second try")])
    assert generate("sys", "user", cfg=route, client=client) == "second try"

    client = FakeClient([_chat(""), _chat("   ")])
    with pytest.raises(LlmGatewayError, match="empty"):
        generate("sys", "user", cfg=route, client=client)


def test_error_status_carries_provider_detail(cfg):
    route = route_for(cfg, TURN_ROUTE)
    client = FakeClient([FakeResponse(429, {"error": {"message": "Rate limit reached"}})])
    with pytest.raises(LlmGatewayError, match="429: Rate limit reached"):
        generate("sys", "user", cfg=route, client=client)
    assert len(client.requests) == 1


def test_transcribe_uploads_multipart(cfg):
    route = route_for(cfg, TRANSCRIBE_ROUTE)
    client = FakeClient([FakeResponse(200, {"text": " hola "})])
    assert transcribe(b"\x00\x01", cfg=route, language="es", client=client) == "hola"
    request = client.requests[0]
    assert request["data"] == {"model": "whisper-1", "language": "es"}
    assert request["files"]["file"][0] == "audio.webm"


def test_transcribe_rejects_empty_audio_and_text(cfg):
    route = route_for(cfg, TRANSCRIBE_ROUTE)
    with pytest.raises(TranscriptionError):
        transcribe(b"", cfg=route, client=FakeClient([]))
    with pytest.raises(TranscriptionError):
        transcribe(b"\x00", cfg=route, client=FakeClient([FakeResponse(200, {"text": ""})]))


def test_speak_posts_repeat_task(cfg):
    route = route_for(cfg, AVATAR_ROUTE)
    client = FakeClient([FakeResponse(200, {"code": 100})])
    speak("sess-1", "Hello", cfg=route, client=client)
    request = client.requests[0]
    assert request["url"] == "https://api.heygen.com/v1/streaming.task"
    assert request["json"] == {"session_id": "sess-1", "text": "Hello", "task_type": "repeat"}
    assert request["timeout"] == 30.0


def test_speak_failure_raises_avatar_error(cfg):
    route = route_for(cfg, AVATAR_ROUTE)
    client = FakeClient([FakeResponse(500, text="boom")])
    with pytest.raises(AvatarGatewayError, match="500"):
        speak("sess-1", "Hello", cfg=route, client=client)
